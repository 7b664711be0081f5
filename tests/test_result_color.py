import pytest

from oklch_picker.oklch import OklchColor
from oklch_picker.presets import PRESETS
from oklch_picker.result_color import ResultColorEngine, format_transform
from oklch_picker.transform import Transform

ORIGIN = OklchColor(0.6179, 0.2114, 280.67, 1.0)
PREFIX = "oklch(from oklch(0.6179 0.2114 280.67 / 1) "


def _close(a: OklchColor, b: OklchColor, tol: float = 1e-3) -> bool:
    dh = abs(a.h - b.h)
    return (
        abs(a.l - b.l) <= tol
        and abs(a.c - b.c) <= tol
        and min(dh, 360.0 - dh) <= tol
        and abs(a.a - b.a) <= tol
    )


def test_default_css():
    engine = ResultColorEngine(ORIGIN)
    assert engine.to_css() == PREFIX + "l c h / alpha)"
    assert engine.result_color == OklchColor(0.618, 0.211, 280.67, 1.0)


def test_css_expressions():
    engine = ResultColorEngine(ORIGIN)
    engine.set_transform("l", Transform.multiply(1.5))
    assert engine.to_css() == PREFIX + "calc(l * 1.5) c h / alpha)"

    engine.set_transform("h", Transform.add(-30))
    assert engine.to_css() == PREFIX + "calc(l * 1.5) c calc(h - 30deg) / alpha)"

    engine.set_transform("h", Transform.absolute(45))
    engine.set_transform("a", Transform.multiply(0.5))
    engine.set_transform("c", Transform.add(0.05))
    assert (
        engine.to_css()
        == PREFIX + "calc(l * 1.5) calc(c + 0.05) 45deg / calc(alpha * 0.5))"
    )


@pytest.mark.parametrize(
    "transform,name,expected",
    [
        (Transform.multiply(1), "l", "l"),
        (Transform.multiply(0), "c", "calc(c * 0)"),
        (Transform.add(0), "h", "h"),
        (Transform.add(15.5), "h", "calc(h + 15.5deg)"),
        (Transform.add(-0.1), "l", "calc(l - 0.1)"),
        (Transform.absolute(0.5), "alpha", "0.5"),
        (Transform.absolute(0), "c", "0"),
        (Transform.absolute(200), "h", "200deg"),
    ],
)
def test_format_transform(transform, name, expected):
    assert format_transform(transform, name) == expected


def test_result_color_is_normalized():
    engine = ResultColorEngine(ORIGIN)
    engine.set_transform("h", Transform.add(-300))
    engine.set_transform("l", Transform.multiply(2))
    engine.set_transform("a", Transform.absolute(0.25))
    result = engine.result_color
    assert result.h == 340.67
    assert result.l == 1
    assert result.a == 0.25
    assert result.c == 0.211


def test_origin_switch_rebases_relative_transforms():
    engine = ResultColorEngine(ORIGIN)
    engine.set_transform("l", Transform.multiply(1.5))
    engine.set_transform("c", Transform.absolute(0.1))
    engine.set_origin_color(PRESETS[1].color)
    assert engine.result_color.l == 0.75
    assert engine.result_color.c == 0.1
    assert engine.transforms["l"] == Transform.multiply(1.5)


SETUPS = [
    {},
    {"l": Transform.multiply(1.5), "h": Transform.add(-30)},
    {"c": Transform.multiply(0.37), "a": Transform.multiply(0.4)},
    {"l": Transform.add(-0.2), "c": Transform.add(0.1), "h": Transform.add(170)},
    {"l": Transform.absolute(0.33), "h": Transform.absolute(10), "a": Transform.absolute(0.5)},
]


@pytest.mark.parametrize("component", ["l", "c", "h", "a"])
@pytest.mark.parametrize("setup", SETUPS)
def test_toggle_keeps_result(component, setup):
    for origin in (ORIGIN, PRESETS[1].color, PRESETS[2].color):
        engine = ResultColorEngine(origin, setup)
        before = engine.result_color
        first = engine.toggle_component(component)
        assert _close(engine.result_color, before)
        second = engine.toggle_component(component)
        assert first.is_absolute != second.is_absolute
        assert _close(engine.result_color, before)


def test_toggle_representation():
    engine = ResultColorEngine(ORIGIN)
    engine.set_transform("h", Transform.add(-30))
    assert engine.toggle_component("h") == Transform.absolute(250.67)
    assert engine.to_css() == PREFIX + "l c 250.67deg / alpha)"
    assert engine.toggle_component("h") == Transform.add(-30)


def test_toggle_far_out_hue():
    engine = ResultColorEngine(ORIGIN)
    engine.set_transform("h", Transform.absolute(1e300))
    relative = engine.toggle_component("h")
    assert relative.kind == "add"
    assert -180 < relative.value <= 180
    assert 0 <= engine.result_color.h < 360


def test_set_component_value_keeps_representation():
    engine = ResultColorEngine(ORIGIN)
    engine.set_component_value("h", 10)
    assert engine.transforms["h"] == Transform.add(89.33)
    assert engine.result_color.h == 10

    engine.set_transform("c", Transform.absolute(0.1))
    engine.set_component_value("c", 0.3)
    assert engine.transforms["c"] == Transform.absolute(0.3)


def test_set_lightness_chroma():
    engine = ResultColorEngine(OklchColor(0.5, 0.2, 100))
    engine.set_lightness_chroma(0.75, 0.1)
    assert engine.transforms["l"] == Transform.multiply(1.5)
    assert engine.transforms["c"] == Transform.multiply(0.5)
    assert engine.result_color.l == 0.75
    assert engine.result_color.c == 0.1


def test_reset_component():
    engine = ResultColorEngine(ORIGIN, {"h": Transform.absolute(45)})
    engine.reset_component("h")
    assert engine.transforms["h"] == Transform.add(0)


def test_transforms_view_is_read_only():
    engine = ResultColorEngine(ORIGIN)
    with pytest.raises(TypeError):
        engine.transforms["l"] = Transform.multiply(2)  # type: ignore[index]
    assert engine.transforms["l"] == Transform.multiply(1)


def test_engines_do_not_share_state():
    a = ResultColorEngine()
    b = ResultColorEngine()
    a.set_transform("l", Transform.multiply(0.5))
    assert b.transforms["l"] == Transform.multiply(1)


def test_unknown_component():
    engine = ResultColorEngine(ORIGIN)
    with pytest.raises(ValueError):
        engine.set_transform("x", Transform.add(1))  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        engine.toggle_component("alpha")  # type: ignore[arg-type]


def test_snapshot():
    engine = ResultColorEngine()
    snap = engine.snapshot()
    assert snap["origin_label"] == "Vibrant Purple"
    assert snap["css"] == PREFIX + "l c h / alpha)"
    assert snap["result_css"] == "oklch(0.618 0.211 280.67 / 1)"
    assert snap["transforms"]["h"] == {"kind": "add", "value": 0.0}
    assert snap["result_hex"].startswith("#")

    engine.set_origin_color(OklchColor(0.4, 0.1, 10))
    assert engine.snapshot()["origin_label"] == "Custom color"
