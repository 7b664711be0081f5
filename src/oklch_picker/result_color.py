# result_color.py – origin color + per-component transforms → result color
#   The CSS form keeps the origin and spells each transform as a channel
#   expression: oklch(from <origin> calc(l * 1.2) c calc(h - 30deg) / alpha)

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Mapping

from .oklch import (
    COMPONENTS,
    CSS_CHANNEL_NAMES,
    OklchColor,
    OklchComponent,
    check_component,
    format_number,
)
from .presets import DEFAULT_ORIGIN, preset_label
from .transform import (
    Transform,
    compute,
    default_transform,
    to_absolute,
    to_relative,
)

log = logging.getLogger(__name__)

Transforms = Mapping[OklchComponent, Transform]


def identity_transforms() -> dict[OklchComponent, Transform]:
    return {k: default_transform(k) for k in COMPONENTS}


def format_transform(transform: Transform, name: str) -> str:
    """One channel of a CSS relative color expression."""
    unit = "deg" if name == "h" else ""
    v = transform.value
    if transform.kind == "multiply":
        return name if v == 1 else f"calc({name} * {format_number(v)})"
    if transform.kind == "add":
        if v == 0:
            return name
        sign = "+" if v >= 0 else "-"
        return f"calc({name} {sign} {format_number(abs(v))}{unit})"
    return f"{format_number(v)}{unit}"


class ResultColorEngine:
    """
    State of one relative color picker: an origin color plus one transform
    per OKLCH component. The result color and its CSS are derived on every
    read. Instances are not shared between sessions.
    """

    def __init__(
        self,
        origin_color: OklchColor = DEFAULT_ORIGIN,
        transforms: Transforms | None = None,
    ) -> None:
        self._origin = origin_color
        self._transforms = identity_transforms()
        for component, transform in (transforms or {}).items():
            self.set_transform(component, transform)

    # ---- state ----

    @property
    def origin_color(self) -> OklchColor:
        return self._origin

    @property
    def transforms(self) -> Transforms:
        return MappingProxyType(dict(self._transforms))

    def set_origin_color(self, color: OklchColor) -> None:
        # transforms are kept, so relative ones re-base onto the new origin
        self._origin = color
        log.debug("origin set to %s", color.to_css())

    def set_transform(self, component: OklchComponent, transform: Transform) -> None:
        self._transforms[check_component(component)] = transform

    def toggle_component(self, component: OklchComponent) -> Transform:
        """Flip between absolute and relative form; the result value holds."""
        current = self._transforms[check_component(component)]
        original = self._origin[component]
        if current.is_absolute:
            new = to_relative(component, original, current.value)
        else:
            new = to_absolute(component, original, current)
        self._transforms[component] = new
        log.debug("toggled %s: %s -> %s", component, current, new)
        return new

    def reset_component(self, component: OklchComponent) -> None:
        self._transforms[check_component(component)] = default_transform(component)

    def set_component_value(self, component: OklchComponent, value: float) -> None:
        """Aim a component at a result value, keeping its representation."""
        current = self._transforms[check_component(component)]
        if current.is_absolute:
            self._transforms[component] = Transform.absolute(value)
        else:
            self._transforms[component] = to_relative(
                component, self._origin[component], value
            )

    def set_lightness_chroma(self, lightness: float, chroma: float) -> None:
        self.set_component_value("c", chroma)
        self.set_component_value("l", lightness)

    # ---- derived ----

    @property
    def result_color(self) -> OklchColor:
        values = {
            k: compute(self._origin[k], self._transforms[k], k) for k in COMPONENTS
        }
        return OklchColor(**values)

    def to_css(self) -> str:
        exprs = [
            format_transform(self._transforms[k], CSS_CHANNEL_NAMES[k])
            for k in COMPONENTS
        ]
        l, c, h, a = exprs
        return f"oklch(from {self._origin.to_css()} {l} {c} {h} / {a})"

    def result_css(self) -> str:
        return self.result_color.to_css()

    def snapshot(self) -> dict[str, Any]:
        result = self.result_color
        return {
            "origin": self._origin.to_dict(),
            "origin_label": preset_label(self._origin),
            "transforms": {k: t.to_dict() for k, t in self._transforms.items()},
            "result": result.to_dict(),
            "result_css": result.to_css(),
            "result_hex": result.to_hex(),
            "css": self.to_css(),
        }


__all__ = [
    "ResultColorEngine",
    "Transforms",
    "format_transform",
    "identity_transforms",
]
