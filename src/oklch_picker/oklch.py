from __future__ import annotations

import math
import re
from dataclasses import dataclass, replace as _replace
from decimal import Decimal
from typing import Any, Literal, Mapping, get_args

from coloraide import Color

from .color_math import oklch_to_srgb, rgb01_to_hex

OklchComponent = Literal["l", "c", "h", "a"]

COMPONENTS: tuple[OklchComponent, ...] = get_args(OklchComponent)

COMPONENT_CONSTRAINTS: Mapping[OklchComponent, tuple[float, float]] = {
    "l": (0.0, 1.0),
    "c": (0.0, 0.4),
    "h": (0.0, 360.0),
    "a": (0.0, 1.0),
}

# CSS relative color syntax spells the alpha channel out
CSS_CHANNEL_NAMES: Mapping[OklchComponent, str] = {
    "l": "l",
    "c": "c",
    "h": "h",
    "a": "alpha",
}


def check_component(component: str) -> OklchComponent:
    if component not in COMPONENTS:
        raise ValueError(f"unknown component '{component}'")
    return component  # type: ignore[return-value]


_EXPONENT_ZEROS = re.compile(r"e([+-])0+(?=\d)")


def format_number(value: float) -> str:
    """Render a number the way JavaScript's ``String(n)`` does."""
    v = float(value)
    if v == 0:
        return "0"
    if v.is_integer() and abs(v) < 1e21:
        return str(int(v))
    text = repr(v)
    if "e" not in text:
        return text
    # JS only switches to exponent form outside [1e-6, 1e21)
    if 1e-6 <= abs(v) < 1e21:
        return format(Decimal(text), "f")
    return _EXPONENT_ZEROS.sub(r"e\1", text)


def _number(data: Mapping[str, Any], key: str, default: float | None = None) -> float:
    raw = data.get(key, default)
    if raw is None:
        raise ValueError(f"missing field '{key}'")
    if isinstance(raw, bool):
        raise ValueError(f"field '{key}' must be a number")
    try:
        v = float(raw)
    except (TypeError, ValueError):
        raise ValueError(f"field '{key}' must be a number") from None
    if not math.isfinite(v):
        raise ValueError(f"field '{key}' must be finite")
    return v


@dataclass(frozen=True)
class OklchColor:
    l: float
    c: float
    h: float
    a: float = 1.0

    def __getitem__(self, component: OklchComponent) -> float:
        return getattr(self, check_component(component))

    def replace(self, component: OklchComponent, value: float) -> OklchColor:
        return _replace(self, **{check_component(component): float(value)})

    def to_css(self) -> str:
        return (
            f"oklch({format_number(self.l)} {format_number(self.c)} "
            f"{format_number(self.h)} / {format_number(self.a)})"
        )

    def to_hex(self) -> str:
        """Hard-clipped sRGB hex; alpha is dropped."""
        return rgb01_to_hex(oklch_to_srgb(self.l, self.c, self.h))

    def to_dict(self) -> dict[str, float]:
        return {"l": self.l, "c": self.c, "h": self.h, "a": self.a}

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> OklchColor:
        return cls(
            l=_number(data, "l"),
            c=_number(data, "c"),
            h=_number(data, "h"),
            a=_number(data, "a", 1.0),
        )

    @classmethod
    def parse(cls, text: str) -> OklchColor:
        """Any CSS color ColorAide understands, converted to OKLCH."""
        try:
            color = Color((text or "").strip()).convert("oklch")
        except ValueError as exc:
            raise ValueError(f"invalid color: {text!r}") from exc
        l, c, h = (float(color[ch]) for ch in ("l", "c", "h"))
        alpha = float(color["alpha"])
        # achromatic colors carry an undefined hue
        return cls(
            l=l,
            c=0.0 if math.isnan(c) else c,
            h=0.0 if math.isnan(h) else h % 360.0,
            a=1.0 if math.isnan(alpha) else alpha,
        )


__all__ = [
    "COMPONENTS",
    "COMPONENT_CONSTRAINTS",
    "CSS_CHANNEL_NAMES",
    "OklchColor",
    "OklchComponent",
    "check_component",
    "format_number",
]
