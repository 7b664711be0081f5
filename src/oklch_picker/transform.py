# transform.py – per-component relationship between origin and result values
#   multiply(v): origin * v      add(v): origin + v      absolute(v): v
#
# Results are rounded to DECIMAL_PLACES so that absolute ↔ relative
# conversions settle on the same displayed number.

from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Real
from typing import Any, Literal, Mapping, get_args

from .oklch import COMPONENT_CONSTRAINTS, OklchComponent, check_component

TransformKind = Literal["multiply", "add", "absolute"]
TRANSFORM_KINDS: tuple[TransformKind, ...] = get_args(TransformKind)

DECIMAL_PLACES = 3

# hue is circular and additive, the rest are scale-like
DEFAULT_TRANSFORM_KINDS: Mapping[OklchComponent, TransformKind] = {
    "l": "multiply",
    "c": "multiply",
    "h": "add",
    "a": "multiply",
}


@dataclass(frozen=True)
class Transform:
    kind: TransformKind
    value: float

    def __post_init__(self) -> None:
        if self.kind not in TRANSFORM_KINDS:
            raise ValueError(f"unknown transform kind '{self.kind}'")
        if isinstance(self.value, bool) or not isinstance(self.value, Real):
            raise ValueError("transform value must be a number")
        if not math.isfinite(self.value):
            raise ValueError("transform value must be finite")
        object.__setattr__(self, "value", float(self.value))

    @classmethod
    def multiply(cls, value: float) -> Transform:
        return cls("multiply", value)

    @classmethod
    def add(cls, value: float) -> Transform:
        return cls("add", value)

    @classmethod
    def absolute(cls, value: float) -> Transform:
        return cls("absolute", value)

    @property
    def is_absolute(self) -> bool:
        return self.kind == "absolute"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "value": self.value}

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Transform:
        kind = str(data.get("kind", "")).strip().lower()
        raw = data.get("value")
        if isinstance(raw, str):
            try:
                raw = float(raw)
            except ValueError:
                raise ValueError("transform value must be a number") from None
        return cls(kind, raw)  # type: ignore[arg-type]


def round_value(value: float) -> float:
    # +0.0 folds a rounded -0.0 away
    return round(float(value), DECIMAL_PLACES) + 0.0


def default_transform(component: OklchComponent) -> Transform:
    """Identity transform for a component: multiply 1 or add 0."""
    kind = DEFAULT_TRANSFORM_KINDS[check_component(component)]
    return Transform(kind, 1.0 if kind == "multiply" else 0.0)


def compute_raw(original: float, transform: Transform) -> float:
    if transform.kind == "multiply":
        return original * transform.value
    if transform.kind == "add":
        return original + transform.value
    return transform.value


def normalize_component(component: OklchComponent, value: float) -> float:
    """Wrap hue into [0, 360), clamp everything else, round to 3 places."""
    if check_component(component) == "h":
        # wrap after rounding so 359.9999 does not surface as 360
        return round_value(round_value(value) % 360.0)
    lo, hi = COMPONENT_CONSTRAINTS[component]
    return round_value(max(lo, min(hi, value)))


def compute(
    original: float, transform: Transform, component: OklchComponent | None = None
) -> float:
    raw = compute_raw(original, transform)
    if component is not None:
        return normalize_component(component, raw)
    return round_value(raw)


def _relative_value(
    component: OklchComponent, original: float, absolute: float
) -> float:
    if component == "h":
        # fold each side first; stepping by 360 alone stalls on huge magnitudes
        diff = math.fmod(absolute, 360.0) - math.fmod(original, 360.0)
        while diff > 180.0:
            diff -= 360.0
        while diff <= -180.0:
            diff += 360.0
        return round_value(diff)
    # a zero origin cannot be scaled; treat it as a neutral factor
    return round_value(absolute / original) if original != 0 else 1.0


def to_absolute(
    component: OklchComponent, original: float, current: Transform
) -> Transform:
    return Transform.absolute(compute(original, current, component))


def to_relative(
    component: OklchComponent, original: float, absolute: float
) -> Transform:
    component = check_component(component)
    value = _relative_value(component, original, absolute)
    return Transform(DEFAULT_TRANSFORM_KINDS[component], value)


def input_bounds(
    component: OklchComponent, transform: Transform
) -> tuple[float, float]:
    """Range an editor should accept for the transform's value."""
    if transform.is_absolute:
        return COMPONENT_CONSTRAINTS[check_component(component)]
    if transform.kind == "add":
        return -math.inf, math.inf
    return 0.0, math.inf


def check_bounds(component: OklchComponent, transform: Transform) -> Transform:
    """Reject a transform whose value lies outside `input_bounds`."""
    lo, hi = input_bounds(component, transform)
    if not lo <= transform.value <= hi:
        raise ValueError(
            f"{transform.kind} value for '{component}' must be within [{lo}, {hi}]"
        )
    return transform


__all__ = [
    "DECIMAL_PLACES",
    "DEFAULT_TRANSFORM_KINDS",
    "TRANSFORM_KINDS",
    "Transform",
    "TransformKind",
    "check_bounds",
    "compute",
    "compute_raw",
    "default_transform",
    "input_bounds",
    "normalize_component",
    "round_value",
    "to_absolute",
    "to_relative",
]
