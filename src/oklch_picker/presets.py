from __future__ import annotations

from typing import NamedTuple

from .oklch import OklchColor

CUSTOM_LABEL = "Custom color"


class Preset(NamedTuple):
    label: str
    color: OklchColor


PRESETS: tuple[Preset, ...] = (
    Preset("Vibrant Purple", OklchColor(0.6179, 0.2114, 280.67, 1.0)),
    Preset("Ocean Blue", OklchColor(0.5, 0.15, 220.0, 1.0)),
    Preset("Forest Green", OklchColor(0.6, 0.18, 142.0, 1.0)),
)

DEFAULT_ORIGIN = PRESETS[0].color


def find_preset(color: OklchColor) -> Preset | None:
    for preset in PRESETS:
        if preset.color == color:
            return preset
    return None


def preset_label(color: OklchColor) -> str:
    preset = find_preset(color)
    return preset.label if preset else CUSTOM_LABEL


def get_preset(key: int | str) -> Preset:
    """Look a preset up by index or (case-insensitive) label."""
    if isinstance(key, int) and not isinstance(key, bool):
        if 0 <= key < len(PRESETS):
            return PRESETS[key]
        raise KeyError(f"no preset at index {key}")
    wanted = str(key).strip().lower()
    for preset in PRESETS:
        if preset.label.lower() == wanted:
            return preset
    raise KeyError(f"unknown preset '{key}'")


__all__ = [
    "CUSTOM_LABEL",
    "DEFAULT_ORIGIN",
    "PRESETS",
    "Preset",
    "find_preset",
    "get_preset",
    "preset_label",
]
