# background.py – lightness × chroma plane at a fixed hue
#   x: chroma 0 → max_chroma (left → right)
#   y: lightness 1 → 0 (top → bottom)

from __future__ import annotations

import io
import logging
import math
import threading
from dataclasses import dataclass

import numpy as np
from PIL import Image

from .color_math import oklch_to_srgb, srgb_to_u8

log = logging.getLogger(__name__)

DEFAULT_MAX_CHROMA = 0.4


@dataclass(frozen=True)
class GradientParams:
    width: int
    height: int
    hue: float
    max_chroma: float = DEFAULT_MAX_CHROMA

    def __post_init__(self) -> None:
        for name in ("width", "height"):
            v = getattr(self, name)
            if isinstance(v, bool) or not isinstance(v, int) or v < 1:
                raise ValueError(f"{name} must be a positive integer")
        if not math.isfinite(self.hue):
            raise ValueError("hue must be finite")
        if not math.isfinite(self.max_chroma) or self.max_chroma < 0:
            raise ValueError("max_chroma must be a non-negative number")

    def scaled(self, device_pixel_ratio: float) -> GradientParams:
        """Same plane at device-pixel resolution."""
        if not math.isfinite(device_pixel_ratio) or device_pixel_ratio <= 0:
            raise ValueError("device_pixel_ratio must be positive")
        return GradientParams(
            width=max(1, round(self.width * device_pixel_ratio)),
            height=max(1, round(self.height * device_pixel_ratio)),
            hue=self.hue,
            max_chroma=self.max_chroma,
        )


def render_gradient(
    width: int, height: int, hue: float, max_chroma: float = DEFAULT_MAX_CHROMA
) -> np.ndarray:
    """RGBA uint8 raster of shape ``(height, width, 4)``, fully opaque."""
    p = GradientParams(width, height, float(hue), float(max_chroma))
    # linspace degenerates to the start value for a single sample
    lightness = np.linspace(1.0, 0.0, p.height)
    chroma = np.linspace(0.0, p.max_chroma, p.width)
    L, C = np.meshgrid(lightness, chroma, indexing="ij")
    rgb = srgb_to_u8(oklch_to_srgb(L, C, p.hue))
    alpha = np.full((p.height, p.width, 1), 255, dtype=np.uint8)
    return np.concatenate([rgb, alpha], axis=-1)


def plane_to_lc(
    x: float,
    y: float,
    width: float,
    height: float,
    max_chroma: float = DEFAULT_MAX_CHROMA,
) -> tuple[float, float]:
    """Pointer position → (lightness, chroma); the pointer is clamped to the plane."""
    x = max(0.0, min(width, x))
    y = max(0.0, min(height, y))
    return 1.0 - y / height, (x / width) * max_chroma


def lc_to_plane(
    lightness: float,
    chroma: float,
    width: float,
    height: float,
    max_chroma: float = DEFAULT_MAX_CHROMA,
) -> tuple[float, float]:
    return (chroma / max_chroma) * width, (1.0 - lightness) * height


def encode_png(pixels: np.ndarray) -> bytes:
    buf = io.BytesIO()
    # (h, w, 4) uint8 is read as RGBA
    Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8)).save(buf, format="PNG")
    return buf.getvalue()


@dataclass(frozen=True, eq=False)
class Frame:
    params: GradientParams
    pixels: np.ndarray


class BackgroundRenderer:
    """
    Holds the most recently published frame of one picker.

    Each `update` regenerates the whole raster unless the parameters are
    unchanged. A render overtaken by a newer `update` is dropped, so the
    published frame always belongs to the latest parameter set.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._generation = 0
        self._frame: Frame | None = None

    @property
    def frame(self) -> Frame | None:
        with self._lock:
            return self._frame

    def update(
        self,
        width: int,
        height: int,
        hue: float,
        max_chroma: float = DEFAULT_MAX_CHROMA,
    ) -> Frame | None:
        params = GradientParams(width, height, float(hue), float(max_chroma))
        with self._lock:
            if self._frame is not None and self._frame.params == params:
                return self._frame
            self._generation += 1
            generation = self._generation

        pixels = render_gradient(
            params.width, params.height, params.hue, params.max_chroma
        )

        with self._lock:
            if generation != self._generation:
                log.debug("discarding superseded background render %s", params)
                return None
            self._frame = Frame(params, pixels)
            return self._frame


__all__ = [
    "DEFAULT_MAX_CHROMA",
    "BackgroundRenderer",
    "Frame",
    "GradientParams",
    "encode_png",
    "lc_to_plane",
    "plane_to_lc",
    "render_gradient",
]
