# color_math.py – OKLCH → OKLab → linear sRGB → sRGB (Ottosson, MIT)
#   - polar → cartesian hue in degrees
#   - literal OKLab matrices from https://bottosson.github.io/posts/oklab/
#   - IEC 61966-2-1 companding, gamma 2.4
#   - out-of-gamut channels are hard-clipped, never gamut-mapped

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike

# --- constants ---------------------------------------------------------------
_GAMMA = 2.4
_THRESHOLD = 0.0031308
_DEG = np.pi / 180.0

# OKLab → LMS (cube-root domain)
_OKLAB_TO_LMS = np.array(
    [
        [1.0, 0.3963377774, 0.2158037573],
        [1.0, -0.1055613458, -0.0638541728],
        [1.0, -0.0894841775, -1.2914855480],
    ],
    dtype=np.float64,
)
# LMS → linear sRGB
_LMS_TO_RGB = np.array(
    [
        [4.0767416621, -3.3077115913, 0.2309699292],
        [-1.2684380046, 2.6097574011, -0.3413193965],
        [-0.0041960863, -0.7034186147, 1.7076147010],
    ],
    dtype=np.float64,
)


# --- 1) polar → cartesian ----------------------------------------------------
def oklch_to_oklab(l: ArrayLike, c: ArrayLike, h: ArrayLike):
    """OKLCH → OKLab. Hue in degrees."""
    l = np.asarray(l, dtype=np.float64)
    c = np.asarray(c, dtype=np.float64)
    h_rad = np.asarray(h, dtype=np.float64) * _DEG
    return l, c * np.cos(h_rad), c * np.sin(h_rad)


# --- 2) OKLab → linear sRGB --------------------------------------------------
def oklab_to_linear_rgb(L: ArrayLike, a: ArrayLike, b: ArrayLike):
    lab = np.stack(np.broadcast_arrays(L, a, b), axis=-1).astype(np.float64)
    lms = (lab @ _OKLAB_TO_LMS.T) ** 3  # undo the cube-root nonlinearity
    rgb = lms @ _LMS_TO_RGB.T
    return rgb[..., 0], rgb[..., 1], rgb[..., 2]


# --- 3) companding -----------------------------------------------------------
def linear_to_srgb(x: ArrayLike) -> np.ndarray:
    x = np.asarray(x, dtype=np.float64)
    m = x > _THRESHOLD
    out = np.empty_like(x)
    out[m] = 1.055 * np.power(x[m], 1.0 / _GAMMA) - 0.055
    out[~m] = x[~m] * 12.92
    return out


# --- 4) composite ------------------------------------------------------------
def oklch_to_srgb(l: ArrayLike, c: ArrayLike, h: ArrayLike) -> np.ndarray:
    """OKLCH → gamma-encoded sRGB in [0, 1], shape ``(..., 3)``."""
    rgb = np.stack(oklab_to_linear_rgb(*oklch_to_oklab(l, c, h)), axis=-1)
    return np.clip(linear_to_srgb(rgb), 0.0, 1.0)


def srgb_to_u8(rgb: ArrayLike) -> np.ndarray:
    return np.round(np.clip(rgb, 0.0, 1.0) * 255.0).astype(np.uint8)


def rgb01_to_hex(rgb: ArrayLike) -> str:
    u8 = srgb_to_u8(rgb)
    return f"#{u8[0]:02x}{u8[1]:02x}{u8[2]:02x}"


__all__ = [
    "linear_to_srgb",
    "oklab_to_linear_rgb",
    "oklch_to_oklab",
    "oklch_to_srgb",
    "rgb01_to_hex",
    "srgb_to_u8",
]
