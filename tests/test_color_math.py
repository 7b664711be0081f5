import numpy as np
from coloraide import Color

from oklch_picker.color_math import (
    linear_to_srgb,
    oklab_to_linear_rgb,
    oklch_to_oklab,
    oklch_to_srgb,
    rgb01_to_hex,
    srgb_to_u8,
)


def test_white_and_black():
    assert np.allclose(oklch_to_srgb(1.0, 0.0, 0.0), [1, 1, 1], atol=1e-4)
    assert np.allclose(oklch_to_srgb(0.0, 0.0, 0.0), [0, 0, 0], atol=1e-9)


def test_polar_to_cartesian():
    L, a, b = oklch_to_oklab(0.5, 0.2, 90.0)
    assert float(L) == 0.5
    assert abs(float(a)) < 1e-12
    assert np.isclose(float(b), 0.2)

    _, a, b = oklch_to_oklab(0.5, 0.2, 180.0)
    assert np.isclose(float(a), -0.2)
    assert abs(float(b)) < 1e-12


def test_companding_branches():
    assert np.isclose(linear_to_srgb(0.0031308), 0.0031308 * 12.92)
    assert np.isclose(linear_to_srgb(1.0), 1.0)
    assert np.isclose(linear_to_srgb(0.5), 1.055 * 0.5 ** (1 / 2.4) - 0.055)
    # negative input takes the linear branch instead of producing NaN
    assert np.isclose(linear_to_srgb(-0.1), -1.292)


def test_out_of_gamut_is_clipped():
    rgb = oklch_to_srgb(0.5, 0.4, 30.0)
    assert np.all((rgb >= 0.0) & (rgb <= 1.0))
    assert rgb[1] == 0.0


def test_broadcasts_over_arrays():
    l = np.linspace(0, 1, 5)[:, None]
    c = np.linspace(0, 0.3, 7)[None, :]
    rgb = oklch_to_srgb(l, c, 120.0)
    assert rgb.shape == (5, 7, 3)


def test_nan_propagates():
    assert np.all(np.isnan(oklch_to_srgb(np.nan, 0.1, 10.0)))


def test_matches_coloraide_linear_rgb():
    for l, c, h in [(0.6179, 0.2114, 280.67), (0.5, 0.15, 220), (0.6, 0.18, 142)]:
        ref = Color("oklch", [l, c, h]).convert("srgb-linear").coords()
        ours = oklab_to_linear_rgb(*oklch_to_oklab(l, c, h))
        assert np.allclose([float(v) for v in ours], ref, atol=1e-3)


def test_matches_coloraide_srgb():
    for l, c, h in [(0.7, 0.1, 30), (0.45, 0.12, 260), (0.9, 0.05, 100)]:
        ref = Color("oklch", [l, c, h]).convert("srgb").coords()
        assert np.allclose(oklch_to_srgb(l, c, h), ref, atol=1e-3)


def test_hex_and_u8():
    assert rgb01_to_hex([1.0, 0.0, 0.0]) == "#ff0000"
    assert rgb01_to_hex([1.2, -0.3, 0.5]) == "#ff0080"
    assert srgb_to_u8([0.0, 0.5, 1.0]).tolist() == [0, 128, 255]
