"""
Color-space math for the pixel engine.

HSV/RGB conversion, luminance, color distance, distinct-color generation and
the segment recoloring schemes. Rounding is half-up so scheme colors are
reproducible byte for byte.
"""

import math
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from core.constants import BasicTransformDefaults, ColorConstants
from core.enums import ColorScheme
from core.utils.enum_converter import parse_enum

RGB = Tuple[int, int, int]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def hsv_to_rgb(h: float, s: float, v: float) -> RGB:
    """
    Convert HSV to RGB.

    Args:
        h: Hue in degrees (any value, wrapped into [0, 360))
        s: Saturation (0-1)
        v: Value/brightness (0-1)

    Returns:
        (r, g, b) tuple with each component in 0-255
    """
    h = ((h % 360) + 360) % 360

    if s == 0:
        gray = _round_half_up(v * 255)
        return gray, gray, gray

    sector = math.floor(h / 60)
    f = h / 60 - sector
    p = v * (1 - s)
    q = v * (1 - f * s)
    t = v * (1 - (1 - f) * s)

    r, g, b = {
        0: (v, t, p),
        1: (q, v, p),
        2: (p, v, t),
        3: (p, q, v),
        4: (t, p, v),
    }.get(sector % 6, (v, p, q))

    return _round_half_up(r * 255), _round_half_up(g * 255), _round_half_up(b * 255)


def rgb_to_hsv(r: float, g: float, b: float) -> Tuple[int, float, float]:
    """
    Convert RGB to HSV.

    Args:
        r: Red (0-255)
        g: Green (0-255)
        b: Blue (0-255)

    Returns:
        (h, s, v) with h a whole degree in [0, 360) and s, v in 0-1
    """
    r, g, b = r / 255, g / 255, b / 255
    high = max(r, g, b)
    low = min(r, g, b)
    delta = high - low

    if delta == 0:
        hue = 0.0
    elif high == r:
        hue = math.fmod((g - b) / delta, 6)
    elif high == g:
        hue = (b - r) / delta + 2
    else:
        hue = (r - g) / delta + 4

    degrees = _round_half_up(hue * 60)
    if degrees < 0:
        degrees += 360
    degrees %= 360

    saturation = 0.0 if high == 0 else delta / high
    return degrees, saturation, high


def luminance(r: float, g: float, b: float) -> float:
    """Perceived brightness of an RGB color in 0-1."""
    return (
        BasicTransformDefaults.LUMA_R * r
        + BasicTransformDefaults.LUMA_G * g
        + BasicTransformDefaults.LUMA_B * b
    ) / 255


def color_distance(first: Sequence[float], second: Sequence[float]) -> float:
    """Euclidean distance between two RGB triples."""
    return math.sqrt(
        (second[0] - first[0]) ** 2 + (second[1] - first[1]) ** 2 + (second[2] - first[2]) ** 2
    )


def distinct_colors(
    count: int,
    saturation: float = ColorConstants.DISTINCT_SATURATION,
    value: float = ColorConstants.DISTINCT_VALUE,
    rng: Optional[np.random.Generator] = None,
) -> List[RGB]:
    """
    Generate visually distinct colors by stepping the hue with the golden ratio.

    Args:
        count: Number of colors to generate
        saturation: Saturation for every color (0-1)
        value: Value for every color (0-1)
        rng: Random generator used to seed the starting hue. A fresh unseeded
            generator is used when omitted, so results differ run to run.

    Returns:
        List of (r, g, b) tuples
    """
    if rng is None:
        rng = np.random.default_rng()

    hue = float(rng.random())
    colors = []
    for _ in range(count):
        hue = (hue + ColorConstants.GOLDEN_RATIO_CONJUGATE) % 1
        colors.append(hsv_to_rgb(hue * 360, saturation, value))
    return colors


def preserve_luminance(
    r: float, g: float, b: float, target_hue: float, target_saturation: float
) -> RGB:
    """
    Find the color with the given hue and saturation whose luminance is closest
    to that of (r, g, b).

    The value channel is brute-forced over 0.10, 0.15, ... 1.00; the first
    candidate with the smallest luminance difference wins.
    """
    source = luminance(r, g, b)
    best_rgb: RGB = (0, 0, 0)
    best_diff = math.inf

    for test_value in np.linspace(
        ColorConstants.LUMINANCE_SCAN_START,
        ColorConstants.LUMINANCE_SCAN_STOP,
        ColorConstants.LUMINANCE_SCAN_STEPS,
    ):
        candidate = hsv_to_rgb(target_hue, target_saturation, float(test_value))
        diff = abs(luminance(*candidate) - source)
        if diff < best_diff:
            best_diff = diff
            best_rgb = candidate

    return best_rgb


def scheme_color(
    scheme: ColorScheme,
    index: int,
    count: int,
    mean_color: Sequence[float],
    rng: np.random.Generator,
) -> RGB:
    """
    Display color for the index-th of count segments under a color scheme.

    Args:
        scheme: Recoloring scheme
        index: Position of the segment in the representative list
        count: Number of representatives
        mean_color: The segment's mean source color (used by preserveBrightness)
        rng: Random generator (used by preserveBrightness)
    """
    if scheme == ColorScheme.PASTEL:
        return hsv_to_rgb(index / count * 360, *ColorConstants.PASTEL_SV)

    if scheme == ColorScheme.GRAYSCALE:
        gray = ColorConstants.GRAYSCALE_TOP - _round_half_up(
            index / count * ColorConstants.GRAYSCALE_SPAN
        )
        return gray, gray, gray

    if scheme == ColorScheme.HIGH_CONTRAST:
        return hsv_to_rgb((index * ColorConstants.GOLDEN_ANGLE) % 360, *ColorConstants.HIGH_CONTRAST_SV)

    if scheme == ColorScheme.PRESERVE_BRIGHTNESS:
        brightness = luminance(*mean_color)
        hue = float(rng.random()) * 360
        return hsv_to_rgb(hue, ColorConstants.PRESERVE_BRIGHTNESS_SATURATION, brightness)

    return hsv_to_rgb(index / count * 360, *ColorConstants.RAINBOW_SV)


def assign_segment_colors(
    representatives: Sequence[int],
    mean_colors: Sequence[Sequence[float]],
    scheme,
    rng: Optional[np.random.Generator] = None,
) -> Dict[int, RGB]:
    """
    Assign a display color to every representative segment.

    Args:
        representatives: Representative segment ids in display order
        mean_colors: Mean source color per segment id
        scheme: ColorScheme or scheme name; unknown names fall back to rainbow
        rng: Random generator for preserveBrightness

    Returns:
        Mapping of representative id to (r, g, b)
    """
    resolved = parse_enum(scheme, ColorScheme, ColorScheme.RAINBOW, warn=True)

    if rng is None:
        rng = np.random.default_rng()

    count = len(representatives)
    return {
        segment: scheme_color(resolved, i, count, mean_colors[segment], rng)
        for i, segment in enumerate(representatives)
    }
