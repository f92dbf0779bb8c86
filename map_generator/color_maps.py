# map_generator/color_maps.py

"""
================================================================================
SHARED COLOR MAPPING UTILITIES
================================================================================
This module contains the functions for converting a coverage grid (how many
tiles overlap each pixel) into an RGBA color array.

It is designed to be a pure, stateless utility with no dependency on the
HTTP layer, allowing it to be used by both the web service and the offline
renderer script.
================================================================================
"""
import math
from typing import Tuple

import numpy as np

from . import config as DEFAULTS
from .mathutils import clamp

RGBA = Tuple[int, int, int, int]


def _to_channel(value: float) -> int:
    if value < 0:
        return 0
    if value > 255:
        return 255
    return int(math.floor(value + 0.5))


def blend_color(a: RGBA, b: RGBA, t: float) -> RGBA:
    """
    Linear blend of two RGBA colors; every channel, alpha included, is
    interpolated on its own. A blend that comes out fully transparent is made
    opaque so heavy overlap never disappears.
    """
    alpha = (1 - t) * a[3] + t * b[3]
    if alpha == 0:
        alpha = 255.0
    return (
        _to_channel((1 - t) * a[0] + t * b[0]),
        _to_channel((1 - t) * a[1] + t * b[1]),
        _to_channel((1 - t) * a[2] + t * b[2]),
        _to_channel(alpha),
    )


def coverage_ratio(coverage: int, brown_cap: int, log_tone: bool) -> float:
    """Position of a coverage value on the base -> saturated gradient, in [0, 1]."""
    brown_cap = max(1, brown_cap)
    if log_tone:
        ratio = math.log(coverage) / math.log(brown_cap + 1)
    else:
        ratio = (coverage - 1) / brown_cap
    return clamp(ratio, 0.0, 1.0)


def coverage_to_color(coverage: int, brown_cap: int, log_tone: bool,
                      base: RGBA = DEFAULTS.COLOR_BASE,
                      saturated: RGBA = DEFAULTS.COLOR_SATURATED) -> RGBA:
    """Maps the number of tiles covering one pixel to its color."""
    if coverage <= 0:
        return DEFAULTS.COLOR_TRANSPARENT
    if coverage == 1:
        return tuple(base)
    return blend_color(base, saturated, coverage_ratio(coverage, brown_cap, log_tone))


# --- Color Lookup Table (LUT) Generation ---
def create_coverage_lut(max_coverage: int, brown_cap: int, log_tone: bool,
                        base: RGBA = DEFAULTS.COLOR_BASE,
                        saturated: RGBA = DEFAULTS.COLOR_SATURATED) -> np.ndarray:
    """Creates a LUT where the index is the coverage and the value is the RGBA color."""
    return np.array(
        [coverage_to_color(c, brown_cap, log_tone, base, saturated) for c in range(max(0, max_coverage) + 1)],
        dtype=np.uint8,
    )


def get_coverage_color_array(coverage: np.ndarray, coverage_lut: np.ndarray) -> np.ndarray:
    """
    Converts a (height, width) coverage grid into a (height, width, 4) RGBA
    array using a pre-computed LUT. This is a very fast operation.
    """
    return coverage_lut[coverage]


def render_coverage(coverage: np.ndarray, brown_cap: int, log_tone: bool, background_alpha: int,
                    base: RGBA = DEFAULTS.COLOR_BASE,
                    saturated: RGBA = DEFAULTS.COLOR_SATURATED) -> np.ndarray:
    """
    Builds the final RGBA raster: covered pixels take their coverage color,
    uncovered pixels keep the black background at the requested alpha.
    """
    height, width = coverage.shape
    alpha = int(clamp(background_alpha, 0, 255))
    raster = np.zeros((height, width, 4), dtype=np.uint8)
    raster[..., 3] = alpha

    max_coverage = int(coverage.max()) if coverage.size else 0
    if max_coverage <= 0:
        return raster

    coverage_lut = create_coverage_lut(max_coverage, brown_cap, log_tone, base, saturated)
    covered = coverage > 0
    raster[covered] = get_coverage_color_array(coverage, coverage_lut)[covered]
    return raster
