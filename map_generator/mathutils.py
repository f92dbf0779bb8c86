# map_generator/mathutils.py

"""
Small scalar helpers shared by the allocator, the placement strategies and
the color mapper. Pure functions, no state.
"""
import math


def clamp(value: float, lower: float, upper: float) -> float:
    if value < lower:
        return lower
    if value > upper:
        return upper
    return value


def clamp_int(value: int, lower: int, upper: int) -> int:
    if value < lower:
        return lower
    if value > upper:
        return upper
    return value


def round_half_away(value: float) -> int:
    """Rounds to the nearest integer, with halves rounded away from zero."""
    if value < 0:
        return -int(math.floor(-value + 0.5))
    return int(math.floor(value + 0.5))
