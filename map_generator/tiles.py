# map_generator/tiles.py

"""
================================================================================
TILE QUOTA ALLOCATION
================================================================================
This module turns the free-form tile list of a request into the exact,
integer placement plan used by the renderer.

Data Contract:
---------------
- Inputs:
    - A comma separated list of "WxH" or "WxH*count" tokens.
    - Legacy fixed counts for the 2x2, 2x1 and 1x1 shapes.
    - A global multiplier ("ka") and an optional total cap.
- Outputs:
    - A list of TileBatch objects, one per requested shape, in request order.
- Side Effects: None.
- Invariants:
    - Every batch has positive dimensions and a positive count.
    - With a positive cap the batch counts never add up to more than the cap.
    - Rounding is done by largest remainder with a stable index tie-break, so
      the same request always yields the same plan.
================================================================================
"""
import math
from dataclasses import dataclass
from typing import Dict, List, Tuple

from . import config as DEFAULTS
from .errors import AllocationError, ParameterError
from .mathutils import round_half_away


@dataclass
class TileSpec:
    """A requested shape. The count may be fractional until allocation."""
    width: int
    height: int
    count: float


@dataclass(frozen=True)
class TileBatch:
    """A final group of identical tiles to place."""
    width: int
    height: int
    count: int


def default_tile_specs() -> List[TileSpec]:
    return parse_tile_list(DEFAULTS.DEFAULT_TILE_STRING)


def _parse_token(token: str) -> Tuple[int, int, float]:
    dims, sep, raw_count = token.partition("*")
    count = 1.0
    if sep and raw_count.strip():
        try:
            count = float(raw_count.strip())
        except ValueError:
            raise ParameterError(f"invalid tile count in {token!r}") from None
        if not math.isfinite(count):
            raise ParameterError(f"invalid tile count in {token!r}")

    raw_w, sep, raw_h = dims.partition("x")
    if not sep:
        raise ParameterError(f"invalid tile dimensions in {token!r}")
    try:
        width = int(raw_w.strip())
    except ValueError:
        raise ParameterError(f"invalid tile width in {token!r}") from None
    try:
        height = int(raw_h.strip())
    except ValueError:
        raise ParameterError(f"invalid tile height in {token!r}") from None

    if width <= 0 or height <= 0:
        raise ParameterError(f"tile dimensions must be positive in {token!r}")
    return width, height, count


def parse_tile_list(text: str) -> List[TileSpec]:
    """
    Parses a tile list such as "2x2*400,2x1*300,1x1". A blank string yields
    the default tile list. Tokens with a non-positive count are dropped.

    Raises:
        ParameterError: A token is malformed or has non-positive dimensions.
        AllocationError: Nothing is left after parsing.
    """
    if not text.strip():
        return default_tile_specs()

    specs = []
    for part in text.split(","):
        part = part.strip()
        if not part:
            continue
        width, height, count = _parse_token(part)
        if count <= 0:
            continue
        specs.append(TileSpec(width, height, count))

    if not specs:
        raise AllocationError("no valid tile definitions found")
    return specs


def apply_legacy_tiles(specs: List[TileSpec], legacy_counts: Dict[str, int]) -> List[TileSpec]:
    """
    Adds the legacy fixed counts (n22, n21, n11) to the matching shape, or
    appends the shape if the tile list does not mention it.
    """
    for key, (width, height) in DEFAULTS.LEGACY_TILE_SHAPES.items():
        extra = legacy_counts.get(key, 0)
        if extra <= 0:
            continue
        for spec in specs:
            if spec.width == width and spec.height == height:
                spec.count += float(extra)
                break
        else:
            specs.append(TileSpec(width, height, float(extra)))
    return specs


def apply_multiplier(specs: List[TileSpec], ka: float) -> None:
    """
    Scales every requested count in place. A multiplier of exactly 0 means
    "leave the counts alone"; a negative one is clamped to 0, which zeroes
    every count.
    """
    if ka == 0:
        return
    if ka < 0:
        ka = 0.0
    if ka == 1:
        return
    for spec in specs:
        spec.count *= ka


def finalize_tile_batches(specs: List[TileSpec], cap: int) -> List[TileBatch]:
    """
    Apportions integer counts by largest remainder.

    When a positive cap is smaller than the requested total, every count is
    scaled down proportionally and the batches add up to exactly the cap.
    """
    total_requested = sum(spec.count for spec in specs)
    if total_requested == 0:
        return []

    scale = 1.0
    if cap > 0 and total_requested > cap:
        scale = cap / total_requested

    scaled_totals = [0.0] * len(specs)
    floors = [0] * len(specs)
    fractions = []  # (index, fractional remainder)
    for index, spec in enumerate(specs):
        adjusted = spec.count * scale
        if adjusted <= 0:
            continue
        scaled_totals[index] = adjusted
        base = int(math.floor(adjusted))
        floors[index] = base
        remainder = adjusted - base
        if remainder > 0:
            fractions.append((index, remainder))
    total_floors = sum(floors)

    sum_scaled = sum(scaled_totals)
    if cap > 0:
        if scale < 1:
            target_total = cap
        else:
            target_total = min(cap, round_half_away(sum_scaled))
    else:
        target_total = round_half_away(sum_scaled)

    if target_total < total_floors:
        # Take units away from the smallest remainders first.
        fractions.sort(key=lambda item: (item[1], item[0]))
        excess = min(total_floors - target_total, len(fractions))
        for index, _ in fractions[:excess]:
            if floors[index] > 0:
                floors[index] -= 1
        total_floors -= excess

    if total_floors < target_total:
        # Hand the missing units to the largest remainders first.
        fractions.sort(key=lambda item: (-item[1], item[0]))
        shortfall = min(target_total - total_floors, len(fractions))
        for index, _ in fractions[:shortfall]:
            floors[index] += 1

    return [
        TileBatch(spec.width, spec.height, count)
        for spec, count in zip(specs, floors)
        if count > 0
    ]


def allocate_tiles(tile_string: str, ka: float, cap: int, legacy_counts: Dict[str, int]) -> List[TileBatch]:
    """
    Runs the full allocation: parse, merge legacy counts, apply the
    multiplier and apportion.

    Raises:
        ParameterError: The tile list is malformed.
        AllocationError: Nothing is left to place.
    """
    specs = parse_tile_list(tile_string)
    specs = apply_legacy_tiles(specs, legacy_counts)
    apply_multiplier(specs, ka)
    batches = finalize_tile_batches(specs, cap)
    if not batches:
        raise AllocationError("no tiles to place after cap adjustment")
    return batches
