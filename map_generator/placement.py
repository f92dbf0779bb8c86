# map_generator/placement.py

"""
================================================================================
TILE PLACEMENT STRATEGIES
================================================================================
This module contains the PlacementGenerator class, which decides where each
tile instance lands on the canvas.

Data Contract:
---------------
- Inputs (on initialization):
    - Canvas width and height in pixels.
    - The distribution mode and its settings (rings, islands).
    - rng: The random stream of the current request. Anything exposing
      random(), integers(n) and normal(loc, scale) works, which lets tests
      inject a fixed sequence.
- Public Methods:
    - place(tile_width, tile_height): Returns the (x, y) top-left corner.
    - record_placement(x, y, tile_width, tile_height): Feeds a placed tile
      into the running centroid.
- Side Effects: Consumes the random stream.
- Invariants:
    - A tile that fits is always placed fully inside the canvas.
    - Every retry loop is bounded and ends in a uniform random placement,
      so place() cannot fail.
    - One instance belongs to one generation call. Nothing is shared.
================================================================================
"""
import logging
import math
from typing import List, Optional, Tuple

from . import config as DEFAULTS
from .mathutils import clamp, clamp_int, round_half_away

logger = logging.getLogger(__name__)

Point = Tuple[int, int]


class PlacementGenerator:
    """
    Places tiles on a canvas using one of four distribution strategies.

    Only the geometry of the active mode is built. A strategy that falls back
    to the ring strategy in another mode finds no rings and ends up with a
    uniform random placement.
    """

    def __init__(self, width: int, height: int, mode: str, rng,
                 rings: int = DEFAULTS.DEFAULT_RINGS,
                 ring_start: float = DEFAULTS.DEFAULT_RING_START,
                 ring_end: float = DEFAULTS.DEFAULT_RING_END,
                 islands: int = DEFAULTS.DEFAULT_ISLANDS,
                 island_radius_fraction: float = DEFAULTS.DEFAULT_ISLAND_RADIUS_FRACTION):
        self.width = width
        self.height = height
        self.mode = mode.lower()
        self.rings = rings
        self.ring_start = ring_start
        self.ring_end = ring_end
        self.islands = islands
        self.island_radius_fraction = island_radius_fraction
        self.rng = rng

        # --- Mode Geometry ---
        self.ring_boundaries: List[float] = []
        self.island_centers: List[Point] = []
        self.continent_centers: List[Point] = []

        # --- Running Placement Statistics ---
        self.total_area = 0.0
        self.sum_x = 0.0
        self.sum_y = 0.0

        if self.mode == DEFAULTS.MODE_ISLANDS:
            self._init_islands()
        elif self.mode == DEFAULTS.MODE_CONTINENTS:
            self._init_continents()
        elif self.mode == DEFAULTS.MODE_RING:
            self._init_rings()

        self._strategies = {
            DEFAULTS.MODE_RING: self._place_ring,
            DEFAULTS.MODE_CENTROID: self._place_centroid,
            DEFAULTS.MODE_ISLANDS: self._place_island,
            DEFAULTS.MODE_CONTINENTS: self._place_continent,
        }

    # --- Geometry Setup ---

    def _init_islands(self):
        count = self.islands if self.islands > 0 else DEFAULTS.FALLBACK_ISLANDS
        min_dim = float(min(self.width, self.height))
        margin = int(min_dim * DEFAULTS.ISLAND_MARGIN_FRACTION)
        span_x = max(1, self.width - 2 * margin)
        span_y = max(1, self.height - 2 * margin)
        for _ in range(count):
            x = margin + int(self.rng.integers(span_x))
            y = margin + int(self.rng.integers(span_y))
            self.island_centers.append((x, y))
        logger.debug(f"Island centers: {self.island_centers}")

    def _init_continents(self):
        self.continent_centers = [
            (self.width // 4, self.height // 2),
            ((3 * self.width) // 4, self.height // 2),
        ]

    def _init_rings(self):
        self.ring_boundaries = build_ring_boundaries(self.rings, self.ring_start, self.ring_end)
        logger.debug(f"Ring boundaries: {self.ring_boundaries}")

    # --- Public API ---

    def place(self, tile_width: int, tile_height: int) -> Point:
        """Returns the top-left corner for a tile of the given size."""
        if tile_width >= self.width or tile_height >= self.height:
            return 0, 0
        strategy = self._strategies.get(self.mode, self._place_centroid)
        return strategy(tile_width, tile_height)

    def random_placement(self, tile_width: int, tile_height: int) -> Point:
        """Uniformly random position that keeps the tile inside the canvas."""
        span_x = max(0, self.width - tile_width)
        span_y = max(0, self.height - tile_height)
        x = int(self.rng.integers(span_x + 1)) if span_x > 0 else 0
        y = int(self.rng.integers(span_y + 1)) if span_y > 0 else 0
        return x, y

    def record_placement(self, x: int, y: int, tile_width: int, tile_height: int):
        area = float(tile_width * tile_height)
        if area <= 0:
            return
        self.total_area += area
        self.sum_x += (x + tile_width / 2) * area
        self.sum_y += (y + tile_height / 2) * area

    def center_of_mass(self) -> Optional[Tuple[float, float]]:
        """Area-weighted center of everything recorded so far, if anything."""
        if self.total_area <= 0:
            return None
        return self.sum_x / self.total_area, self.sum_y / self.total_area

    def _clamped_origin(self, cx: float, cy: float, tile_width: int, tile_height: int) -> Point:
        """Top-left corner of a tile centered near (cx, cy), kept in bounds."""
        x = clamp_int(round_half_away(cx) - tile_width // 2, 0, self.width - tile_width)
        y = clamp_int(round_half_away(cy) - tile_height // 2, 0, self.height - tile_height)
        return x, y

    # --- Ring-Weighted Strategy ---

    def _select_ring_segment(self) -> Optional[int]:
        """
        Draws a ring index from the probability ladder, or None when the draw
        lands in the uniform remainder.
        """
        segments = len(self.ring_boundaries) - 1
        if segments <= 0:
            return None

        limit = min(segments, len(DEFAULTS.RING_PROBABILITIES))
        r = self.rng.random()
        cumulative = 0.0
        for index in range(limit):
            cumulative += DEFAULTS.RING_PROBABILITIES[index]
            if r < cumulative:
                return index
        return None

    def _place_ring(self, tile_width: int, tile_height: int) -> Point:
        radius_max = min(self.width, self.height) / 2

        for _ in range(DEFAULTS.RING_MAX_ATTEMPTS):
            segment = self._select_ring_segment()
            if segment is None:
                return self.random_placement(tile_width, tile_height)
            if segment < 0 or segment + 1 >= len(self.ring_boundaries):
                continue

            inner = self.ring_boundaries[segment]
            outer = self.ring_boundaries[segment + 1]
            if outer <= inner:
                continue

            radius_frac = inner + self.rng.random() * (outer - inner)
            theta = self.rng.random() * 2 * math.pi
            radius = radius_frac * radius_max
            cx = self.width / 2 + math.cos(theta) * radius
            cy = self.height / 2 + math.sin(theta) * radius
            return self._clamped_origin(cx, cy, tile_width, tile_height)

        return self.random_placement(tile_width, tile_height)

    # --- Centroid Balancing Strategy ---

    def distance_after_placement(self, x: int, y: int, tile_width: int, tile_height: int,
                                 target_x: float, target_y: float) -> float:
        """
        Distance between the target and the centroid the canvas would have if
        this tile were added at (x, y). Does not change any state.
        """
        area = float(tile_width * tile_height)
        if area <= 0:
            center = self.center_of_mass()
            if center is None:
                return 0.0
            return math.hypot(center[0] - target_x, center[1] - target_y)

        total = self.total_area + area
        new_cx = (self.sum_x + (x + tile_width / 2) * area) / total
        new_cy = (self.sum_y + (y + tile_height / 2) * area) / total
        return math.hypot(new_cx - target_x, new_cy - target_y)

    def _place_centroid(self, tile_width: int, tile_height: int) -> Point:
        target_x = self.width / 2
        target_y = self.height / 2

        best = self._clamped_origin(target_x, target_y, tile_width, tile_height)
        best_score = self.distance_after_placement(*best, tile_width, tile_height, target_x, target_y)

        current_dist = math.inf
        center = self.center_of_mass()
        if center is not None:
            cx, cy = center
            current_dist = math.hypot(cx - target_x, cy - target_y)
            # Mirror the centroid through the canvas center.
            mirror = self._clamped_origin(2 * target_x - cx, 2 * target_y - cy, tile_width, tile_height)
            mirror_score = self.distance_after_placement(*mirror, tile_width, tile_height, target_x, target_y)
            if mirror_score < best_score:
                best, best_score = mirror, mirror_score

        for _ in range(DEFAULTS.CENTROID_RANDOM_CANDIDATES):
            candidate = self.random_placement(tile_width, tile_height)
            score = self.distance_after_placement(*candidate, tile_width, tile_height, target_x, target_y)
            if score < best_score:
                best, best_score = candidate, score
                if not math.isinf(current_dist) and score <= current_dist * DEFAULTS.CENTROID_EARLY_STOP_FACTOR:
                    break

        return best

    # --- Island Strategy ---

    def _place_island(self, tile_width: int, tile_height: int) -> Point:
        if not self.island_centers:
            return self._place_ring(tile_width, tile_height)

        center_x, center_y = self.island_centers[int(self.rng.integers(len(self.island_centers)))]
        radius_frac = self.island_radius_fraction
        if radius_frac <= 0:
            radius_frac = DEFAULTS.DEFAULT_ISLAND_RADIUS_FRACTION
        max_radius = radius_frac * min(self.width, self.height)
        radius = self.rng.random() * max_radius
        theta = self.rng.random() * 2 * math.pi

        cx = center_x + math.cos(theta) * radius
        cy = center_y + math.sin(theta) * radius
        return self._clamped_origin(cx, cy, tile_width, tile_height)

    # --- Two Continent Strategy ---

    def _place_continent(self, tile_width: int, tile_height: int) -> Point:
        if not self.continent_centers:
            return self._place_ring(tile_width, tile_height)

        center_x, center_y = self.continent_centers[int(self.rng.integers(len(self.continent_centers)))]
        sigma_x = self.width / DEFAULTS.CONTINENT_SIGMA_X_DIVISOR
        sigma_y = self.height / DEFAULTS.CONTINENT_SIGMA_Y_DIVISOR
        for _ in range(DEFAULTS.CONTINENT_MAX_ATTEMPTS):
            x = round_half_away(float(self.rng.normal(center_x, sigma_x)))
            y = round_half_away(float(self.rng.normal(center_y, sigma_y)))
            if 0 <= x <= self.width - tile_width and 0 <= y <= self.height - tile_height:
                return x, y
        return self._place_ring(tile_width, tile_height)


def build_ring_boundaries(rings: int, ring_start: float, ring_end: float) -> List[float]:
    """
    Builds the ring radius fractions used by the ring-weighted strategy.

    The result has max(1, rings) + 1 entries, starts at 0, never decreases
    and stays within [0, 1]. A collapsed start/end pair is repaired first.
    """
    start = clamp(ring_start, 0.0, 1.0)
    end = clamp(ring_end, 0.0, 1.0)
    if end <= start:
        if end >= 1:
            start = clamp(end - DEFAULTS.RING_REPAIR_SPAN, 0.0, 1.0)
        else:
            end = clamp(start + DEFAULTS.RING_REPAIR_SPAN, 0.0, 1.0)

    segments = max(1, rings)
    boundaries = [0.0] * (segments + 1)

    if segments == 1:
        boundaries[1] = max(clamp(end, 0.0, 1.0), start)
        return boundaries

    span = end - start
    if span <= 0:
        span = DEFAULTS.RING_REPAIR_SPAN
        end = clamp(start + span, start, 1.0)
    step = span / (segments - 1)

    previous = 0.0
    for index in range(1, segments + 1):
        if index == 1:
            value = start
        elif index == segments:
            value = end
        else:
            value = start + (index - 1) * step
        value = clamp(value, previous, 1.0)
        boundaries[index] = value
        previous = value
    return boundaries
