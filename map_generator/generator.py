# map_generator/generator.py

"""
================================================================================
CORE MAP GENERATOR
================================================================================
This module contains the MapGenerator class, responsible for turning a
normalized request into a finished density map: it allocates the tile plan,
scatters the tiles, tallies per-pixel coverage and colors the result.

Data Contract:
---------------
- Inputs (on initialization):
    - params (GenerationParams): A fully normalized request.
    - logger: A configured Python logging object for runtime messages.
- Outputs (from generate()):
    - A GenerationResult holding the RGBA raster, the PNG bytes and the
      diagnostics (batch count, placed tiles, resolved seed).
- Side Effects: Logs messages using the provided logger.
- Invariants: Given the same seed and parameters, the output is identical,
  byte for byte. Nothing is shared between generator instances.
================================================================================
"""
import io
import logging
import time
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np
from PIL import Image

from . import color_maps
from .errors import EncodingError
from .placement import PlacementGenerator
from .request import GenerationParams
from .seeding import create_rng, seed_from_string
from .tiles import TileBatch, allocate_tiles


@dataclass
class GenerationResult:
    rgba: np.ndarray
    png: bytes
    batches: int
    total_placements: int
    seed: int


def add_tile_coverage(coverage: np.ndarray, x: int, y: int, tile_width: int, tile_height: int):
    """
    Increments every cell of the tile's rectangle. Parts of the rectangle
    outside the grid are ignored.
    """
    height, width = coverage.shape
    x0, y0 = max(x, 0), max(y, 0)
    x1, y1 = min(x + tile_width, width), min(y + tile_height, height)
    if x0 >= x1 or y0 >= y1:
        return
    coverage[y0:y1, x0:x1] += 1


def encode_png(rgba: np.ndarray) -> bytes:
    """Encodes an (height, width, 4) uint8 raster as PNG."""
    buffer = io.BytesIO()
    try:
        # A (height, width, 4) uint8 array is read as RGBA.
        Image.fromarray(rgba).save(buffer, 'PNG')
    except (OSError, ValueError) as e:
        raise EncodingError(f"encode png: {e}") from e
    return buffer.getvalue()


class MapGenerator:
    """
    Generates one density map. Create a new instance per request; the
    random stream and the placement statistics live on the instance.
    """
    def __init__(self, params: GenerationParams, logger: Optional[logging.Logger] = None):
        self.params = params
        self.logger = logger or logging.getLogger(__name__)

    def allocate(self) -> List[TileBatch]:
        p = self.params
        return allocate_tiles(p.tile_string, p.ka, p.cap, p.legacy_counts)

    def scatter(self, batches: List[TileBatch], rng) -> Tuple[np.ndarray, int]:
        """
        Places every tile of every batch and returns the coverage grid and
        the number of tiles actually placed.
        """
        p = self.params
        placer = PlacementGenerator(
            p.width, p.height, p.mode, rng,
            rings=p.rings, ring_start=p.ring_start, ring_end=p.ring_end,
            islands=p.islands, island_radius_fraction=p.island_r_frac,
        )
        coverage = np.zeros((p.height, p.width), dtype=np.int32)
        placed = 0

        for batch in batches:
            for _ in range(batch.count):
                tw, th = batch.width, batch.height
                if p.rotate and tw != th and int(rng.integers(2)) == 0:
                    tw, th = th, tw
                if tw > p.width or th > p.height:
                    continue
                x, y = placer.place(tw, th)
                placer.record_placement(x, y, tw, th)
                add_tile_coverage(coverage, x, y, tw, th)
                placed += 1

        return coverage, placed

    def generate(self) -> GenerationResult:
        """
        Runs the whole pipeline.

        Raises:
            ParameterError, AllocationError: The tile list is unusable.
            EncodingError: The raster could not be encoded.
        """
        p = self.params
        start_time = time.perf_counter()

        batches = self.allocate()
        seed = seed_from_string(p.seed)
        rng = create_rng(seed)
        self.logger.debug(f"Allocated {len(batches)} batches: {batches}")

        coverage, placed = self.scatter(batches, rng)
        rgba = color_maps.render_coverage(coverage, p.brown_cap, p.log_tone, p.bg_alpha)
        png = encode_png(rgba)

        duration = time.perf_counter() - start_time
        self.logger.info(
            f"generated {p.width}x{p.height} map mode={p.mode} placements={placed} "
            f"batches={len(batches)} seed={seed} duration={duration * 1000:.1f}ms"
        )
        return GenerationResult(
            rgba=rgba,
            png=png,
            batches=len(batches),
            total_placements=placed,
            seed=seed,
        )


def generate_map(params: GenerationParams, logger: Optional[logging.Logger] = None) -> GenerationResult:
    """Convenience wrapper: one MapGenerator, one map."""
    return MapGenerator(params, logger).generate()
