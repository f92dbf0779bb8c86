# FOLDER: /

# render_map.py

"""
================================================================================
OFFLINE MAP RENDERER SCRIPT
================================================================================
This script is a command-line tool for rendering density maps to disk
without running the HTTP service. It takes a request payload (the same JSON
the /generate endpoint accepts) and renders it once per seed, writing one
PNG per seed plus a manifest.json describing every render.

Usage:
    python render_map.py --config path/to/request.json --output renders --seeds a b c
================================================================================
"""
import argparse
import hashlib
import json
import logging
import os
import sys
import time
from dataclasses import replace

from tqdm import tqdm

from map_generator.errors import MapGenerationError
from map_generator.generator import MapGenerator
from map_generator.request import normalize_request


def _safe_filename(seed: str, taken: set) -> str:
    """
    File stem for a seed. Seeds that clean to an already used stem get a
    short hash of the raw seed appended.
    """
    cleaned = "".join(ch if ch.isalnum() or ch in "-_." else "_" for ch in seed) or "unseeded"
    if cleaned in taken:
        cleaned = f"{cleaned}-{hashlib.sha256(seed.encode('utf-8')).hexdigest()[:8]}"
    taken.add(cleaned)
    return cleaned


def render_maps(payload: dict, output_dir: str, seeds: list, logger: logging.Logger) -> dict:
    """
    Renders the payload once per seed and saves the PNGs to output_dir.
    Returns the manifest that is also written to output_dir/manifest.json.

    Raises:
        MapGenerationError: The payload is invalid.
    """
    base_params = normalize_request(payload)
    seeds = list(dict.fromkeys(seeds)) or [base_params.seed]

    os.makedirs(output_dir, exist_ok=True)
    logger.info(f"Output directory set to '{output_dir}'")

    manifest = {"request": payload, "renders": {}}
    taken = set()
    start_time = time.perf_counter()
    for seed in tqdm(seeds, desc="Rendering Maps"):
        params = replace(base_params, seed=seed)
        result = MapGenerator(params, logger).generate()

        filename = f"{_safe_filename(seed, taken)}.png"
        with open(os.path.join(output_dir, filename), 'wb') as f:
            f.write(result.png)

        manifest["renders"][seed] = {
            "file": filename,
            "seed_value": result.seed,
            "batches": result.batches,
            "tile_count": result.total_placements,
            "sha256": hashlib.sha256(result.rgba.tobytes()).hexdigest(),
        }

    manifest_path = os.path.join(output_dir, "manifest.json")
    with open(manifest_path, 'w') as f:
        json.dump(manifest, f, indent=2)

    logger.info(f"Rendered {len(seeds)} maps in {time.perf_counter() - start_time:.2f} seconds.")
    logger.info(f"Maps and manifest.json saved to: {output_dir}")
    return manifest


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Offline renderer for the tile density map generator.")
    parser.add_argument(
        "--config",
        type=str,
        required=True,
        help="Path to a JSON request payload (same format as POST /generate)."
    )
    parser.add_argument("--output", type=str, default="renders", help="Directory for the PNGs and manifest.")
    parser.add_argument("--seeds", nargs="*", default=[], help="Seed strings to render (default: the payload's seed).")
    args = parser.parse_args(argv)

    # --- Setup Logging ---
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        stream=sys.stdout
    )
    logger = logging.getLogger("Renderer")

    # --- Load Configuration ---
    logger.info(f"Loading request from: {args.config}")
    try:
        with open(args.config, 'r') as f:
            payload = json.load(f)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.critical(f"Failed to load or parse request file: {e}")
        return 1

    try:
        render_maps(payload, args.output, args.seeds, logger)
    except MapGenerationError as e:
        logger.critical(f"Rendering failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
