# map_generator/seeding.py

"""
================================================================================
SEEDING UTILITIES
================================================================================
Turns the request's seed string into an integer seed and the integer seed
into a random stream.

Data Contract:
---------------
- Inputs:
    - seed (str): Any string. An empty string asks for a time based seed.
- Outputs:
    - A signed 64-bit integer seed, reported back to the client.
    - A numpy.random.Generator seeded from it.
- Side Effects: None (apart from reading the clock for empty seeds).
- Invariants: The same non-empty string always yields the same seed and the
  same random stream.
================================================================================
"""
import time

import numpy as np

from . import config as DEFAULTS

_MASK_64 = (1 << 64) - 1


def _to_signed_64(value: int) -> int:
    value &= _MASK_64
    if value >= 1 << 63:
        value -= 1 << 64
    return value


def seed_from_string(seed: str) -> int:
    """
    Hashes a seed string into a signed 64-bit integer (FNV-1a style, with
    wraparound arithmetic). An empty string falls back to the wall clock.
    """
    if seed == "":
        return _to_signed_64(time.time_ns())

    h = DEFAULTS.SEED_HASH_OFFSET
    for byte in seed.encode("utf-8"):
        h ^= byte
        h = (h * DEFAULTS.SEED_HASH_PRIME) & _MASK_64
    return _to_signed_64(h)


def create_rng(seed: int) -> np.random.Generator:
    """Creates the random stream for one generation call."""
    return np.random.default_rng(seed & _MASK_64)
