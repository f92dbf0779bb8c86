# map_generator/request.py

"""
================================================================================
REQUEST NORMALIZATION
================================================================================
Validates a decoded JSON request and fills in every optional field, producing
the GenerationParams record consumed by generate_map().

Data Contract:
---------------
- Inputs:
    - payload (dict): The decoded JSON object. Keys use the wire names
      ("w", "h", "tiles", "ringStart", "bgA", "rot", ...).
- Outputs:
    - A GenerationParams instance with every field defaulted.
- Side Effects: None.
- Invariants: Validation fails fast with a ParameterError before any
  generation work is done.
================================================================================
"""
import math
import numbers
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from . import config as DEFAULTS
from .errors import ParameterError
from .mathutils import clamp

# Wire name -> expected JSON type ("int", "float", "str").
REQUEST_FIELDS = {
    "w": "int",
    "h": "int",
    "tiles": "str",
    "ka": "float",
    "cap": "int",
    "mode": "str",
    "rings": "int",
    "ringStart": "float",
    "ringEnd": "float",
    "seed": "str",
    "logTone": "int",
    "brownCap": "int",
    "bgA": "int",
    "islands": "int",
    "islandRFrac": "float",
    "rot": "int",
    "n22": "int",
    "n21": "int",
    "n11": "int",
}


@dataclass
class GenerationParams:
    """A fully normalized generation request."""
    width: int = DEFAULTS.DEFAULT_CANVAS_WIDTH
    height: int = DEFAULTS.DEFAULT_CANVAS_HEIGHT
    tile_string: str = ""
    ka: float = DEFAULTS.DEFAULT_MULTIPLIER
    cap: int = DEFAULTS.DEFAULT_CAP
    mode: str = DEFAULTS.DEFAULT_MODE
    rings: int = DEFAULTS.DEFAULT_RINGS
    ring_start: float = DEFAULTS.DEFAULT_RING_START
    ring_end: float = DEFAULTS.DEFAULT_RING_END
    seed: str = ""
    log_tone: bool = DEFAULTS.DEFAULT_LOG_TONE
    brown_cap: int = DEFAULTS.DEFAULT_BROWN_CAP
    bg_alpha: int = DEFAULTS.DEFAULT_BACKGROUND_ALPHA
    islands: int = DEFAULTS.DEFAULT_ISLANDS
    island_r_frac: float = DEFAULTS.DEFAULT_ISLAND_RADIUS_FRACTION
    rotate: bool = DEFAULTS.DEFAULT_ROTATE
    legacy_counts: Dict[str, int] = field(default_factory=lambda: {"n22": 0, "n21": 0, "n11": 0})


def _typed_value(payload: Dict[str, Any], key: str) -> Optional[Any]:
    """Returns the value for key checked against its wire type, or None if absent."""
    if key not in payload or payload[key] is None:
        return None
    value = payload[key]
    kind = REQUEST_FIELDS[key]
    if kind == "str":
        if not isinstance(value, str):
            raise ParameterError(f"field {key!r} must be a string")
        return value
    if isinstance(value, bool):
        if key in ("logTone", "rot"):
            return int(value)
        raise ParameterError(f"field {key!r} must be a number")
    if kind == "int":
        if isinstance(value, numbers.Integral):
            return int(value)
        if isinstance(value, float) and value.is_integer():
            return int(value)
        raise ParameterError(f"field {key!r} must be an integer")
    if not isinstance(value, numbers.Real) or not math.isfinite(value):
        raise ParameterError(f"field {key!r} must be a number")
    return float(value)


def normalize_request(payload: Optional[Dict[str, Any]]) -> GenerationParams:
    """
    Turns a decoded request body into GenerationParams.

    Raises:
        ParameterError: Unknown keys, wrong types, negative canvas sizes, an
            unsupported mode or a ring range that cannot be repaired.
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ParameterError("request body must be a JSON object")
    unknown = sorted(set(payload) - set(REQUEST_FIELDS))
    if unknown:
        raise ParameterError(f"unknown field {unknown[0]!r}")

    def get(key, default):
        value = _typed_value(payload, key)
        return default if value is None else value

    params = GenerationParams()

    # --- Canvas ---
    width = get("w", 0)
    height = get("h", 0)
    if width < 0:
        raise ParameterError("width must be positive")
    if height < 0:
        raise ParameterError("height must be positive")
    params.width = width or DEFAULTS.DEFAULT_CANVAS_WIDTH
    params.height = height or DEFAULTS.DEFAULT_CANVAS_HEIGHT

    # --- Tiles ---
    params.tile_string = get("tiles", "")
    params.ka = get("ka", DEFAULTS.DEFAULT_MULTIPLIER)
    params.cap = max(0, get("cap", DEFAULTS.DEFAULT_CAP))
    params.legacy_counts = {key: get(key, 0) for key in DEFAULTS.LEGACY_TILE_SHAPES}

    # --- Mode ---
    mode = get("mode", "")
    if not mode.strip():
        mode = DEFAULTS.DEFAULT_MODE
    mode = mode.lower()
    if mode not in DEFAULTS.SUPPORTED_MODES:
        raise ParameterError(f"unsupported mode {mode!r}")
    params.mode = mode

    # --- Rings ---
    rings = get("rings", DEFAULTS.DEFAULT_RINGS)
    params.rings = rings if rings > 0 else DEFAULTS.DEFAULT_RINGS
    params.ring_start = clamp(get("ringStart", DEFAULTS.DEFAULT_RING_START), 0.0, 1.0)
    params.ring_end = clamp(get("ringEnd", DEFAULTS.DEFAULT_RING_END), 0.0, 1.0)
    if params.ring_end <= params.ring_start:
        adjusted_end = clamp(params.ring_start + DEFAULTS.RING_END_ADJUSTMENT, params.ring_start, 1.0)
        if adjusted_end == params.ring_start:
            raise ParameterError("ringEnd must be greater than ringStart")
        params.ring_end = adjusted_end

    # --- Tone & Rendering ---
    params.seed = get("seed", "")
    params.log_tone = get("logTone", int(DEFAULTS.DEFAULT_LOG_TONE)) != 0
    params.brown_cap = max(1, get("brownCap", DEFAULTS.DEFAULT_BROWN_CAP))
    params.bg_alpha = get("bgA", DEFAULTS.DEFAULT_BACKGROUND_ALPHA)
    params.rotate = get("rot", int(DEFAULTS.DEFAULT_ROTATE)) != 0

    # --- Islands ---
    params.islands = get("islands", DEFAULTS.DEFAULT_ISLANDS)
    island_r_frac = get("islandRFrac", DEFAULTS.DEFAULT_ISLAND_RADIUS_FRACTION)
    params.island_r_frac = island_r_frac if island_r_frac > 0 else DEFAULTS.DEFAULT_ISLAND_RADIUS_FRACTION

    return params
