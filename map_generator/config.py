# map_generator/config.py

"""
================================================================================
INTERNAL DEFAULT CONFIGURATION
================================================================================
This module contains the default, fallback internal constants for the map
generator. These values are used if they are not explicitly provided in the
request payload.

DO NOT MODIFY THIS FILE FOR A SPECIFIC MAP.
Instead, pass the values in the request sent to the generator.
================================================================================
"""

# --- Canvas ---
# Used when the request leaves the width or height out (or sends 0).
DEFAULT_CANVAS_WIDTH = 100
DEFAULT_CANVAS_HEIGHT = 100

# --- Tile Specification ---
# The tile list used when the request sends an empty "tiles" string.
DEFAULT_TILE_STRING = "2x2*400,2x1*300,1x1*100"
DEFAULT_MULTIPLIER = 1.0
# A cap of 0 means "no cap".
DEFAULT_CAP = 0

# The legacy fixed-count fields, keyed by the shape they add to.
LEGACY_TILE_SHAPES = {
    "n22": (2, 2),
    "n21": (2, 1),
    "n11": (1, 1),
}

# --- Distribution Modes ---
MODE_RING = "merkez"          # Ring-weighted around the canvas center
MODE_CENTROID = "agirlik"     # Running centroid pulled back to the center
MODE_ISLANDS = "adalar"       # Clusters around random island centers
MODE_CONTINENTS = "iki-kita"  # Two gaussian continents, left and right
SUPPORTED_MODES = (MODE_RING, MODE_CENTROID, MODE_ISLANDS, MODE_CONTINENTS)
DEFAULT_MODE = MODE_RING

# --- Ring-Weighted Mode ---
DEFAULT_RINGS = 10
# Ring radii are fractions of half the canvas's shorter side.
DEFAULT_RING_START = 0.1
DEFAULT_RING_END = 0.8
# Nudge applied to ringEnd when the request sends ringEnd <= ringStart.
RING_END_ADJUSTMENT = 0.05
# Gap used by the generator when it has to repair a collapsed ring range.
RING_REPAIR_SPAN = 0.1
# Probability of landing in each of the innermost rings. Whatever is left
# over (0.25) is scattered uniformly over the whole canvas.
RING_PROBABILITIES = (0.40, 0.20, 0.10, 0.05)
RING_MAX_ATTEMPTS = 12

# --- Centroid Balancing Mode ---
CENTROID_RANDOM_CANDIDATES = 24
# A random candidate that brings the centroid within this fraction of the
# current distance ends the search early.
CENTROID_EARLY_STOP_FACTOR = 0.7

# --- Island Mode ---
DEFAULT_ISLANDS = 4
FALLBACK_ISLANDS = 3
DEFAULT_ISLAND_RADIUS_FRACTION = 0.25
# Island centers stay this fraction of the shorter side away from the edges.
ISLAND_MARGIN_FRACTION = 0.1

# --- Two Continent Mode ---
# Standard deviations as divisors of the canvas width and height.
CONTINENT_SIGMA_X_DIVISOR = 10.0
CONTINENT_SIGMA_Y_DIVISOR = 6.0
CONTINENT_MAX_ATTEMPTS = 6

# --- Tone Mapping ---
DEFAULT_LOG_TONE = True
# Coverage at which a pixel reaches the saturated color.
DEFAULT_BROWN_CAP = 8
DEFAULT_BACKGROUND_ALPHA = 0
DEFAULT_ROTATE = True

# A pixel covered once is drawn in the base color; heavier overlap is
# blended towards the saturated color.
COLOR_BASE = (34, 139, 34, 255)       # Forest green
COLOR_SATURATED = (139, 69, 19, 255)  # Saddle brown
COLOR_TRANSPARENT = (0, 0, 0, 0)

# --- Seeding ---
# Constants of the 64-bit string hash used to turn a seed string into an
# integer seed.
SEED_HASH_OFFSET = 1469598103934665603
SEED_HASH_PRIME = 1099511628211

# --- HTTP Service ---
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080
