# map_generator/errors.py

"""
Exception types raised by the map generator.

Everything the core raises derives from MapGenerationError so callers can
catch a single type. Parameter and allocation errors are also ValueErrors:
they describe bad input and are raised before any generation work starts.
"""


class MapGenerationError(Exception):
    """Base class for all map generation failures."""


class ParameterError(MapGenerationError, ValueError):
    """A request parameter is missing, malformed or out of range."""


class AllocationError(MapGenerationError, ValueError):
    """The tile list does not yield anything to place."""


class EncodingError(MapGenerationError):
    """The finished raster could not be encoded."""
