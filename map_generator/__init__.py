# map_generator/__init__.py

# This file makes the 'map_generator' directory a Python package.
# It also defines the public API of the package.

from .errors import AllocationError, EncodingError, MapGenerationError, ParameterError
from .generator import GenerationResult, MapGenerator, generate_map
from .request import GenerationParams, normalize_request

__all__ = [
    "AllocationError",
    "EncodingError",
    "GenerationParams",
    "GenerationResult",
    "MapGenerationError",
    "MapGenerator",
    "ParameterError",
    "generate_map",
    "normalize_request",
]
