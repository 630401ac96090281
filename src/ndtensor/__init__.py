"""
ndtensor — минимальная библиотека N-мерных массивов float64.

Логирование библиотеки выключено по умолчанию; включается через
ndtensor.logging_config.setup_logging().
"""

from loguru import logger

from ndtensor.core.arrays import ArrayStorage, NdArray, Volume
from ndtensor.core.errors import (
    DimensionMismatchError,
    IndexOutOfRangeError,
    LengthMismatchError,
    NdArrayError,
    ShapeError,
)
from ndtensor.core.math import GaussianSampler, default_sampler, seed_default_sampler

logger.disable("ndtensor")

__version__ = "0.1.0"

__all__ = [
    # Arrays
    "ArrayStorage",
    "NdArray",
    "Volume",
    # Sampler
    "GaussianSampler",
    "default_sampler",
    "seed_default_sampler",
    # Errors
    "NdArrayError",
    "ShapeError",
    "DimensionMismatchError",
    "LengthMismatchError",
    "IndexOutOfRangeError",
]
