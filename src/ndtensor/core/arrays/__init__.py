"""
Array types: NdArray (N-мерный) и Volume (3D со значениями и градиентами).
"""

from ndtensor.core.arrays.ndarray import ArrayStorage, NdArray
from ndtensor.core.arrays.volume import Volume

__all__ = [
    "ArrayStorage",
    "NdArray",
    "Volume",
]
