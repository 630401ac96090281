"""
Contract Validation Module

Модуль для валидации snapshot-контрактов NdArray и Volume.
"""

from .validators import (
    ContractValidator,
    NdArraySnapshotValidator,
    SchemaLoader,
    VolumeSnapshotValidator,
    validate_ndarray_snapshot,
    validate_volume_snapshot,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "NdArraySnapshotValidator",
    "VolumeSnapshotValidator",
    # Functions
    "validate_ndarray_snapshot",
    "validate_volume_snapshot",
]
