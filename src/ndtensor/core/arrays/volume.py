"""
Volume — 3D буфер значений с параллельным буфером градиентов

Фиксированный rank 3 (width sx, height sy, depth sz). Градиенты только
хранятся рядом со значениями: логики обратного распространения здесь нет.

Плоский индекс:
    idx = ((sx * y) + x) * sz + z

То есть в памяти ось y имеет самый большой stride, затем x, затем z;
values эквивалентны NdArray формы [sy, sx, sz].
"""

import math
from typing import Any, Dict

import numpy as np
from loguru import logger

from ndtensor.core.arrays.ndarray import NdArray
from ndtensor.core.contracts.validators import validate_volume_snapshot
from ndtensor.core.errors import IndexOutOfRangeError, LengthMismatchError
from ndtensor.core.math.gaussian import GaussianSampler, default_sampler
from ndtensor.core.math.numerical_safeguards import product, validate_dimensions


class Volume:
    """
    3D volume значений и градиентов.

    Args:
        sx: Размер по x (width)
        sy: Размер по y (height)
        sz: Размер по z (depth)
        init_value: Константа для values; None — выборки из Normal(0, sqrt(1/n))
        sampler: Источник выборок для случайной инициализации

    Raises:
        ShapeError: Если какой-либо размер неположителен
    """

    def __init__(
        self,
        sx: int,
        sy: int,
        sz: int,
        init_value: float | None = None,
        sampler: GaussianSampler | None = None,
    ):
        self.sx, self.sy, self.sz = validate_dimensions((sx, sy, sz))
        n = product((self.sx, self.sy, self.sz))

        self.grads = np.zeros(n, dtype=np.float64)

        if init_value is None:
            sampler = sampler or default_sampler()
            self.values = sampler.sample_many(n, 0.0, math.sqrt(1.0 / n))
        else:
            self.values = np.full(n, init_value, dtype=np.float64)

    @classmethod
    def from_volume(cls, vol: "Volume") -> "Volume":
        """Глубокая копия values и grads."""
        clone = cls(vol.sx, vol.sy, vol.sz, 0.0)
        clone.values[:] = vol.values
        clone.grads[:] = vol.grads
        return clone

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Volume":
        """
        Восстановление из snapshot {"sx", "sy", "sz", "values", "grads"}.

        Raises:
            jsonschema.ValidationError: Payload не соответствует volume_snapshot
            LengthMismatchError: Длина values/grads != sx * sy * sz
        """
        validate_volume_snapshot(payload)
        # JSON Schema "integer" пропускает 2.0: размеры уже проверены как целые
        sx, sy, sz = (int(payload[key]) for key in ("sx", "sy", "sz"))
        vol = cls(sx, sy, sz, 0.0)
        for field in ("values", "grads"):
            if len(payload[field]) != vol.length:
                raise LengthMismatchError(
                    f"Invalid {field} count. Expected {vol.length}, got {len(payload[field])}."
                )
        vol.values[:] = payload["values"]
        vol.grads[:] = payload["grads"]
        return vol

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sx": self.sx,
            "sy": self.sy,
            "sz": self.sz,
            "values": self.values.tolist(),
            "grads": self.grads.tolist(),
        }

    @property
    def length(self) -> int:
        return int(self.values.size)

    def _index(self, x: int, y: int, z: int) -> int:
        for name, coord, size in (("x", x, self.sx), ("y", y, self.sy), ("z", z, self.sz)):
            if isinstance(coord, bool) or not isinstance(coord, (int, np.integer)):
                raise TypeError(f"Coordinate {name} must be an int, got {type(coord).__name__}")
            if coord < 0 or coord >= size:
                raise IndexOutOfRangeError(
                    f"Coordinate {name}={coord} is out of range for size {size}."
                )
        return ((self.sx * y) + x) * self.sz + z

    # -------------------------------------------------------------------------
    # Values
    # -------------------------------------------------------------------------

    def get_value(self, x: int, y: int, z: int) -> float:
        return float(self.values[self._index(x, y, z)])

    def set_value(self, x: int, y: int, z: int, value: float) -> None:
        self.values[self._index(x, y, z)] = value

    def add_value(self, x: int, y: int, z: int, value: float) -> None:
        self.values[self._index(x, y, z)] += value

    def set_constant(self, c: float) -> None:
        self.values.fill(c)

    # -------------------------------------------------------------------------
    # Grads
    # -------------------------------------------------------------------------

    def get_grad(self, x: int, y: int, z: int) -> float:
        return float(self.grads[self._index(x, y, z)])

    def set_grad(self, x: int, y: int, z: int, value: float) -> None:
        self.grads[self._index(x, y, z)] = value

    def add_grad(self, x: int, y: int, z: int, value: float) -> None:
        self.grads[self._index(x, y, z)] += value

    # -------------------------------------------------------------------------
    # Поэлементное сложение volumes (на месте)
    # -------------------------------------------------------------------------

    def _check_length(self, vol: "Volume") -> None:
        if vol.length != self.length:
            raise LengthMismatchError(
                f"Invalid volume. Expected length = {self.length}. "
                f"Volume passed has length = {vol.length}."
            )

    def add_volume(self, vol: "Volume") -> None:
        self._check_length(vol)
        self.values += vol.values

    def add_scaled_volume(self, vol: "Volume", scale: float) -> None:
        """values += scale * vol.values"""
        self._check_length(vol)
        self.values += scale * vol.values

    # -------------------------------------------------------------------------
    # Клонирование и конверсия
    # -------------------------------------------------------------------------

    def deep_clone(self) -> "Volume":
        return Volume.from_volume(self)

    def zero_clone(self) -> "Volume":
        """Новый volume тех же размеров с нулевыми values."""
        return Volume(self.sx, self.sy, self.sz, 0.0)

    def values_as_ndarray(self) -> NdArray:
        """Копия values как NdArray формы [sy, sx, sz] (тот же порядок элементов)."""
        logger.debug("Volume {}x{}x{} -> NdArray", self.sx, self.sy, self.sz)
        return NdArray.from_values([self.sy, self.sx, self.sz], self.values)

    def __repr__(self) -> str:
        return f"Volume(sx={self.sx}, sy={self.sy}, sz={self.sz})"
