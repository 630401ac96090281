"""
NdArray — N-мерный массив float64 на плоском буфере

Модуль реализует движок N-мерного массива:
- Отображение координат в плоский индекс (row-major, первая ось — самый большой stride)
- Поэлементные унарные и бинарные операции, каждая возвращает новый массив
- Семантика clone / copy / copy_ref / reshape
- Инициализация через GaussianSampler

Плоский индекс:
    idx = 0
    for i in range(rank):
        idx = idx * dimensions[i] + coords[i]

Для массива 2×3 координаты [0, 2] и [1, 0] адресуют соседние позиции 2 и 3.

Форма и буфер живут в общем ArrayStorage. copy_ref() — единственный способ
разделить storage между двумя handle: изменения через один handle видны
через другой (включая reshape). Для изоляции используйте clone().

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. length == product(dimensions) == data.size
2. reshape и copy не нарушают инвариант 1: при несовпадении — исключение
3. Ни одна операция не меняет состояние частично перед исключением
4. Поэлементные операции никогда не разделяют буфер с операндом
5. Домены элементарных функций не проверяются: nan/inf по IEEE-754
"""

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from numbers import Real
from typing import Any, Dict, Union

import numpy as np
from loguru import logger

from ndtensor.core.contracts.validators import validate_ndarray_snapshot
from ndtensor.core.errors import (
    DimensionMismatchError,
    IndexOutOfRangeError,
    LengthMismatchError,
    ShapeError,
)
from ndtensor.core.math.gaussian import GaussianSampler, default_sampler
from ndtensor.core.math.numerical_safeguards import product, validate_dimensions

Operand = Union["NdArray", float]


# =============================================================================
# STORAGE
# =============================================================================


@dataclass(eq=False)
class ArrayStorage:
    """
    Общий для aliasing-handle набор: форма + плоский буфер.

    Несколько NdArray могут ссылаться на один ArrayStorage (см. NdArray.copy_ref).
    """

    dimensions: tuple[int, ...]
    data: np.ndarray

    @property
    def length(self) -> int:
        return int(self.data.size)


# =============================================================================
# ELEMENTWISE KERNELS
# =============================================================================


def _pseudo_invert(x: np.ndarray, out: np.ndarray) -> np.ndarray:
    """1/x с отображением 0 ↦ 0."""
    out.fill(0.0)
    np.divide(1.0, x, out=out, where=x != 0)
    return out


def _sigmoid(x: np.ndarray, out: np.ndarray) -> np.ndarray:
    """1 / (1 + exp(-x)) через tanh, без переполнения."""
    np.multiply(x, 0.5, out=out)
    np.tanh(out, out=out)
    out += 1.0
    out *= 0.5
    return out


# =============================================================================
# NDARRAY
# =============================================================================


class NdArray:
    """
    N-мерный массив float64.

    Создаётся с явной формой и нулевым буфером. Все поэлементные
    преобразования возвращают новый массив; на месте работают только
    fill, fill_random, zero, set, reshape, copy и copy_ref.

    Args:
        dimensions: Непустая последовательность положительных int

    Raises:
        ShapeError: Если форма пустая или содержит неположительные размеры

    Examples:
        >>> a = NdArray([2, 2]).fill(3)
        >>> a.add(2).to_list()
        [5.0, 5.0, 5.0, 5.0]
    """

    def __init__(self, dimensions: Sequence[int]):
        dims = validate_dimensions(dimensions)
        self._storage = ArrayStorage(dims, np.zeros(product(dims), dtype=np.float64))

    # -------------------------------------------------------------------------
    # Альтернативные конструкторы
    # -------------------------------------------------------------------------

    @classmethod
    def from_values(cls, dimensions: Sequence[int], values: Sequence[float]) -> "NdArray":
        """
        Массив заданной формы из плоской последовательности значений (row-major).

        Raises:
            ShapeError: Некорректная форма
            LengthMismatchError: len(values) != product(dimensions)
        """
        array = cls(dimensions)
        flat = np.asarray(values, dtype=np.float64).reshape(-1)
        if flat.size != array.length:
            raise LengthMismatchError(
                f"Invalid value count. Expected {array.length} values "
                f"for dimensions {array.dimensions}, got {flat.size}."
            )
        array._storage.data[:] = flat
        return array

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "NdArray":
        """
        Восстановление массива из snapshot {"dimensions": [...], "data": [...]}.

        Raises:
            jsonschema.ValidationError: Payload не соответствует ndarray_snapshot
            LengthMismatchError: len(data) != product(dimensions)
        """
        validate_ndarray_snapshot(payload)
        # JSON Schema "integer" пропускает 2.0: значения уже проверены как целые
        dimensions = [int(size) for size in payload["dimensions"]]
        return cls.from_values(dimensions, payload["data"])

    def to_dict(self) -> Dict[str, Any]:
        """Snapshot массива в виде JSON-совместимого dict."""
        return {"dimensions": list(self.dimensions), "data": self.to_list()}

    # -------------------------------------------------------------------------
    # Форма
    # -------------------------------------------------------------------------

    @property
    def dimensions(self) -> tuple[int, ...]:
        return self._storage.dimensions

    @property
    def length(self) -> int:
        return self._storage.length

    @property
    def rank(self) -> int:
        return len(self._storage.dimensions)

    @property
    def data(self) -> np.ndarray:
        """Read-only view плоского буфера."""
        view = self._storage.data.view()
        view.flags.writeable = False
        return view

    def to_list(self) -> list[float]:
        return self._storage.data.tolist()

    def shares_storage_with(self, other: "NdArray") -> bool:
        """True если оба handle ссылаются на один ArrayStorage (после copy_ref)."""
        return self._storage is other._storage

    # -------------------------------------------------------------------------
    # Координатный доступ
    # -------------------------------------------------------------------------

    def _flat_index(self, coords: Sequence[int]) -> int:
        dims = self._storage.dimensions

        if len(coords) != len(dims):
            raise DimensionMismatchError(
                f"Invalid coordinate count. Expected {len(dims)} coordinates "
                f"and {len(coords)} were given."
            )

        idx = 0
        for axis, (coord, size) in enumerate(zip(coords, dims)):
            if isinstance(coord, bool) or not isinstance(coord, (int, np.integer)):
                raise TypeError(
                    f"Coordinate {axis} must be an int, got {type(coord).__name__}"
                )
            if coord < 0 or coord >= size:
                raise IndexOutOfRangeError(
                    f"Coordinate {coord} is out of range for axis {axis} with size {size}."
                )
            idx = idx * size + coord
        return idx

    def get(self, coords: Sequence[int]) -> float:
        """
        Значение по координатам.

        Raises:
            DimensionMismatchError: len(coords) != rank
            IndexOutOfRangeError: Координата вне своей оси
        """
        return float(self._storage.data[self._flat_index(coords)])

    def set(self, coords: Sequence[int], value: float) -> "NdArray":
        """
        Запись значения по координатам (на месте).

        Returns:
            self (для цепочек вызовов)

        Raises:
            DimensionMismatchError: len(coords) != rank
            IndexOutOfRangeError: Координата вне своей оси
        """
        idx = self._flat_index(coords)
        self._storage.data[idx] = value
        return self

    def reshape(self, new_dimensions: Sequence[int]) -> "NdArray":
        """
        Переинтерпретация буфера с новой формой (на месте).

        Буфер и порядок элементов не меняются.

        Raises:
            ShapeError: product(new_dimensions) != length или некорректная форма
        """
        dims = validate_dimensions(new_dimensions)
        new_size = product(dims)

        if new_size != self.length:
            raise ShapeError(
                f"Invalid reshape dimensions. Expected size {self.length}. "
                f"The {len(dims)} dimensions passed have total size equal to {new_size}."
            )

        logger.debug("reshape {} -> {}", self._storage.dimensions, dims)
        self._storage.dimensions = dims
        return self

    # -------------------------------------------------------------------------
    # Копирование
    # -------------------------------------------------------------------------

    def clone(self) -> "NdArray":
        """Глубокая копия: та же форма, независимый буфер."""
        return NdArray(self.dimensions).copy(self)

    def clone_ref(self) -> "NdArray":
        """Новый handle, разделяющий storage с этим массивом."""
        return NdArray(self.dimensions).copy_ref(self)

    def copy(self, other: "NdArray") -> "NdArray":
        """
        Копирование значений other в собственный буфер.

        Формы могут отличаться, если совпадают длины.

        Raises:
            LengthMismatchError: length != other.length
        """
        if self.length != other.length:
            raise LengthMismatchError(
                f"Invalid copy array. Expected array length = {self.length}. "
                f"Array passed has length = {other.length}."
            )
        np.copyto(self._storage.data, other._storage.data)
        return self

    def copy_ref(self, other: "NdArray") -> "NdArray":
        """
        Aliasing: этот handle начинает ссылаться на storage other.

        Данные не копируются; форма и буфер общие для обоих handle.
        """
        logger.debug("copy_ref: aliasing storage with dimensions {}", other.dimensions)
        self._storage = other._storage
        return self

    # -------------------------------------------------------------------------
    # Заполнение
    # -------------------------------------------------------------------------

    def fill(self, c: float) -> "NdArray":
        self._storage.data.fill(c)
        return self

    def fill_random(self, sampler: GaussianSampler | None = None) -> "NdArray":
        """
        Заполнение выборками из Normal(0, sqrt(1 / length)).

        Args:
            sampler: Источник выборок (по умолчанию — общий sampler процесса)
        """
        sampler = sampler or default_sampler()
        scale = math.sqrt(1.0 / self.length)
        logger.debug("fill_random: length={}, scale={:.6g}", self.length, scale)
        self._storage.data[:] = sampler.sample_many(self.length, 0.0, scale)
        return self

    def zero(self) -> "NdArray":
        return self.fill(0.0)

    # -------------------------------------------------------------------------
    # Диспетчеризация поэлементных операций
    # -------------------------------------------------------------------------

    def _unary(self, func: Callable[..., np.ndarray]) -> "NdArray":
        result = NdArray(self.dimensions)
        with np.errstate(all="ignore"):
            func(self._storage.data, out=result._storage.data)
        return result

    def _binary(self, func: Callable[..., np.ndarray], other: Operand) -> "NdArray":
        if isinstance(other, NdArray):
            if other.length != self.length:
                raise LengthMismatchError(
                    f"Invalid operand array. Expected array length = {self.length}. "
                    f"Array passed has length = {other.length}."
                )
            operand = other._storage.data
        elif isinstance(other, Real):
            operand = float(other)
        else:
            raise TypeError(
                f"Operand must be an NdArray or a real number, got {type(other).__name__}"
            )

        result = NdArray(self.dimensions)
        with np.errstate(all="ignore"):
            func(self._storage.data, operand, out=result._storage.data)
        return result

    def _rbinary(self, func: Callable[..., np.ndarray], other: float) -> "NdArray":
        """Скаляр слева: func(other, x_i)."""
        if not isinstance(other, Real):
            return NotImplemented

        result = NdArray(self.dimensions)
        with np.errstate(all="ignore"):
            func(float(other), self._storage.data, out=result._storage.data)
        return result

    # -------------------------------------------------------------------------
    # Унарные операции
    # -------------------------------------------------------------------------

    def abs(self) -> "NdArray":
        return self._unary(np.abs)

    def acos(self) -> "NdArray":
        return self._unary(np.arccos)

    def acosh(self) -> "NdArray":
        return self._unary(np.arccosh)

    def asin(self) -> "NdArray":
        return self._unary(np.arcsin)

    def asinh(self) -> "NdArray":
        return self._unary(np.arcsinh)

    def atan(self) -> "NdArray":
        return self._unary(np.arctan)

    def atanh(self) -> "NdArray":
        return self._unary(np.arctanh)

    def ceiling(self) -> "NdArray":
        return self._unary(np.ceil)

    def cos(self) -> "NdArray":
        return self._unary(np.cos)

    def cosh(self) -> "NdArray":
        return self._unary(np.cosh)

    def exp(self) -> "NdArray":
        return self._unary(np.exp)

    def floor(self) -> "NdArray":
        return self._unary(np.floor)

    def invert(self) -> "NdArray":
        """1/x без защиты: 1/0 → inf, 0/0 → nan."""
        return self._unary(np.reciprocal)

    def pseudo_invert(self) -> "NdArray":
        """1/x с отображением 0 ↦ 0."""
        return self._unary(_pseudo_invert)

    def log(self) -> "NdArray":
        return self._unary(np.log)

    def round(self) -> "NdArray":
        """Округление до ближайшего целого (половины — к чётному)."""
        return self._unary(np.rint)

    def sigmoid(self) -> "NdArray":
        return self._unary(_sigmoid)

    def sin(self) -> "NdArray":
        return self._unary(np.sin)

    def sinh(self) -> "NdArray":
        return self._unary(np.sinh)

    def sqrt(self) -> "NdArray":
        return self._unary(np.sqrt)

    def tan(self) -> "NdArray":
        return self._unary(np.tan)

    def tanh(self) -> "NdArray":
        return self._unary(np.tanh)

    def negate(self) -> "NdArray":
        return self._unary(np.negative)

    # -------------------------------------------------------------------------
    # Бинарные операции (скаляр или массив равной длины)
    # -------------------------------------------------------------------------

    def add(self, other: Operand) -> "NdArray":
        return self._binary(np.add, other)

    def subtract(self, other: Operand) -> "NdArray":
        return self._binary(np.subtract, other)

    def multiply(self, other: Operand) -> "NdArray":
        return self._binary(np.multiply, other)

    def divide(self, other: Operand) -> "NdArray":
        return self._binary(np.divide, other)

    def modulo(self, other: Operand) -> "NdArray":
        """Остаток от деления с усечением (знак делимого), как fmod."""
        return self._binary(np.fmod, other)

    def pow(self, other: Operand) -> "NdArray":
        return self._binary(np.power, other)

    def max(self, other: Operand) -> "NdArray":
        """Поэлементный максимум; NaN пропагирует."""
        return self._binary(np.maximum, other)

    def min(self, other: Operand) -> "NdArray":
        """Поэлементный минимум; NaN пропагирует."""
        return self._binary(np.minimum, other)

    # -------------------------------------------------------------------------
    # Производные операции
    # -------------------------------------------------------------------------

    def sum(self) -> float:
        """Сумма всех элементов."""
        return float(self._storage.data.sum())

    def softmax(self) -> "NdArray":
        """
        exp(x_i) / Σ exp(x_j).

        Перед экспонентой вычитается максимум: результат тот же,
        но exp не переполняется на больших значениях.
        """
        shift = float(self._storage.data.max())
        exps = self.subtract(shift).exp()
        return exps.divide(exps.sum())

    # -------------------------------------------------------------------------
    # Операторы Python
    # -------------------------------------------------------------------------

    def __add__(self, other: Operand) -> "NdArray":
        return self.add(other)

    def __radd__(self, other: float) -> "NdArray":
        return self.add(other)

    def __sub__(self, other: Operand) -> "NdArray":
        return self.subtract(other)

    def __rsub__(self, other: float) -> "NdArray":
        return self._rbinary(np.subtract, other)

    def __mul__(self, other: Operand) -> "NdArray":
        return self.multiply(other)

    def __rmul__(self, other: float) -> "NdArray":
        return self.multiply(other)

    def __truediv__(self, other: Operand) -> "NdArray":
        return self.divide(other)

    def __rtruediv__(self, other: float) -> "NdArray":
        return self._rbinary(np.divide, other)

    def __mod__(self, other: Operand) -> "NdArray":
        return self.modulo(other)

    def __rmod__(self, other: float) -> "NdArray":
        return self._rbinary(np.fmod, other)

    def __pow__(self, other: Operand) -> "NdArray":
        return self.pow(other)

    def __rpow__(self, other: float) -> "NdArray":
        return self._rbinary(np.power, other)

    def __neg__(self) -> "NdArray":
        return self.negate()

    def __abs__(self) -> "NdArray":
        return self.abs()

    def __repr__(self) -> str:
        return f"NdArray(dimensions={self.dimensions}, data={self.to_list()})"
