"""
Numerical Safeguards — скалярные примитивы для NdArray и Volume

Модуль содержит скалярную математику, на которую опираются массивы:
- Произведение целочисленных размерностей и валидация формы
- Проверки NaN/Inf и валидация параметров
- Обратные гиперболические функции и sigmoid без исключений (IEEE-754)
- Безопасное обращение 1/x с 0 ↦ 0

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Элементарные функции никогда не бросают ValueError на выходе из домена:
   результатом является nan/inf, как в арифметике IEEE-754
2. Форма массива — непустая последовательность положительных int
3. Все операции детерминированы и воспроизводимы
"""

import math
from collections.abc import Iterable, Sequence
from numbers import Integral
from typing import Final

from ndtensor.core.errors import ShapeError

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Положительная/отрицательная бесконечность и NaN для IEEE-совместимых результатов
INF: Final[float] = math.inf
NAN: Final[float] = math.nan


# =============================================================================
# ФОРМА МАССИВА
# =============================================================================


def product(values: Iterable[int]) -> int:
    """
    Произведение целых чисел.

    Пустая последовательность даёт 1 (нейтральный элемент).

    Examples:
        >>> product([2, 3, 4])
        24
        >>> product([])
        1
    """
    result = 1
    for value in values:
        result *= value
    return result


def validate_dimensions(dimensions: Sequence[int]) -> tuple[int, ...]:
    """
    Валидация формы массива.

    Args:
        dimensions: Размеры осей (первая ось — самый большой stride)

    Returns:
        Форма как неизменяемый tuple[int, ...]

    Raises:
        ShapeError: Если форма пустая, содержит не-int или неположительные значения
    """
    try:
        dims = tuple(dimensions)
    except TypeError:
        raise ShapeError(f"dimensions must be a sequence of ints, got {dimensions!r}")

    if len(dims) == 0:
        raise ShapeError("dimensions must contain at least one axis")

    for axis, size in enumerate(dims):
        # bool является подклассом int, но размером оси быть не может;
        # numpy-целые (np.int64 и т.п.) регистрируются как Integral
        if isinstance(size, bool) or not isinstance(size, Integral):
            raise ShapeError(
                f"dimension {axis} must be an int, got {type(size).__name__} ({size!r})"
            )
        if size <= 0:
            raise ShapeError(f"dimension {axis} must be positive, got {size}")

    return tuple(int(size) for size in dims)


# =============================================================================
# NaN/Inf ПРОВЕРКИ И ВАЛИДАЦИЯ
# =============================================================================


def is_valid_float(value: float) -> bool:
    """
    Проверка, является ли float валидным (не NaN, не Inf).

    Returns:
        True если значение конечное
    """
    return math.isfinite(value)


def validate_finite(value: float, name: str) -> None:
    """
    Валидация, что значение конечное.

    Raises:
        ValueError: Если value NaN/Inf
    """
    if not is_valid_float(value):
        raise ValueError(f"{name} must be a valid float (not NaN/Inf), got {value}")


def validate_non_negative(value: float, name: str) -> None:
    """
    Валидация, что значение неотрицательное.

    Args:
        value: Проверяемое значение
        name: Имя параметра (для сообщения об ошибке)

    Raises:
        ValueError: Если value < 0 или NaN/Inf
    """
    validate_finite(value, name)

    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")


# =============================================================================
# ЭЛЕМЕНТАРНЫЕ ФУНКЦИИ (IEEE-754, без исключений)
# =============================================================================


def safe_reciprocal(value: float) -> float:
    """
    Обращение 1/x с отображением 0 ↦ 0.

    Examples:
        >>> safe_reciprocal(4.0)
        0.25
        >>> safe_reciprocal(0.0)
        0.0
    """
    if value == 0:
        return 0.0
    return 1.0 / value


def acosh(value: float) -> float:
    """
    Обратный гиперболический косинус: ln(x + sqrt(x² - 1)).

    Для x < 1 возвращает NaN вместо ValueError.
    """
    if math.isnan(value) or value < 1.0:
        return NAN
    return math.acosh(value)


def asinh(value: float) -> float:
    """Обратный гиперболический синус: ln(x + sqrt(x² + 1))."""
    return math.asinh(value)


def atanh(value: float) -> float:
    """
    Обратный гиперболический тангенс: 0.5 * ln((1 + x) / (1 - x)).

    На границах домена: atanh(±1) = ±inf, |x| > 1 → NaN.

    Examples:
        >>> atanh(1.0)
        inf
        >>> atanh(-1.0)
        -inf
    """
    if math.isnan(value) or abs(value) > 1.0:
        return NAN
    if value == 1.0:
        return INF
    if value == -1.0:
        return -INF
    return math.atanh(value)


def sigmoid(value: float) -> float:
    """
    Логистическая функция 1 / (1 + exp(-x)).

    Для x < 0 считается как exp(x) / (1 + exp(x)), поэтому exp не переполняется.

    Examples:
        >>> sigmoid(0.0)
        0.5
    """
    if math.isnan(value):
        return NAN
    if value >= 0:
        return 1.0 / (1.0 + math.exp(-value))
    # Симметричная форма без переполнения exp
    z = math.exp(value)
    return z / (1.0 + z)
