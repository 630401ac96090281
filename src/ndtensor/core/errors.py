"""
Исключения NdArray / Volume.

Все ошибки поднимаются синхронно в точке нарушающего вызова;
ни одна операция не оставляет массив в частично изменённом состоянии.
"""


class NdArrayError(ValueError):
    """Базовое исключение для нарушений контракта массива."""

    pass


class ShapeError(NdArrayError):
    """
    Некорректная форма.

    - Пустая форма или неположительный размер оси
    - reshape, у которого произведение новых размерностей != length
    """

    pass


class DimensionMismatchError(NdArrayError):
    """Количество координат не совпадает с rank массива."""

    pass


class LengthMismatchError(NdArrayError):
    """Длины буферов не совпадают (copy, поэлементная операция array-vs-array)."""

    pass


class IndexOutOfRangeError(NdArrayError, IndexError):
    """Координата отрицательна или >= размера своей оси."""

    pass
