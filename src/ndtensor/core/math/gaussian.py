"""
Gaussian Sampler — псевдослучайная выборка из Normal(mu, sigma)

Алгоритм: ratio-of-uniforms с квадратичными границами (метод Leva).

    u = 1 - U1,  v = 1.7156 * (U2 - 0.5),  U1, U2 ~ Uniform[0, 1)
    x = u - 0.449871
    y = |v| + 0.386595
    q = x² + y * (0.196 * y - 0.25472 * x)

    Пара отклоняется, пока
        q >= 0.27597 AND (q > 0.27846 OR v² > -4 * u² * ln(u))
    Принятая пара даёт mu + sigma * v / u.

Вероятность принятия пары ≈ 0.73; цикл завершается с вероятностью 1.
u ∈ (0, 1], поэтому ln(u) всегда определён.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Каждый GaussianSampler владеет собственным numpy Generator
2. Доступ к Generator защищён threading.Lock (один sampler — много потоков)
3. Одинаковый seed → одинаковая последовательность выборок
"""

import math
import threading
from typing import Final

import numpy as np
from loguru import logger

from ndtensor.core.math.numerical_safeguards import validate_finite, validate_non_negative

# =============================================================================
# КОНСТАНТЫ АЛГОРИТМА
# =============================================================================

# Масштаб второй равномерной координаты: 2 * sqrt(2 / e)
RATIO_V_SCALE: Final[float] = 1.7156

# Центр квадратичных границ области принятия
RATIO_S: Final[float] = 0.449871
RATIO_T: Final[float] = 0.386595

# Коэффициенты квадратичной формы q
RATIO_A: Final[float] = 0.196
RATIO_B: Final[float] = 0.25472

# Внутренняя (быстрое принятие) и внешняя (быстрый отказ) границы q
RATIO_R1: Final[float] = 0.27597
RATIO_R2: Final[float] = 0.27846

# Ожидаемая доля принятых пар, используется для размера батча в sample_many
EXPECTED_ACCEPTANCE: Final[float] = 0.73


def _rejected(u, v):
    """
    Условие отказа для пары (u, v).

    Работает как для скаляров, так и для numpy массивов.
    """
    x = u - RATIO_S
    y = np.abs(v) + RATIO_T
    q = x * x + y * (RATIO_A * y - RATIO_B * x)
    return (q >= RATIO_R1) & ((q > RATIO_R2) | (v * v > -4.0 * u * u * np.log(u)))


# =============================================================================
# SAMPLER
# =============================================================================


class GaussianSampler:
    """
    Явный, конструируемый генератор нормальных выборок.

    Args:
        seed: Seed для numpy Generator (None — энтропия ОС)

    Examples:
        >>> sampler = GaussianSampler(seed=42)
        >>> value = sampler.sample(0.0, 1.0)
    """

    def __init__(self, seed: int | None = None):
        self._seed = seed
        self._rng = np.random.default_rng(seed)
        self._lock = threading.Lock()
        logger.debug("GaussianSampler initialized (seed={})", seed)

    @property
    def seed(self) -> int | None:
        return self._seed

    def reseed(self, seed: int | None) -> None:
        """Сброс внутреннего состояния на новый seed."""
        with self._lock:
            self._seed = seed
            self._rng = np.random.default_rng(seed)
        logger.debug("GaussianSampler reseeded (seed={})", seed)

    def sample(self, mu: float, sigma: float) -> float:
        """
        Одна выборка из Normal(mu, sigma).

        Args:
            mu: Математическое ожидание
            sigma: Стандартное отклонение (>= 0)

        Returns:
            Псевдослучайное значение

        Raises:
            ValueError: Если mu/sigma NaN/Inf или sigma < 0
        """
        validate_finite(mu, "mu")
        validate_non_negative(sigma, "sigma")

        with self._lock:
            while True:
                u = 1.0 - self._rng.random()
                v = RATIO_V_SCALE * (self._rng.random() - 0.5)
                x = u - RATIO_S
                y = abs(v) + RATIO_T
                q = x * x + y * (RATIO_A * y - RATIO_B * x)
                if q < RATIO_R1:
                    break
                if q <= RATIO_R2 and v * v <= -4.0 * u * u * math.log(u):
                    break

        return mu + sigma * v / u

    def sample_many(self, count: int, mu: float = 0.0, sigma: float = 1.0) -> np.ndarray:
        """
        Массив независимых выборок из Normal(mu, sigma).

        Тот же алгоритм, что и sample(), но пары (u, v) генерируются батчами,
        принятые пары накапливаются до нужного количества.

        Args:
            count: Количество выборок (>= 0)
            mu: Математическое ожидание
            sigma: Стандартное отклонение (>= 0)

        Returns:
            np.ndarray формы (count,) с dtype float64

        Raises:
            ValueError: Если count < 0, mu/sigma NaN/Inf или sigma < 0
        """
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")
        validate_finite(mu, "mu")
        validate_non_negative(sigma, "sigma")

        out = np.empty(count, dtype=np.float64)
        filled = 0

        with self._lock:
            while filled < count:
                remaining = count - filled
                batch = int(math.ceil(remaining / EXPECTED_ACCEPTANCE)) + 16
                u = 1.0 - self._rng.random(batch)
                v = RATIO_V_SCALE * (self._rng.random(batch) - 0.5)
                accepted = ~_rejected(u, v)
                ratios = (v[accepted] / u[accepted])[:remaining]
                out[filled : filled + ratios.size] = ratios
                filled += ratios.size

        return mu + sigma * out


# =============================================================================
# DEFAULT SAMPLER
# =============================================================================

_DEFAULT_SAMPLER: GaussianSampler | None = None
_DEFAULT_SAMPLER_LOCK = threading.Lock()


def default_sampler() -> GaussianSampler:
    """
    Общий для процесса sampler, создаётся лениво при первом обращении.

    Для воспроизводимости передавайте собственный GaussianSampler явно
    или используйте seed_default_sampler().
    """
    global _DEFAULT_SAMPLER
    with _DEFAULT_SAMPLER_LOCK:
        if _DEFAULT_SAMPLER is None:
            _DEFAULT_SAMPLER = GaussianSampler()
        return _DEFAULT_SAMPLER


def seed_default_sampler(seed: int | None) -> GaussianSampler:
    """Пересоздание общего sampler с заданным seed."""
    global _DEFAULT_SAMPLER
    with _DEFAULT_SAMPLER_LOCK:
        _DEFAULT_SAMPLER = GaussianSampler(seed)
        return _DEFAULT_SAMPLER


def pseudo_gaussian(mu: float, sigma: float) -> float:
    """Выборка из Normal(mu, sigma) через общий sampler."""
    return default_sampler().sample(mu, sigma)
