"""
Тесты для Gaussian Sampler — ratio-of-uniforms

Проверяемые инварианты:
1. Эмпирические mean/std на 100 000 выборок совпадают с mu/sigma
2. Одинаковый seed → одинаковая последовательность
3. sample_many использует тот же алгоритм (распределение и размер)
4. Валидация параметров (NaN/Inf, sigma < 0, count < 0)
5. Общий sampler процесса и его пересоздание с seed
"""

import math
import threading

import numpy as np
import pytest

from ndtensor.core.math.gaussian import (
    EXPECTED_ACCEPTANCE,
    GaussianSampler,
    _rejected,
    default_sampler,
    pseudo_gaussian,
    seed_default_sampler,
)

N_DRAWS = 100_000


@pytest.fixture
def sampler():
    """Детерминированный sampler."""
    return GaussianSampler(seed=20240917)


# =============================================================================
# ТЕСТЫ: sample
# =============================================================================


class TestSample:
    """Тесты одиночной выборки sample(mu, sigma)."""

    def test_empirical_moments(self, sampler):
        """100 000 выборок: mean ≈ mu, std ≈ sigma."""
        draws = np.array([sampler.sample(3.0, 2.0) for _ in range(N_DRAWS)])

        assert draws.mean() == pytest.approx(3.0, abs=0.03)
        assert draws.std() == pytest.approx(2.0, abs=0.03)

    def test_one_sigma_coverage(self, sampler):
        """Доля выборок в пределах одного sigma ≈ 68.27%."""
        draws = np.array([sampler.sample(0.0, 1.0) for _ in range(N_DRAWS)])
        coverage = np.mean(np.abs(draws) <= 1.0)

        assert coverage == pytest.approx(0.6827, abs=0.01)

    def test_zero_sigma_returns_mu(self, sampler):
        for _ in range(10):
            assert sampler.sample(1.25, 0.0) == 1.25

    def test_same_seed_same_sequence(self):
        a = GaussianSampler(seed=7)
        b = GaussianSampler(seed=7)

        assert [a.sample(0.0, 1.0) for _ in range(50)] == [b.sample(0.0, 1.0) for _ in range(50)]

    def test_different_seed_different_sequence(self):
        a = GaussianSampler(seed=1)
        b = GaussianSampler(seed=2)

        assert [a.sample(0.0, 1.0) for _ in range(5)] != [b.sample(0.0, 1.0) for _ in range(5)]

    def test_reseed_restarts_sequence(self):
        s = GaussianSampler(seed=11)
        first = [s.sample(0.0, 1.0) for _ in range(5)]

        s.reseed(11)

        assert s.seed == 11
        assert [s.sample(0.0, 1.0) for _ in range(5)] == first

    def test_returns_python_float(self, sampler):
        assert isinstance(sampler.sample(0.0, 1.0), float)

    def test_invalid_parameters(self, sampler):
        with pytest.raises(ValueError, match="NaN/Inf"):
            sampler.sample(float("nan"), 1.0)
        with pytest.raises(ValueError, match="NaN/Inf"):
            sampler.sample(0.0, float("inf"))
        with pytest.raises(ValueError, match="non-negative"):
            sampler.sample(0.0, -1.0)


# =============================================================================
# ТЕСТЫ: условие отказа
# =============================================================================


class TestRejectionRegion:
    """Тесты области принятия ratio-of-uniforms."""

    def test_center_is_accepted(self):
        """(u, v) = (1, 0) лежит внутри области принятия."""
        assert not bool(_rejected(np.array([1.0]), np.array([0.0]))[0])

    def test_far_corner_is_rejected(self):
        """Маленький u и крайний v лежат вне области."""
        assert bool(_rejected(np.array([0.01]), np.array([0.85]))[0])

    def test_acceptance_rate(self):
        """Доля принятых пар ≈ 0.73."""
        rng = np.random.default_rng(3)
        u = 1.0 - rng.random(N_DRAWS)
        v = 1.7156 * (rng.random(N_DRAWS) - 0.5)
        rate = 1.0 - np.mean(_rejected(u, v))

        assert rate == pytest.approx(EXPECTED_ACCEPTANCE, abs=0.01)


# =============================================================================
# ТЕСТЫ: sample_many
# =============================================================================


class TestSampleMany:
    """Тесты батчевой выборки sample_many."""

    def test_shape_and_dtype(self, sampler):
        draws = sampler.sample_many(1000, 0.0, 1.0)

        assert draws.shape == (1000,)
        assert draws.dtype == np.float64

    def test_empirical_moments(self, sampler):
        draws = sampler.sample_many(N_DRAWS, -1.5, 0.5)

        assert draws.mean() == pytest.approx(-1.5, abs=0.01)
        assert draws.std() == pytest.approx(0.5, abs=0.01)

    def test_zero_count(self, sampler):
        assert sampler.sample_many(0).size == 0

    def test_negative_count_rejected(self, sampler):
        with pytest.raises(ValueError, match="count must be non-negative"):
            sampler.sample_many(-1)

    def test_reproducible(self):
        a = GaussianSampler(seed=5).sample_many(257)
        b = GaussianSampler(seed=5).sample_many(257)

        np.testing.assert_array_equal(a, b)

    def test_all_finite(self, sampler):
        assert np.all(np.isfinite(sampler.sample_many(10_000)))

    def test_concurrent_use(self, sampler):
        """Один sampler из нескольких потоков: все выборки получены."""
        results = []
        lock = threading.Lock()

        def worker():
            draws = sampler.sample_many(5000)
            with lock:
                results.append(draws)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        merged = np.concatenate(results)
        assert merged.size == 20_000
        assert merged.mean() == pytest.approx(0.0, abs=0.05)


# =============================================================================
# ТЕСТЫ: общий sampler
# =============================================================================


class TestDefaultSampler:
    """Тесты общего sampler процесса."""

    def test_default_sampler_is_singleton(self):
        assert default_sampler() is default_sampler()

    def test_seed_default_sampler_reproducible(self):
        seed_default_sampler(123)
        first = [pseudo_gaussian(0.0, 1.0) for _ in range(3)]

        reference = GaussianSampler(seed=123)
        expected = [reference.sample(0.0, 1.0) for _ in range(3)]

        assert first == expected

    def test_seed_default_sampler_replaces_instance(self):
        before = default_sampler()
        after = seed_default_sampler(99)

        assert after is not before
        assert default_sampler() is after
        assert after.seed == 99

    def test_pseudo_gaussian_is_finite(self):
        assert math.isfinite(pseudo_gaussian(10.0, 3.0))
