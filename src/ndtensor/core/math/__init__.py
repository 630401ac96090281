"""
Core math modules для ndtensor

Скалярные примитивы и генератор нормальных выборок.
"""

# Numerical Safeguards
from ndtensor.core.math.numerical_safeguards import (
    # Constants
    INF,
    NAN,
    # Shape
    product,
    validate_dimensions,
    # Validation
    is_valid_float,
    validate_finite,
    validate_non_negative,
    # Elementary functions
    acosh,
    asinh,
    atanh,
    safe_reciprocal,
    sigmoid,
)

# Gaussian Sampler
from ndtensor.core.math.gaussian import (
    EXPECTED_ACCEPTANCE,
    GaussianSampler,
    default_sampler,
    pseudo_gaussian,
    seed_default_sampler,
)

__all__ = [
    # Numerical Safeguards — Constants
    "INF",
    "NAN",
    # Numerical Safeguards — Shape
    "product",
    "validate_dimensions",
    # Numerical Safeguards — Validation
    "is_valid_float",
    "validate_finite",
    "validate_non_negative",
    # Numerical Safeguards — Elementary functions
    "acosh",
    "asinh",
    "atanh",
    "safe_reciprocal",
    "sigmoid",
    # Gaussian Sampler — Constants
    "EXPECTED_ACCEPTANCE",
    # Gaussian Sampler — Types
    "GaussianSampler",
    # Gaussian Sampler — Functions
    "default_sampler",
    "pseudo_gaussian",
    "seed_default_sampler",
]
