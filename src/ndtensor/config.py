"""
Configuration — Pydantic модели конфигурации

Immutable Pydantic модели для sampler, логирования и demo-драйвера.
Переменные окружения не читаются: конфигурация передаётся явно
(dict, JSON или конструктор модели).
"""

from typing import Literal

from pydantic import BaseModel, Field

from ndtensor.core.math.gaussian import GaussianSampler

LogLevel = Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]


# =============================================================================
# NESTED MODELS
# =============================================================================


class SamplerConfig(BaseModel):
    """Конфигурация GaussianSampler."""

    seed: int | None = Field(
        None, ge=0, description="Seed генератора (None — энтропия ОС)"
    )

    model_config = {"frozen": True}


class LoggingConfig(BaseModel):
    """Конфигурация loguru sink-ов."""

    level: LogLevel = Field("INFO", description="Минимальный уровень для консоли")
    verbose: bool = Field(True, description="Вывод логов в stderr")
    log_file: str | None = Field(None, description="Путь к файлу лога (None — без файла)")
    rotation: str = Field("10 MB", min_length=1, description="Ротация файла лога")

    model_config = {"frozen": True}


# =============================================================================
# DEMO CONFIG
# =============================================================================


class DemoConfig(BaseModel):
    """
    Конфигурация demo-драйвера.

    Два случайных куба size×size×size, их суммы и softmax.
    """

    size: int = Field(10, gt=0, description="Размер стороны куба")
    sampler: SamplerConfig = Field(default_factory=SamplerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}


def build_sampler(config: SamplerConfig) -> GaussianSampler:
    """GaussianSampler по конфигурации."""
    return GaussianSampler(seed=config.seed)
