"""
Centralized logging configuration for ndtensor.

Библиотека выключает свой logger при импорте (logger.disable("ndtensor")).
Приложение вызывает setup_logging() один раз при старте: функция включает
логирование ndtensor и настраивает консольный и (опционально) файловый sink.
"""

import sys

from loguru import logger

from ndtensor.config import LoggingConfig

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


def setup_logging(config: LoggingConfig | None = None) -> None:
    """
    Configure loguru logger for ndtensor.

    Args:
        config: Уровень, консоль и файл лога (default: LoggingConfig())

    Example:
        >>> from ndtensor.logging_config import setup_logging
        >>> setup_logging(LoggingConfig(level="DEBUG"))
    """
    config = config or LoggingConfig()

    # Remove default handler to avoid duplicates
    logger.remove()

    if config.verbose:
        logger.add(sys.stderr, format=CONSOLE_FORMAT, level=config.level, colorize=True)

    if config.log_file is not None:
        logger.add(
            config.log_file,
            format=FILE_FORMAT,
            level="DEBUG",
            rotation=config.rotation,
            retention="30 days",
            compression="zip",
        )

    logger.enable("ndtensor")
    logger.debug("Logging configured (level={})", config.level)
