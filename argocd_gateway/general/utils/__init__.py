"""Utility helpers that back the reusable FastAPI application factory."""

from pydantic import ValidationError
from loguru import logger

from .config import BasicSettings
from .logger import Logger


try:
    basicSettings = BasicSettings()
except ValidationError as exc:  # pragma: no cover - configuration errors abort startup
    logger.error(
        "Configuration error: {}\n"
        "Please ensure that all required environment variables are set correctly.",
        exc,
    )
    raise SystemExit(1) from exc
else:
    logger_config = Logger(
        log_level=basicSettings.LOG_LEVEL,
        resource=basicSettings.LOG_RESOURCE,
    )

__all__ = [
    "BasicSettings",
    "Logger",
    "basicSettings",
    "logger_config",
]
