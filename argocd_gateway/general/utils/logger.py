"""Loguru configuration for the gateway and the bridge for stdlib loggers."""

from __future__ import annotations

import logging
import logging.config
import sys
from typing import Callable

from loguru import logger

# Loggers owned by third-party libraries that are routed into Loguru.
BRIDGED_LOGGERS = ("uvicorn", "uvicorn.error", "httpx")


class InterceptHandler(logging.Handler):
    """Forward standard logging records (uvicorn, httpx) to Loguru."""

    def emit(self, record: logging.LogRecord) -> None:  # pragma: no cover - simple bridge
        logger.bind(location=record.name).log(record.levelname, record.getMessage())


def _line_format(resource: str) -> Callable[[dict], str]:
    """Build the Loguru format function.

    Records bound with ``instance=<name>`` (see ``logger.bind``) carry the
    ArgoCD instance they talk to, which makes multi-instance fan-outs readable.

    Args:
        resource: Logical resource name that prefixes every line.
    """

    prefix = f"{resource.upper()}| " if resource else ""

    def line_format(record: dict) -> str:
        extra = record["extra"]
        location = extra.get("location") or "{name}:{function}:{line}"
        instance = f"[{extra['instance']}] " if extra.get("instance") else ""
        return (
            f"{prefix}"
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level:<8}</level> | "
            f"<cyan>{location}</cyan> - "
            f"<magenta>{instance}</magenta>"
            "<level>{message}</level>\n"
        )

    return line_format


def setup_loguru(log_level: str = "INFO", resource: str = "") -> None:
    logger.remove()
    logger.add(
        sys.stdout,
        level=log_level.upper(),
        format=_line_format(resource),
        backtrace=False,
        diagnose=False,
    )


def get_logging_dict(log_level: str = "INFO") -> dict:
    """Return a :func:`logging.config.dictConfig` mapping, also usable as uvicorn's ``log_config``."""

    level = log_level.upper()
    loggers = {
        name: {"level": level, "handlers": ["intercept"], "propagate": False}
        for name in BRIDGED_LOGGERS
    }
    # Request lines are written by LogRequestsMiddleware instead.
    loggers["uvicorn.access"] = {"level": level, "handlers": [], "propagate": False}
    loggers["httpx"]["level"] = "WARNING"

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "handlers": {"intercept": {"level": level, "()": InterceptHandler}},
        "loggers": loggers,
    }


class Logger:
    """Configure Loguru once and keep the matching stdlib ``dict_config``."""

    def __init__(self, log_level: str = "INFO", resource: str = "") -> None:
        self.log_level = log_level.upper()
        self.resource = resource.upper()
        setup_loguru(self.log_level, self.resource)
        self.dict_config = get_logging_dict(self.log_level)
        logging.config.dictConfig(self.dict_config)
