"""Reusable FastAPI plumbing: settings, logging, middlewares, probes and metrics."""

from .app import general_create_app
from .utils import BasicSettings, Logger, basicSettings, logger_config

__all__ = [
    "general_create_app",
    "BasicSettings",
    "Logger",
    "basicSettings",
    "logger_config",
]
