"""Pydantic models used by the reusable FastAPI helpers."""

from .handler import ExceptionHandlerConfig

__all__ = ["ExceptionHandlerConfig"]
