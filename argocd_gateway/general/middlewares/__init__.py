"""Middleware registration helpers."""

from fastapi import FastAPI

from .log_request import LogRequestsMiddleware
from .time_request import TimeRequestsMiddleware


def add_middlewares(
    app: FastAPI,
    *,
    enable_request_logging: bool = True,
    enable_request_timing: bool = True,
) -> None:
    """Attach the request timing and logging middlewares to ``app``.

    Timing is added first so that it wraps innermost and its header is
    already present when the logging middleware reads the response.
    """

    if enable_request_timing:
        app.add_middleware(TimeRequestsMiddleware)

    if enable_request_logging:
        app.add_middleware(LogRequestsMiddleware)


__all__ = ["add_middlewares", "LogRequestsMiddleware", "TimeRequestsMiddleware"]
