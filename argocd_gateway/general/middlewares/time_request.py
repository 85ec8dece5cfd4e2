"""Stamp every response with its processing time."""

import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from ..utils import basicSettings


class TimeRequestsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):  # pragma: no cover - thin wrapper
        started = time.perf_counter_ns()
        response = await call_next(request)
        response.headers[basicSettings.PROCESS_TIME_HEADER] = str(time.perf_counter_ns() - started)
        return response


__all__ = ["TimeRequestsMiddleware"]
