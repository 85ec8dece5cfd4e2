"""Log each request and its response status."""

from fastapi import Request
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware

from ..utils import basicSettings


def _level_for(path: str) -> str:
    # Probe and scrape traffic would drown the interesting lines.
    if any(path.startswith(prefix) for prefix in basicSettings.LOG_REQUEST_EXCLUDE_PATHS):
        return "DEBUG"
    return "INFO"


class LogRequestsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):  # pragma: no cover - thin wrapper
        level = _level_for(request.url.path)
        logger.log(level, "[Request] {} {}", request.method, request.url.path)

        response = await call_next(request)

        logger.log(
            level,
            "[Response] {} {} {} {}ns",
            request.method,
            request.url.path,
            response.status_code,
            response.headers.get(basicSettings.PROCESS_TIME_HEADER, "-"),
        )
        return response


__all__ = ["LogRequestsMiddleware"]
