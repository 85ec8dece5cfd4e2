"""Prometheus scrape endpoint and the process uptime gauge behind it."""

import asyncio
import time

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, Gauge, generate_latest

from ..utils import basicSettings

UPTIME = Gauge("app_uptime_seconds", "Application uptime in seconds")

_started_at = time.monotonic()

metrics_router = APIRouter()


async def track_uptime(interval: float = 1.0) -> None:  # pragma: no cover - endless loop
    """Refresh :data:`UPTIME` until cancelled by the app lifespan."""

    while True:
        UPTIME.set(time.monotonic() - _started_at)
        await asyncio.sleep(interval)


@metrics_router.get(basicSettings.METRICS_PATH)
def metrics() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


__all__ = ["metrics_router", "metrics", "track_uptime", "UPTIME"]
