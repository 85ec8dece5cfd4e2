"""Factory for FastAPI apps with the standard middlewares, probes and metrics."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import Callable, Coroutine, Iterable, Optional

from fastapi import FastAPI
from loguru import logger

from .middlewares import add_middlewares
from .models import ExceptionHandlerConfig
from .routes import add_routers
from .routes.metrics import track_uptime
from .utils import basicSettings


def _lifespan(background_tasks: Iterable[Callable[[], Coroutine]]):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        running = [asyncio.create_task(task()) for task in background_tasks]
        logger.info("Started {} background task(s)", len(running))
        try:
            yield
        finally:
            for task in running:
                task.cancel()
            await asyncio.gather(*running, return_exceptions=True)

    return lifespan


def general_create_app(
    title: str,
    description: str = "",
    *,
    exception_handlers: Optional[Iterable[ExceptionHandlerConfig]] = None,
    enable_uptime_background_task: bool = True,
    enable_request_logging: bool = True,
    enable_request_timing: bool = True,
    enable_metrics: bool = True,
    enable_probe: bool = True,
) -> FastAPI:
    """Build a :class:`FastAPI` app wired with the shared service plumbing."""

    tasks = [track_uptime] if enable_uptime_background_task else []

    app = FastAPI(
        title=title,
        description=description,
        version=basicSettings.OPENAPI_VERSION,
        lifespan=_lifespan(tasks),
    )

    add_middlewares(
        app,
        enable_request_logging=enable_request_logging,
        enable_request_timing=enable_request_timing,
    )
    add_routers(app, enable_metrics=enable_metrics, enable_probe=enable_probe)

    for handler_config in exception_handlers or []:
        app.add_exception_handler(handler_config.exception_class, handler_config.handler)

    return app


__all__ = ["general_create_app"]
