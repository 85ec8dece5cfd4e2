"""HTTP gateway that manages ArgoCD applications and projects across several ArgoCD instances."""

from typing import Optional

from fastapi import FastAPI

from .general import general_create_app
from .middlewares.exception import handlers
from .routers import generate_router
from .services.gateway import Gateway
from .utils.config import Config


def create_app(
    config: Optional[Config] = None,
    gateway: Optional[Gateway] = None,
    *,
    enable_uptime_background_task: bool = True,
) -> FastAPI:
    """Build the gateway app.

    ``gateway`` defaults to one built from ``config``, which itself defaults to
    the settings loaded from the environment.
    """

    if config is None:
        from .utils import config

    app = general_create_app(
        title="ArgoCD Gateway",
        description="Find, create, sync and delete ArgoCD applications on any configured ArgoCD instance.",
        exception_handlers=handlers,
        enable_uptime_background_task=enable_uptime_background_task,
    )
    return generate_router(app, gateway or Gateway.from_config(config), prefix=config.ROUTER_PREFIX)


__all__ = ["create_app"]
