from fastapi import FastAPI

from ..services.gateway import Gateway
from .argocd import ArgoRouter


def generate_router(app: FastAPI, gateway: Gateway, prefix: str = "") -> FastAPI:
    argo_router = ArgoRouter(gateway)
    app.include_router(argo_router.router, prefix=prefix.rstrip("/"))
    app.state.gateway = gateway
    # Without instances every request would fail with an unknown instance.
    app.state.readiness_check = lambda: (len(gateway.directory) > 0, {"instances": list(gateway.directory.names())})
    return app


__all__ = ["ArgoRouter", "generate_router"]
