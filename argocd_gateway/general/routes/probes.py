"""Liveness and readiness probe endpoints.

Readiness defers to ``app.state.readiness_check`` when the service sets one:
a callable returning ``(ready, detail)``. Without it the app is ready as soon
as it answers.
"""

from typing import Any, Dict, Tuple

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from ..utils import basicSettings

health_router = APIRouter()


def _readiness(request: Request) -> Tuple[bool, Dict[str, Any]]:
    check = getattr(request.app.state, "readiness_check", None)
    if check is None:
        return True, {}
    return check()


@health_router.get(basicSettings.PROBE_LIVENESS_PATH)
def liveness_probe() -> JSONResponse:
    return JSONResponse(content={"status": "OK"}, status_code=200)


@health_router.get(basicSettings.PROBE_READINESS_PATH)
def readiness_probe(request: Request) -> JSONResponse:
    ready, detail = _readiness(request)
    return JSONResponse(
        content={"status": "OK" if ready else "NOT READY", **detail},
        status_code=200 if ready else 503,
    )


__all__ = ["health_router", "liveness_probe", "readiness_probe"]
