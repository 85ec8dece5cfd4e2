"""Errors the gateway reports to its own callers.

Every error carries a :class:`ErrorKind` and optionally the status code of the
upstream failure it wraps. The fallback message for an error without one is
resolved here rather than at each call site.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from .external_service import ExternalServiceError


class ErrorKind(str, Enum):
    INSTANCE_NOT_FOUND = "instance_not_found"
    AUTHENTICATION = "authentication"
    UPSTREAM = "upstream"


DEFAULT_STATUS = 500


class GatewayError(Exception):
    kind: ErrorKind = ErrorKind.UPSTREAM
    default_message = "ArgoCD request failed"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message or self.default_message
        self.status_code = status_code
        super().__init__(self.message)

    @property
    def status(self) -> int:
        return self.status_code or DEFAULT_STATUS

    @classmethod
    def from_upstream(cls, exc: Exception, message: Optional[str] = None) -> "GatewayError":
        """Wrap ``exc`` keeping its status and detail.

        ``message`` replaces the class default as the fallback text used when
        ``exc`` carries no detail of its own.
        """

        if isinstance(exc, ExternalServiceError):
            detail, status_code = exc.detail, exc.status_code
        else:
            detail, status_code = str(exc), None

        err = cls(detail or message, status_code)
        err.__cause__ = exc
        return err

    def to_response(self) -> Dict[str, Any]:
        return {"status": self.status, "message": self.message}


class InstanceNotFoundError(GatewayError):
    kind = ErrorKind.INSTANCE_NOT_FOUND
    default_message = "cannot find an argo instance to match this cluster"

    def __init__(self, instance_name: str):
        self.instance_name = instance_name
        super().__init__()

    def to_response(self) -> Dict[str, Any]:
        return {"status": "failed", "message": self.message}


class AuthenticationError(GatewayError):
    kind = ErrorKind.AUTHENTICATION
    default_message = "failed to obtain an argo token"


class UpstreamClientError(GatewayError):
    kind = ErrorKind.UPSTREAM
