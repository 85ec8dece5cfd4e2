from .external_service import ArgoCDConnectionError, ArgoCDError, ExternalServiceError
from .gateway import (
    AuthenticationError,
    ErrorKind,
    GatewayError,
    InstanceNotFoundError,
    UpstreamClientError,
)

__all__ = [
    "ArgoCDConnectionError",
    "ArgoCDError",
    "AuthenticationError",
    "ErrorKind",
    "ExternalServiceError",
    "GatewayError",
    "InstanceNotFoundError",
    "UpstreamClientError",
]
