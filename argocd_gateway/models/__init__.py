from .applications import (
    ApplicationRef,
    CreateArgoRequest,
    CreateArgoResponse,
    FoundApp,
    SyncRequest,
    SyncResponse,
)
from .responses import DeleteResponse, DeletionOutcome, ErrorResponse, OutcomeStatus

__all__ = [
    "ApplicationRef",
    "CreateArgoRequest",
    "CreateArgoResponse",
    "DeleteResponse",
    "DeletionOutcome",
    "ErrorResponse",
    "FoundApp",
    "OutcomeStatus",
    "SyncRequest",
    "SyncResponse",
]
