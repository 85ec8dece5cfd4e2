from enum import Enum
from typing import Union

from pydantic import BaseModel


class OutcomeStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"


class DeletionOutcome(BaseModel):
    status: OutcomeStatus
    message: str

    @classmethod
    def success(cls, message: str) -> "DeletionOutcome":
        return cls(status=OutcomeStatus.SUCCESS, message=message)

    @classmethod
    def failed(cls, message: str) -> "DeletionOutcome":
        return cls(status=OutcomeStatus.FAILED, message=message)


class DeleteResponse(BaseModel):
    argoDeleteAppResp: DeletionOutcome
    argoDeleteProjectResp: DeletionOutcome


class ErrorResponse(BaseModel):
    status: Union[int, str]
    message: str
