"""Typed pairing of an exception class with its FastAPI handler."""

from typing import Awaitable, Callable, Type

from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict


class ExceptionHandlerConfig(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    exception_class: Type[Exception]
    handler: Callable[[Request, Exception], Awaitable[JSONResponse]]


__all__ = ["ExceptionHandlerConfig"]
