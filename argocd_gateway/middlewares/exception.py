from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from ..errors import ExternalServiceError, GatewayError
from ..general.models import ExceptionHandlerConfig


async def gateway_exception_handler(
        request: Request,
        exc: GatewayError
) -> JSONResponse:
    logger.info(f"{request.method} {request.url.path} failed ({exc.kind.value}): {exc.message}. Status: {exc.status}.")
    return JSONResponse(
        status_code=exc.status,
        content=exc.to_response()
    )


async def external_services_exception_handler(
        request: Request,
        exc: ExternalServiceError
) -> JSONResponse:
    logger.info(f"Request to {exc.service_name} Failed. Error: {exc.error}. Detail: {exc.detail}. Response status code: {exc.status_code}.")
    status = exc.status_code or 500
    return JSONResponse(
        status_code=status,
        content={
            "status": status,
            "message": exc.detail or exc.error
        }
    )


async def http_exception_handler(
        request: Request,
        exc: HTTPException
) -> JSONResponse:
    logger.info(f"HTTP error {exc.status_code}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "status": exc.status_code,
            "message": exc.detail
        }
    )


async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError
) -> JSONResponse:
    logger.info(f"Validation error: {exc.errors()}")
    return JSONResponse(
        status_code=422,
        content={
            "status": 422,
            "message": "Validation error.",
            "detail": jsonable_errors(exc)
        }
    )


async def unhandled_exception_handler(
        request: Request,
        exc: Exception
) -> JSONResponse:
    logger.exception(f"Unhandled error: {exc}")
    return JSONResponse(
        status_code=500,
        content={"status": 500, "message": "Internal Server Error"}
    )


def jsonable_errors(exc: RequestValidationError) -> list:
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]


handlers = [
    ExceptionHandlerConfig(
        exception_class=GatewayError,
        handler=gateway_exception_handler
    ),
    ExceptionHandlerConfig(
        exception_class=ExternalServiceError,
        handler=external_services_exception_handler
    ),
    ExceptionHandlerConfig(
        exception_class=HTTPException,
        handler=http_exception_handler
    ),
    ExceptionHandlerConfig(
        exception_class=RequestValidationError,
        handler=validation_exception_handler
    ),
    ExceptionHandlerConfig(
        exception_class=Exception,
        handler=unhandled_exception_handler
    )
]
