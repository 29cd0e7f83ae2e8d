import logging
from collections.abc import Callable
from functools import partial

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette.requests import Request

from coursehub.application.exceptions.base import (
    ApplicationError,
    AuthenticationError,
    AuthorizationError,
    BackendUnavailableError,
    CascadeDeleteError,
    ConflictError,
    EntityNotFoundError,
    PaymentGatewayError,
)
from coursehub.domain.common.exceptions import (
    AppError,
    DomainError,
    InvalidPaymentTransitionError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def setup_exception_handlers(app: FastAPI) -> None:
    # Most specific class wins, order here does not matter
    status_codes: dict[type[AppError], int] = {
        ValidationError: 400,
        InvalidPaymentTransitionError: 400,
        DomainError: 400,
        ConflictError: 400,
        AuthenticationError: 401,
        AuthorizationError: 403,
        EntityNotFoundError: 404,
        PaymentGatewayError: 502,
        BackendUnavailableError: 503,
        CascadeDeleteError: 500,
        ApplicationError: 500,
    }
    for error_type, status_code in status_codes.items():
        app.add_exception_handler(error_type, error_handler(status_code))

    app.add_exception_handler(
        RequestValidationError,
        request_validation_handler,  # type: ignore[arg-type]
    )
    app.add_exception_handler(
        Exception,
        unknown_exception_handler,
    )


def error_handler(status_code: int) -> Callable[..., ORJSONResponse]:
    return partial(app_error_handler, status_code=status_code)


def app_error_handler(
    request: Request,
    err: AppError,
    status_code: int,
) -> ORJSONResponse:
    return handle_error(
        request=request,
        err=err,
        status_code=status_code,
    )


def request_validation_handler(
    request: Request,
    err: RequestValidationError,
) -> ORJSONResponse:
    errors = [
        {
            "field": ".".join(
                str(part) for part in error["loc"] if part != "body"
            ),
            "message": error["msg"],
        }
        for error in err.errors()
    ]
    logger.info("Request validation failed: %s", errors)
    return ORJSONResponse(
        content={"detail": "Validation failed", "errors": errors},
        status_code=400,
    )


def unknown_exception_handler(
    request: Request,
    err: Exception,
) -> ORJSONResponse:
    logger.exception("Unknown error occurred", exc_info=err)
    return ORJSONResponse(
        content={"detail": "Internal server error"},
        status_code=500,
    )


def handle_error(
    request: Request,
    err: AppError,
    status_code: int,
) -> ORJSONResponse:
    if status_code >= 500:
        logger.error("Handle error", exc_info=err, extra={"error": err})
    else:
        logger.info("Handle error: %s", err.message)
    return ORJSONResponse(
        content={"detail": err.message},
        status_code=status_code,
    )
