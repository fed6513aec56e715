"""Domain exceptions and their HTTP mapping."""

import logging
from collections.abc import Sequence
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_DETAIL = "Invalid email or password"
INVALID_TOKEN_DETAIL = "Invalid authentication credentials"
INTERNAL_ERROR_DETAIL = "Internal server error"


class AuthError(Exception):
    """Base class for errors raised by the credential service."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail: Any = INTERNAL_ERROR_DETAIL
    headers: dict[str, str] | None = None

    def __init__(self, detail: Any = None):
        if detail is not None:
            self.detail = detail
        super().__init__(str(self.detail))


class InvalidInputError(AuthError):
    """Request fields failed validation. ``detail`` lists the offending fields."""

    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Invalid request body"


class EmailAlreadyExistsError(AuthError):
    status_code = status.HTTP_409_CONFLICT
    detail = "Email already exists"


class InvalidCredentialsError(AuthError):
    """Unknown email or wrong password. The two cases are deliberately indistinguishable."""

    status_code = status.HTTP_401_UNAUTHORIZED
    detail = INVALID_CREDENTIALS_DETAIL
    headers = {"WWW-Authenticate": "Bearer"}


class InvalidTokenError(AuthError):
    """Missing, malformed, forged or expired bearer token."""

    status_code = status.HTTP_401_UNAUTHORIZED
    detail = INVALID_TOKEN_DETAIL
    headers = {"WWW-Authenticate": "Bearer"}


class UserNotFoundError(AuthError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "User not found"


class InternalFailure(AuthError):
    """Failure not attributable to caller input. Never exposes its cause to clients."""


class HashingError(InternalFailure):
    pass


class SigningError(InternalFailure):
    pass


def field_errors(errors: Sequence[Any]) -> list[dict[str, Any]]:
    """Flatten pydantic error entries into {field, message} pairs."""
    return [
        {
            "field": ".".join(str(part) for part in error["loc"] if part != "body"),
            "message": error["msg"],
        }
        for error in errors
    ]


def register_error_handlers(app: FastAPI) -> None:
    """Map domain exceptions onto JSON responses."""

    @app.exception_handler(AuthError)
    async def auth_error(request: Request, exc: AuthError):
        if isinstance(exc, InternalFailure):
            logger.error(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc}")
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"detail": INTERNAL_ERROR_DETAIL},
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": field_errors(exc.errors())},
        )

    @app.exception_handler(SQLAlchemyError)
    async def storage_error(request: Request, exc: SQLAlchemyError):
        logger.exception(f"Storage failure on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": INTERNAL_ERROR_DETAIL},
        )
