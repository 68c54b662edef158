"""
Application errors.

Services raise these named failures; the handlers registered in ``main.py``
turn them into JSON responses with a fixed status code.
"""
from typing import Any, Dict

from fastapi import Request
from fastapi.responses import JSONResponse

from todo_api.core.logging_config import logger


class TodoAppError(Exception):
    """Base class for every named failure of the API."""

    status_code: int = 500
    code: str = "TODO_APP_ERROR"
    message: str = "internal error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message

    def to_dict(self) -> Dict[str, Any]:
        return {"detail": self.message, "code": self.code}


# Auth

class InvalidCredentialsError(TodoAppError):
    status_code = 401
    code = "INVALID_CREDENTIALS"
    message = "invalid credentials"


class EmailNotVerifiedError(TodoAppError):
    status_code = 401
    code = "EMAIL_NOT_VERIFIED"
    message = "email not verified"


class UserAlreadyExistsError(TodoAppError):
    status_code = 400
    code = "USER_ALREADY_EXISTS"
    message = "user already exists"


class InvalidTokenError(TodoAppError):
    status_code = 400
    code = "INVALID_TOKEN"
    message = "invalid token"


class TokenExpiredError(TodoAppError):
    status_code = 400
    code = "TOKEN_EXPIRED"
    message = "token expired"


# Users

class UserNotFoundError(TodoAppError):
    status_code = 404
    code = "USER_NOT_FOUND"
    message = "user not found"


# Todos

class TodoNotFoundError(TodoAppError):
    status_code = 404
    code = "TODO_NOT_FOUND"
    message = "todo not found"


class NotTodoOwnerError(TodoAppError):
    status_code = 403
    code = "NOT_TODO_OWNER"
    message = "not authorized"


# Infrastructure

class EmailDeliveryError(TodoAppError):
    code = "EMAIL_DELIVERY_FAILED"
    message = "failed to send verification email"


async def todo_app_exception_handler(request: Request, exc: TodoAppError) -> JSONResponse:
    """Render a named failure with its fixed status code."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything unrecognized is a 500 carrying its message."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"detail": str(exc), "code": "INTERNAL_ERROR"},
    )
