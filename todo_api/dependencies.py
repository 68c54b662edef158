from typing import Iterator

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from todo_api.core.exceptions import InvalidTokenError
from todo_api.core.security import Principal, TokenService, token_service
from todo_api.core.tenant_context import bind_tenant
from todo_api.database import get_db
from todo_api.services.auth import AuthService, auth_service
from todo_api.services.todo import TodoService, todo_service
from todo_api.services.user import UserService, user_service


def get_token_service() -> TokenService:
    return token_service


def get_auth_service() -> AuthService:
    return auth_service


def get_user_service() -> UserService:
    return user_service


def get_todo_service() -> TodoService:
    return todo_service


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_principal(
    request: Request,
    tokens: TokenService = Depends(get_token_service),
) -> Principal:
    """
    Validate the Authorization Bearer header and return the caller's identity.

    The token alone establishes identity; the database is not consulted.

    Raises:
        HTTPException 401: If the header is missing, malformed, or the token is invalid
    """
    authorization = request.headers.get("Authorization")
    if not authorization:
        raise _unauthorized("missing authorization header")

    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise _unauthorized("invalid authorization header format")

    try:
        claims = tokens.validate(parts[1])
    except InvalidTokenError:
        raise _unauthorized("invalid token")

    return Principal(
        user_id=claims.user_id,
        tenant_id=claims.tenant_id,
        email=claims.email,
        role=claims.role,
    )


def get_tenant_db(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> Iterator[Session]:
    """Request session with row-level security scoped to the caller's tenant."""
    bind_tenant(db, principal.tenant_id)
    yield db
