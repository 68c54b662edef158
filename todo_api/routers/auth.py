from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from todo_api.database import get_db
from todo_api.core.exceptions import InvalidTokenError
from todo_api.core.logging_config import logger
from todo_api.dependencies import get_auth_service
from todo_api.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RefreshTokenRequest,
    RefreshTokenResponse,
    RegisterRequest,
    RegisterResponse,
    VerifyEmailRequest,
    VerifyEmailResponse,
)
from todo_api.services.auth import AuthService

router = APIRouter()


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(
    request: RegisterRequest,
    db: Session = Depends(get_db),
    service: AuthService = Depends(get_auth_service)
):
    """
    Register a new account.

    Creates a fresh tenant with the registering user as its admin and sends
    a verification email. The user cannot log in until verified.
    """
    logger.info(f"Registering account: email={request.email}")
    return service.register(db, email=request.email, password=request.password, name=request.name)


@router.post("/login", response_model=LoginResponse)
def login(
    request: LoginRequest,
    db: Session = Depends(get_db),
    service: AuthService = Depends(get_auth_service)
):
    """
    Log in to a tenant identified by its slug.

    Returns an access token, a refresh token and the user profile.
    """
    return service.login(
        db,
        tenant_slug=request.tenant_slug,
        email=request.email,
        password=request.password
    )


@router.post("/verify-email", response_model=VerifyEmailResponse)
def verify_email(
    request: VerifyEmailRequest,
    db: Session = Depends(get_db),
    service: AuthService = Depends(get_auth_service)
):
    """Confirm an email address with the token from the verification link."""
    return service.verify_email(db, token=request.token)


@router.post("/refresh", response_model=RefreshTokenResponse)
def refresh_token(
    request: RefreshTokenRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Exchange a refresh token for a new access/refresh pair."""
    try:
        return service.refresh_token(refresh_token=request.refresh_token)
    except InvalidTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="invalid refresh token"
        )
