from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from todo_api.core.config import settings
from todo_api.core.exceptions import (
    EmailNotVerifiedError,
    InvalidCredentialsError,
    InvalidTokenError,
    TokenExpiredError,
    UserAlreadyExistsError,
)
from todo_api.core.logging_config import logger
from todo_api.core.security import PasswordService, TokenService, password_service, token_service
from todo_api.core.tenant_context import bind_tenant
from todo_api.crud import tenant as tenant_crud
from todo_api.crud import user as user_crud
from todo_api.crud.interfaces import TenantRepository, UserRepository
from todo_api.database import utcnow
from todo_api.models.user import User, UserRole
from todo_api.schemas.auth import (
    LoginResponse,
    RefreshTokenResponse,
    RegisterResponse,
    VerifyEmailResponse,
)
from todo_api.schemas.user import UserResponse
from todo_api.services.email import VerificationSender, email_sender
from todo_api.utils.ids import IdGenerator, id_generator

REGISTRATION_MESSAGE = "Registration successful. Please check your email to verify your account."


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class AuthService:
    """
    Registration, login, email verification and token refresh.

    A user moves one way from unverified to verified; login is refused until
    the email is verified. Login is always scoped to a known tenant.
    """

    def __init__(
        self,
        tenant_repo: TenantRepository = tenant_crud,
        user_repo: UserRepository = user_crud,
        sender: VerificationSender = email_sender,
        tokens: TokenService = token_service,
        passwords: PasswordService = password_service,
        ids: IdGenerator = id_generator,
        now: Callable[[], datetime] = utcnow,
        verification_ttl: timedelta = timedelta(hours=settings.VERIFICATION_TOKEN_EXPIRE_HOURS),
    ):
        self.tenant_repo = tenant_repo
        self.user_repo = user_repo
        self.sender = sender
        self.tokens = tokens
        self.passwords = passwords
        self.ids = ids
        self.now = now
        self.verification_ttl = verification_ttl

    def register(self, db: Session, *, email: str, password: str, name: str) -> RegisterResponse:
        """
        Create a new tenant and its first (admin) user.

        Every registration gets its own tenant, with a slug built from the
        email local-part and the start of the tenant id. The verification
        email is sent after commit; a delivery failure is logged and never
        fails the registration.

        Raises:
            UserAlreadyExistsError: If a unique constraint is hit
        """
        tenant_id = self.ids.generate()
        user_id = self.ids.generate()
        verification_token = self.ids.generate()
        slug = f"{email.split('@')[0]}-{tenant_id[:8]}"

        try:
            self.tenant_repo.create(db, id=tenant_id, name=name, slug=slug, commit=False)
            bind_tenant(db, tenant_id)
            self.user_repo.create(
                db,
                obj_in={
                    "id": user_id,
                    "tenant_id": tenant_id,
                    "email": email,
                    "password_hash": self.passwords.hash(password),
                    "name": name,
                    "role": UserRole.ADMIN,
                    "email_verified": False,
                    "verification_token": verification_token,
                    "verification_token_expires_at": self.now() + self.verification_ttl,
                },
                commit=False,
            )
            # Commit tenant and user atomically
            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.warning(f"Registration conflict for {email}: {e.orig}")
            raise UserAlreadyExistsError()

        logger.info(f"Registered user {user_id} in new tenant {tenant_id} (slug={slug})")

        try:
            self.sender.send_verification_email(email, verification_token)
        except Exception as e:
            logger.warning(f"Verification email for {email} not delivered: {type(e).__name__}: {e}")

        return RegisterResponse(
            user_id=user_id,
            tenant_id=tenant_id,
            tenant_slug=slug,
            email=email,
            message=REGISTRATION_MESSAGE,
        )

    def login(self, db: Session, *, tenant_slug: str, email: str, password: str) -> LoginResponse:
        """Resolve the tenant from its slug, then log in within it."""
        tenant = self.tenant_repo.get_by_slug(db, tenant_slug)
        if tenant is None:
            logger.warning(f"Login attempt for unknown tenant slug '{tenant_slug}'")
            raise InvalidCredentialsError()
        return self.login_with_tenant(db, tenant_id=tenant.id, email=email, password=password)

    def login_with_tenant(self, db: Session, *, tenant_id: str, email: str, password: str) -> LoginResponse:
        """
        Authenticate a user of a known tenant and issue an access/refresh pair.

        Raises:
            InvalidCredentialsError: Unknown email or wrong password
            EmailNotVerifiedError: Credentials are right but the email is unverified
        """
        bind_tenant(db, tenant_id)
        user: Optional[User] = self.user_repo.get_by_email(db, tenant_id, email)

        if user is None or not self.passwords.verify(password, user.password_hash):
            logger.warning(f"Invalid credentials for {email} in tenant {tenant_id}")
            raise InvalidCredentialsError()

        if not user.email_verified:
            raise EmailNotVerifiedError()

        role = UserRole(user.role).value
        access_token = self.tokens.issue_access(user.id, user.tenant_id, user.email, role)
        refresh_token = self.tokens.issue_refresh(user.id, user.tenant_id, user.email, role)

        logger.info(f"User {user.id} logged in to tenant {tenant_id}")
        return LoginResponse(
            access_token=access_token,
            refresh_token=refresh_token,
            user=UserResponse.model_validate(user),
        )

    def verify_email(self, db: Session, *, token: str) -> VerifyEmailResponse:
        """
        Consume a verification token.

        Raises:
            InvalidTokenError: No user holds this token
            TokenExpiredError: The token's expiry has passed
        """
        user = self.user_repo.get_by_verification_token(db, token)
        if user is None:
            raise InvalidTokenError()

        expires_at = user.verification_token_expires_at
        if expires_at is not None and _as_utc(expires_at) < self.now():
            raise TokenExpiredError()

        self.user_repo.update(
            db,
            db_obj=user,
            obj_in={
                "email_verified": True,
                "verification_token": None,
                "verification_token_expires_at": None,
            },
        )
        logger.info(f"Email verified for user {user.id}")
        return VerifyEmailResponse(success=True, message="Email verified successfully")

    def refresh_token(self, *, refresh_token: str) -> RefreshTokenResponse:
        """
        Exchange a refresh token for a new pair carrying the same claims.

        Only signature and expiry are checked; the user is not reloaded.

        Raises:
            InvalidTokenError: If the refresh token does not validate
        """
        claims = self.tokens.validate(refresh_token)
        return RefreshTokenResponse(
            access_token=self.tokens.issue_access(claims.user_id, claims.tenant_id, claims.email, claims.role),
            refresh_token=self.tokens.issue_refresh(claims.user_id, claims.tenant_id, claims.email, claims.role),
        )


auth_service = AuthService()
