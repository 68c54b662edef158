from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import BaseModel, ConfigDict, ValidationError

from todo_api.core.config import settings
from todo_api.core.exceptions import InvalidTokenError


class TokenClaims(BaseModel):
    """Identity fields carried by every access and refresh token."""

    user_id: str
    tenant_id: str
    email: str
    role: str
    exp: Optional[int] = None
    iat: Optional[int] = None


class Principal(BaseModel):
    """The authenticated caller, passed explicitly into every service call."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    tenant_id: str
    email: str
    role: str


class PasswordService:
    """bcrypt hashing for user credentials."""

    def hash(self, password: str) -> str:
        """Hash a password using bcrypt."""
        password_bytes = password.encode('utf-8')
        salt = bcrypt.gensalt()
        hashed = bcrypt.hashpw(password_bytes, salt)
        return hashed.decode('utf-8')

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against its hash."""
        password_bytes = plain_password.encode('utf-8')
        hashed_bytes = hashed_password.encode('utf-8')
        try:
            return bcrypt.checkpw(password_bytes, hashed_bytes)
        except ValueError:
            # Stored value is not a bcrypt hash
            return False


class TokenService:
    """
    Issues and validates signed, time-limited JWTs.

    Validity is purely a function of signature and expiry: there is no
    revocation list, so a refresh token stays usable until it expires.
    """

    def __init__(
        self,
        secret_key: str = settings.SECRET_KEY,
        algorithm: str = settings.ALGORITHM,
        access_ttl: timedelta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        refresh_ttl: timedelta = timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl

    def _issue(self, user_id: str, tenant_id: str, email: str, role: str, ttl: timedelta) -> str:
        now = datetime.now(timezone.utc)
        to_encode = {
            "user_id": user_id,
            "tenant_id": tenant_id,
            "email": email,
            "role": role,
            "iat": now,
            "exp": now + ttl,
        }
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def issue_access(self, user_id: str, tenant_id: str, email: str, role: str) -> str:
        """Create a short-lived access token."""
        return self._issue(user_id, tenant_id, email, role, self.access_ttl)

    def issue_refresh(self, user_id: str, tenant_id: str, email: str, role: str) -> str:
        """Create a long-lived refresh token."""
        return self._issue(user_id, tenant_id, email, role, self.refresh_ttl)

    def validate(self, token: str) -> TokenClaims:
        """
        Verify and decode a JWT.

        Args:
            token: JWT token string

        Returns:
            The decoded claims

        Raises:
            InvalidTokenError: If the algorithm is unexpected, the signature
                is invalid, the token is expired or claims are missing
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise InvalidTokenError("token has expired")
        except JWTError:
            raise InvalidTokenError()

        try:
            return TokenClaims(**payload)
        except ValidationError:
            raise InvalidTokenError()


password_service = PasswordService()
token_service = TokenService()
