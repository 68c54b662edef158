from pydantic import BaseModel, EmailStr, Field, field_validator
from todo_api.schemas.user import UserResponse

# bcrypt only hashes the first 72 bytes and rejects longer input
MAX_PASSWORD_BYTES = 72

class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    name: str = Field(..., min_length=1)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
        return v

class RegisterResponse(BaseModel):
    user_id: str
    tenant_id: str
    tenant_slug: str
    email: EmailStr
    message: str

class LoginRequest(BaseModel):
    tenant_slug: str = Field(..., min_length=1)
    email: EmailStr
    password: str

class LoginResponse(BaseModel):
    access_token: str
    refresh_token: str
    user: UserResponse

class VerifyEmailRequest(BaseModel):
    token: str = Field(..., min_length=1)

class VerifyEmailResponse(BaseModel):
    success: bool
    message: str

class RefreshTokenRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)

class RefreshTokenResponse(BaseModel):
    access_token: str
    refresh_token: str
