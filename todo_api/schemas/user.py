from datetime import datetime
from pydantic import BaseModel, EmailStr, Field
from todo_api.models.user import UserRole

class UserResponse(BaseModel):
    id: str
    tenant_id: str
    email: EmailStr
    name: str
    role: UserRole
    email_verified: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class UserUpdate(BaseModel):
    name: str = Field(..., min_length=1)
