from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from todo_api.core.security import Principal
from todo_api.dependencies import get_current_principal, get_tenant_db, get_user_service
from todo_api.schemas.user import UserResponse, UserUpdate
from todo_api.services.user import UserService

router = APIRouter()


@router.get("/me", response_model=UserResponse)
def get_me(
    db: Session = Depends(get_tenant_db),
    principal: Principal = Depends(get_current_principal),
    service: UserService = Depends(get_user_service)
):
    """Return the authenticated user's profile."""
    return service.get_me(db, principal)


@router.put("/me", response_model=UserResponse)
def update_me(
    user_data: UserUpdate,
    db: Session = Depends(get_tenant_db),
    principal: Principal = Depends(get_current_principal),
    service: UserService = Depends(get_user_service)
):
    """Update the authenticated user's display name."""
    return service.update_me(db, principal, user_data.name)
