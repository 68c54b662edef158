from sqlalchemy.orm import Session
from todo_api.core.exceptions import UserNotFoundError
from todo_api.core.security import Principal
from todo_api.crud import user as user_crud
from todo_api.crud.interfaces import UserRepository
from todo_api.models.user import User


class UserService:
    """Profile read and update for the authenticated user."""

    def __init__(self, repo: UserRepository = user_crud):
        self.repo = repo

    def get_me(self, db: Session, principal: Principal) -> User:
        """
        Load the caller's own user record.

        Raises:
            UserNotFoundError: If the user no longer exists in the tenant
        """
        user = self.repo.get(db, principal.user_id, principal.tenant_id)
        if user is None:
            raise UserNotFoundError()
        return user

    def update_me(self, db: Session, principal: Principal, name: str) -> User:
        """Change the display name; email, role and verification state are untouched."""
        user = self.get_me(db, principal)
        return self.repo.update(db, db_obj=user, obj_in={"name": name})


user_service = UserService()
