from typing import Optional
from sqlalchemy.orm import Session
from sqlalchemy import select
from todo_api.crud.base import CRUDBase
from todo_api.models.user import User


class CRUDUser(CRUDBase[User]):
    """
    CRUD operations for User model.

    Inherits the tenant-filtered get/create/update from CRUDBase and adds
    the login and email verification lookups.
    """

    def get_by_email(self, db: Session, tenant_id: str, email: str) -> Optional[User]:
        """
        Retrieve user by email address within a tenant.

        Args:
            db: Database session
            tenant_id: Tenant the user must belong to
            email: User email

        Returns:
            User instance or None if not found
        """
        stmt = select(User).where(
            User.tenant_id == tenant_id,
            User.email == email
        )
        result = db.execute(stmt)
        return result.scalar_one_or_none()

    def get_by_verification_token(self, db: Session, token: str) -> Optional[User]:
        """
        Retrieve user by pending verification token.

        This is the one user lookup that runs without a tenant: the link in
        the verification email carries nothing but the token.
        """
        stmt = select(User).where(User.verification_token == token)
        result = db.execute(stmt)
        return result.scalar_one_or_none()


# Create singleton instance
user = CRUDUser(User)
