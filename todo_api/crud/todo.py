from typing import List
from sqlalchemy.orm import Session
from sqlalchemy import select
from todo_api.crud.base import CRUDBase
from todo_api.models.todo import Todo


class CRUDTodo(CRUDBase[Todo]):
    """CRUD operations for Todo model."""

    def get_multi_by_user(self, db: Session, *, tenant_id: str, user_id: str) -> List[Todo]:
        """All todos owned by a user, newest first."""
        stmt = select(Todo).where(
            Todo.tenant_id == tenant_id,
            Todo.user_id == user_id
        ).order_by(Todo.created_at.desc())
        result = db.execute(stmt)
        return list(result.scalars().all())

    def get_multi_public(self, db: Session, *, tenant_id: str) -> List[Todo]:
        """All public todos of a tenant across owners, newest first."""
        stmt = select(Todo).where(
            Todo.tenant_id == tenant_id,
            Todo.is_public.is_(True)
        ).order_by(Todo.created_at.desc())
        result = db.execute(stmt)
        return list(result.scalars().all())


# Create singleton instance
todo = CRUDTodo(Todo)
