"""
Capability protocols for the storage layer.

Services depend on these rather than on the SQLAlchemy classes so tests can
substitute in-memory doubles.
"""
from typing import Any, Dict, List, Optional, Protocol

from sqlalchemy.orm import Session

from todo_api.models.tenant import Tenant
from todo_api.models.todo import Todo
from todo_api.models.user import User


class TenantRepository(Protocol):
    def get(self, db: Session, tenant_id: str) -> Optional[Tenant]:
        ...

    def get_by_slug(self, db: Session, slug: str) -> Optional[Tenant]:
        ...

    def create(self, db: Session, *, id: str, name: str, slug: str, commit: bool = True) -> Tenant:
        ...


class UserRepository(Protocol):
    def get(self, db: Session, id: str, tenant_id: str) -> Optional[User]:
        ...

    def get_by_email(self, db: Session, tenant_id: str, email: str) -> Optional[User]:
        ...

    def get_by_verification_token(self, db: Session, token: str) -> Optional[User]:
        ...

    def create(self, db: Session, *, obj_in: Dict[str, Any], commit: bool = True) -> User:
        ...

    def update(self, db: Session, *, db_obj: User, obj_in: Dict[str, Any]) -> User:
        ...


class TodoRepository(Protocol):
    def get(self, db: Session, id: str, tenant_id: str) -> Optional[Todo]:
        ...

    def get_multi_by_user(self, db: Session, *, tenant_id: str, user_id: str) -> List[Todo]:
        ...

    def get_multi_public(self, db: Session, *, tenant_id: str) -> List[Todo]:
        ...

    def create(self, db: Session, *, obj_in: Dict[str, Any], commit: bool = True) -> Todo:
        ...

    def update(self, db: Session, *, db_obj: Todo, obj_in: Dict[str, Any]) -> Todo:
        ...

    def delete(self, db: Session, *, db_obj: Todo) -> None:
        ...
