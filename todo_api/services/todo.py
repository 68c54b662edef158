from datetime import datetime
from typing import Callable, List
from sqlalchemy.orm import Session
from todo_api.core.exceptions import NotTodoOwnerError, TodoNotFoundError
from todo_api.core.security import Principal
from todo_api.crud import todo as todo_crud
from todo_api.crud.interfaces import TodoRepository
from todo_api.database import utcnow
from todo_api.models.todo import Todo
from todo_api.schemas.todo import TodoCreate, TodoUpdate
from todo_api.utils.ids import IdGenerator, id_generator


class TodoService:
    """
    Service layer for todo business logic.

    Todos are always read through the caller's tenant. Only the owner may
    update or delete a todo; existence is checked before ownership.
    """

    def __init__(
        self,
        repo: TodoRepository = todo_crud,
        ids: IdGenerator = id_generator,
        now: Callable[[], datetime] = utcnow,
    ):
        self.repo = repo
        self.ids = ids
        self.now = now

    def list_todos(self, db: Session, principal: Principal) -> List[Todo]:
        """All todos owned by the caller, public or not, newest first."""
        return self.repo.get_multi_by_user(db, tenant_id=principal.tenant_id, user_id=principal.user_id)

    def list_public_todos(self, db: Session, principal: Principal) -> List[Todo]:
        """Public todos of every user in the caller's tenant, newest first."""
        return self.repo.get_multi_public(db, tenant_id=principal.tenant_id)

    def create_todo(self, db: Session, principal: Principal, todo_data: TodoCreate) -> Todo:
        return self.repo.create(
            db,
            obj_in={
                "id": self.ids.generate(),
                "tenant_id": principal.tenant_id,
                "user_id": principal.user_id,
                "title": todo_data.title,
                "description": todo_data.description,
                "completed": False,
                "completed_at": None,
                "is_public": todo_data.is_public,
                "due_date": todo_data.due_date,
            },
        )

    def get_owned_todo(self, db: Session, principal: Principal, todo_id: str) -> Todo:
        """
        Load a todo the caller owns.

        Raises:
            TodoNotFoundError: No such todo in the caller's tenant
            NotTodoOwnerError: The todo belongs to someone else
        """
        todo = self.repo.get(db, todo_id, principal.tenant_id)
        if todo is None:
            raise TodoNotFoundError()
        if todo.user_id != principal.user_id:
            raise NotTodoOwnerError()
        return todo

    def update_todo(self, db: Session, principal: Principal, todo_id: str, todo_data: TodoUpdate) -> Todo:
        """
        Replace the mutable fields of an owned todo.

        completed_at is stamped on the first transition to completed and
        cleared whenever the todo is not completed.
        """
        todo = self.get_owned_todo(db, principal, todo_id)

        completed_at = todo.completed_at
        if todo_data.completed and completed_at is None:
            completed_at = self.now()
        elif not todo_data.completed:
            completed_at = None

        return self.repo.update(
            db,
            db_obj=todo,
            obj_in={
                "title": todo_data.title,
                "description": todo_data.description,
                "completed": todo_data.completed,
                "completed_at": completed_at,
                "is_public": todo_data.is_public,
                "due_date": todo_data.due_date,
            },
        )

    def delete_todo(self, db: Session, principal: Principal, todo_id: str) -> None:
        todo = self.get_owned_todo(db, principal, todo_id)
        self.repo.delete(db, db_obj=todo)


todo_service = TodoService()
