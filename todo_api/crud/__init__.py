from todo_api.crud.base import CRUDBase
from .tenant import tenant
from .user import user
from .todo import todo

__all__ = ["CRUDBase", "tenant", "user", "todo"]
