from todo_api.services.auth import auth_service
from todo_api.services.user import user_service
from .todo import todo_service

__all__ = ["auth_service", "user_service", "todo_service"]
