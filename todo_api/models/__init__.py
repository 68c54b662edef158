from .tenant import Tenant
from .todo import Todo
from .user import User, UserRole
