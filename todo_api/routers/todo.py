from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from todo_api.core.logging_config import logger
from todo_api.core.security import Principal
from todo_api.dependencies import get_current_principal, get_tenant_db, get_todo_service
from todo_api.schemas.todo import TodoCreate, TodoListResponse, TodoResponse, TodoUpdate
from todo_api.services.todo import TodoService

router = APIRouter()


@router.get("/todos", response_model=TodoListResponse)
def list_todos(
    db: Session = Depends(get_tenant_db),
    principal: Principal = Depends(get_current_principal),
    service: TodoService = Depends(get_todo_service)
):
    """
    Retrieve your own todos, public and private, newest first.

    Args:
        db: Tenant-scoped database session
        principal: Authenticated caller (from JWT)
        service: Todo service

    Returns:
        Wrapped list of todos
    """
    todos = service.list_todos(db, principal)
    return TodoListResponse(todos=[TodoResponse.model_validate(t) for t in todos])


@router.get("/todos-public", response_model=TodoListResponse)
def list_public_todos(
    db: Session = Depends(get_tenant_db),
    principal: Principal = Depends(get_current_principal),
    service: TodoService = Depends(get_todo_service)
):
    """Retrieve every public todo in your tenant, newest first."""
    todos = service.list_public_todos(db, principal)
    return TodoListResponse(todos=[TodoResponse.model_validate(t) for t in todos])


@router.post("/todos", response_model=TodoResponse, status_code=status.HTTP_201_CREATED)
def create_todo(
    todo_data: TodoCreate,
    db: Session = Depends(get_tenant_db),
    principal: Principal = Depends(get_current_principal),
    service: TodoService = Depends(get_todo_service)
):
    """
    Create a new todo owned by the caller.

    The tenant and owner are taken from the JWT, never from the body.
    """
    try:
        logger.info(f"Creating todo: title={todo_data.title}, user_id={principal.user_id}, tenant_id={principal.tenant_id}")
        result = service.create_todo(db, principal, todo_data)
        logger.info(f"Todo created successfully: id={result.id}")
        return result
    except Exception as e:
        logger.error(f"Error creating todo: {type(e).__name__}: {str(e)}")
        raise


@router.put("/todos/{todo_id}", response_model=TodoResponse)
def update_todo(
    todo_id: str,
    todo_data: TodoUpdate,
    db: Session = Depends(get_tenant_db),
    principal: Principal = Depends(get_current_principal),
    service: TodoService = Depends(get_todo_service)
):
    """
    Update one of your todos.

    Raises:
        404: If the todo does not exist in your tenant
        403: If the todo belongs to another user
    """
    logger.info(f"Updating todo: id={todo_id}, user_id={principal.user_id}")
    return service.update_todo(db, principal, todo_id, todo_data)


@router.delete("/todos/{todo_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_todo(
    todo_id: str,
    db: Session = Depends(get_tenant_db),
    principal: Principal = Depends(get_current_principal),
    service: TodoService = Depends(get_todo_service)
):
    """
    Delete one of your todos.

    Raises:
        404: If the todo does not exist in your tenant
        403: If the todo belongs to another user
    """
    service.delete_todo(db, principal, todo_id)
    logger.info(f"Todo deleted: id={todo_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
