from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

class TodoCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = ""
    is_public: bool = False
    due_date: Optional[datetime] = None

class TodoUpdate(BaseModel):
    """Full replacement of the mutable fields; omitted optionals reset to defaults."""
    title: str = Field(..., min_length=1)
    description: str = ""
    completed: bool
    is_public: bool = False
    due_date: Optional[datetime] = None

class TodoResponse(BaseModel):
    id: str
    user_id: str
    title: str
    description: str
    completed: bool
    is_public: bool
    due_date: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class TodoListResponse(BaseModel):
    todos: List[TodoResponse]
