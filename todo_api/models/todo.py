from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from todo_api.database import Base, TimestampMixin

class Todo(Base, TimestampMixin):
    __tablename__ = "todos"
    __table_args__ = (
        Index("ix_todos_tenant_id_is_public", "tenant_id", "is_public"),
    )

    id = Column(String(36), primary_key=True)
    # tenant_id and user_id are immutable after creation
    tenant_id = Column(String(36), ForeignKey("tenants.id"), nullable=False)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    completed = Column(Boolean, nullable=False, default=False)
    is_public = Column(Boolean, nullable=False, default=False)
    due_date = Column(DateTime(timezone=True), nullable=True)
    # Non-null exactly when completed is true
    completed_at = Column(DateTime(timezone=True), nullable=True)

    tenant = relationship("Tenant", back_populates="todos")
    user = relationship("User", back_populates="todos")
