from sqlalchemy import Column, String
from sqlalchemy.orm import relationship
from todo_api.database import Base, TimestampMixin

class Tenant(Base, TimestampMixin):
    __tablename__ = "tenants"

    id = Column(String(36), primary_key=True)
    name = Column(String, nullable=False)
    slug = Column(String, unique=True, index=True, nullable=False)

    users = relationship("User", back_populates="tenant")
    todos = relationship("Todo", back_populates="tenant")
