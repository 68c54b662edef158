from typing import Generic, TypeVar, Type, Optional, Any, Dict
from sqlalchemy.orm import Session
from sqlalchemy import select
from todo_api.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class CRUDBase(Generic[ModelType]):
    """
    Generic CRUD class with tenant isolation via explicit tenant_id.

    Every lookup filters by tenant_id in addition to the row-level security
    policies, so another tenant's row reads as missing.

    Type Parameters:
        ModelType: SQLAlchemy model class with ``id`` and ``tenant_id`` columns
    """

    def __init__(self, model: Type[ModelType]):
        self.model = model

    def get(self, db: Session, id: str, tenant_id: str) -> Optional[ModelType]:
        """
        Retrieve a single record by ID with tenant filtering.

        Args:
            db: Database session
            id: Record ID
            tenant_id: Tenant ID for isolation

        Returns:
            Model instance or None if not found or doesn't belong to tenant
        """
        stmt = select(self.model).where(
            self.model.id == id,
            self.model.tenant_id == tenant_id
        )
        result = db.execute(stmt)
        return result.scalar_one_or_none()

    def create(
        self,
        db: Session,
        *,
        obj_in: Dict[str, Any],
        commit: bool = True
    ) -> ModelType:
        """
        Create a new record.

        Args:
            db: Database session
            obj_in: Column values, including id and tenant_id
            commit: Commit immediately, or only flush so the caller can
                group several inserts into one transaction

        Returns:
            Created model instance
        """
        db_obj = self.model(**obj_in)
        db.add(db_obj)
        if commit:
            db.commit()
            db.refresh(db_obj)
        else:
            db.flush()
        return db_obj

    def update(
        self,
        db: Session,
        *,
        db_obj: ModelType,
        obj_in: Dict[str, Any]
    ) -> ModelType:
        """
        Update an existing record.

        Note: This method assumes the db_obj was already retrieved using
        get() or similar method, which ensures tenant isolation.

        Args:
            db: Database session
            db_obj: Existing model instance to update
            obj_in: Column values to set

        Returns:
            Updated model instance
        """
        for field, value in obj_in.items():
            setattr(db_obj, field, value)

        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def delete(self, db: Session, *, db_obj: ModelType) -> None:
        """Delete a record previously loaded through a tenant-filtered lookup."""
        db.delete(db_obj)
        db.commit()
