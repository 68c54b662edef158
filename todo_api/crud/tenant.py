from typing import Optional
from sqlalchemy.orm import Session
from sqlalchemy import select
from todo_api.models.tenant import Tenant


class CRUDTenant:
    """
    CRUD operations for Tenant model.

    Note: Tenant model doesn't have tenant_id (it IS the tenant) and is not
    covered by row-level security, so we don't inherit from CRUDBase.
    """

    def __init__(self):
        self.model = Tenant

    def get(self, db: Session, tenant_id: str) -> Optional[Tenant]:
        return db.get(Tenant, tenant_id)

    def get_by_slug(self, db: Session, slug: str) -> Optional[Tenant]:
        """
        Retrieve tenant by its login slug.

        Args:
            db: Database session
            slug: Tenant slug supplied by the client at login

        Returns:
            Tenant instance or None if not found
        """
        stmt = select(Tenant).where(Tenant.slug == slug)
        result = db.execute(stmt)
        return result.scalar_one_or_none()

    def create(
        self,
        db: Session,
        *,
        id: str,
        name: str,
        slug: str,
        commit: bool = True
    ) -> Tenant:
        tenant = Tenant(id=id, name=name, slug=slug)
        db.add(tenant)
        if commit:
            db.commit()
            db.refresh(tenant)
        else:
            db.flush()  # Surface constraint violations without committing
        return tenant


# Create singleton instance
tenant = CRUDTenant()
