"""
Per-transaction tenant context for Postgres row-level security.

The RLS policies on ``users`` and ``todos`` compare ``tenant_id`` with the
``app.current_tenant_id`` session variable. The variable is set with
``set_config(..., is_local => true)`` at the start of every transaction a
bound session begins, so it always lives and dies with the transaction that
runs the tenant-scoped queries, even when pooled connections are reused.
"""
from typing import Any, Optional

from sqlalchemy import event, text
from sqlalchemy.orm import Session

from todo_api.core.config import settings

TENANT_INFO_KEY = "tenant_id"

_SET_TENANT_SQL = text("SELECT set_config(:name, :tenant_id, true)")


def _apply(connection: Any, tenant_id: str) -> None:
    if connection.dialect.name != "postgresql":
        return
    connection.execute(_SET_TENANT_SQL, {"name": settings.TENANT_SETTING_NAME, "tenant_id": tenant_id})


def get_bound_tenant(db: Session) -> Optional[str]:
    return db.info.get(TENANT_INFO_KEY)


def bind_tenant(db: Session, tenant_id: str) -> None:
    """
    Scope a session to a tenant.

    Every later transaction of the session starts with the tenant variable
    set. If a transaction is already open it is set right away.
    """
    db.info[TENANT_INFO_KEY] = tenant_id
    if db.in_transaction():
        _apply(db.connection(), tenant_id)


@event.listens_for(Session, "after_begin")
def _set_postgres_tenant_context(session: Session, transaction: Any, connection: Any) -> None:
    tenant_id = session.info.get(TENANT_INFO_KEY)
    if tenant_id is None:
        # Unscoped session (registration, email verification)
        return
    _apply(connection, tenant_id)
