"""
Role store lookups.

These read ``user_roles`` directly and are never routed through the
permission registry: the role predicates of every handler (including the
handler guarding ``user_roles`` itself) are built from them.
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy import false, select
from sqlalchemy.orm import Session, aliased
from sqlalchemy.sql.elements import ColumnElement

from lms_backend.model.role import AppRole, UserRole


def has_role(db: Session, user_id: Optional[UUID], role: AppRole | str) -> bool:
    """Side-effect-free existence check for a role grant."""
    if user_id is None:
        return False

    stmt = select(UserRole.id).where(UserRole.user_id == user_id, UserRole.role == AppRole(role)).exists()
    return bool(db.scalar(select(stmt)))


def has_role_clause(user_id: Optional[UUID], role: AppRole | str) -> ColumnElement[bool]:
    """
    ``has_role`` as an SQL EXISTS expression for use inside other predicates.

    The alias keeps the subquery uncorrelated even when the outer query reads
    ``user_roles`` as well.
    """
    if user_id is None:
        return false()

    grant = aliased(UserRole, name="role_grant")
    return (
        select(grant.id)
        .where(grant.user_id == user_id, grant.role == AppRole(role))
        .correlate(None)
        .exists()
    )


def get_roles(db: Session, user_id: Optional[UUID]) -> List[str]:
    """All roles granted to a principal, sorted by name."""
    if user_id is None:
        return []

    rows = db.scalars(select(UserRole.role).where(UserRole.user_id == user_id)).all()
    return sorted(AppRole(role).value for role in rows)
