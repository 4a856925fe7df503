"""
Account bootstrap.

Reacts to the identity provider's "principal created" event by provisioning
the principal's profile and the default ``student`` role grant. Both rows are
written in one transaction; bootstrap runs with elevated rights and does not
pass through the policy engine.
"""

import json
import logging
from typing import Any, Dict, Optional
from uuid import UUID
from pydantic import BaseModel, Field
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from lms_backend.errors import BootstrapFailure
from lms_backend.model.auth import Profile
from lms_backend.model.role import AppRole, UserRole

logger = logging.getLogger(__name__)

DEFAULT_ROLE = AppRole.student


class PrincipalCreatedEvent(BaseModel):
    id: UUID
    email: Optional[str] = None
    raw_user_meta_data: Dict[str, Any] = Field(default_factory=dict)

    @property
    def full_name(self) -> Optional[str]:
        """Metadata ``full_name`` as text, stored without normalisation."""
        full_name = self.raw_user_meta_data.get("full_name")
        if full_name is None or isinstance(full_name, str):
            return full_name
        return json.dumps(full_name)


def bootstrap_account(db: Session, event: PrincipalCreatedEvent) -> Profile:
    """
    Insert Profile and the default role grant for ``event.id``.

    Raises BootstrapFailure after rolling back when either insert fails,
    including the unique violations of a repeated bootstrap.
    """
    profile = Profile(user_id=event.id, full_name=event.full_name)
    grant = UserRole(user_id=event.id, role=DEFAULT_ROLE)

    try:
        db.add(profile)
        db.add(grant)
        db.commit()
        db.refresh(profile)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Bootstrap of principal {event.id} failed: {e}")
        raise BootstrapFailure(event.id, str(getattr(e, "orig", None) or e).split("\n")[0])

    logger.info(f"Bootstrapped principal {event.id} with role '{DEFAULT_ROLE.value}'")

    return profile
