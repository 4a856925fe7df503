from typing import Any, Dict, Optional
from uuid import UUID
from pydantic import BaseModel, Field


class Principal(BaseModel):
    """
    The acting principal of a request.

    Carries only identity. Role membership is never cached here: every policy
    predicate looks roles up in the role store at access time.
    """

    user_id: Optional[UUID] = None
    email: Optional[str] = None

    # Verified token claims as issued by the identity provider
    claims: Dict[str, Any] = Field(default_factory=dict)

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


def anonymous_principal() -> Principal:
    """Principal of a visitor without credentials."""
    return Principal()
