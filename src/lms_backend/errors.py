"""
Domain error taxonomy.

The policy engine and the services raise these; the HTTP layer translates
them in ``lms_backend.server``. None of them are retried by the backend.
"""

from typing import Any, Optional
from sqlalchemy.exc import IntegrityError


class PlatformError(Exception):
    """Base exception for platform operations."""
    pass


class ConstraintViolation(PlatformError):
    """Unique, check or not-null constraint rejected by the storage layer."""

    def __init__(self, entity_type: str, detail: str):
        super().__init__(f"{entity_type}: {detail}")
        self.entity_type = entity_type
        self.detail = detail

    @classmethod
    def from_integrity_error(cls, entity_type: str, error: IntegrityError) -> "ConstraintViolation":
        return cls(entity_type, integrity_error_detail(error))


class AuthorizationDenied(PlatformError):
    """
    A policy predicate evaluated false.

    Carries no information about whether the row exists; callers report it
    exactly like a missing row.
    """

    def __init__(self, entity_type: str, action: str):
        super().__init__(f"{entity_type} not found")
        self.entity_type = entity_type
        self.action = action


class BootstrapFailure(PlatformError):
    """Account bootstrap could not provision profile and default role."""

    def __init__(self, user_id: Any, reason: str):
        super().__init__(f"Bootstrap of principal {user_id} failed: {reason}")
        self.user_id = user_id
        self.reason = reason


class CourseSaveFailure(PlatformError):
    """A course structure save failed and was rolled back."""

    def __init__(self, course_id: Optional[Any], reason: str):
        super().__init__(f"Saving course {course_id or '<new>'} failed: {reason}")
        self.course_id = course_id
        self.reason = reason


def integrity_error_detail(error: IntegrityError) -> str:
    """Cleaner version of a database integrity error, without constraint name lookups."""
    error_msg = str(error.orig) if getattr(error, "orig", None) is not None else str(error)

    if 'DETAIL:' in error_msg:
        main_error = error_msg.split('\n')[0]
        detail_part = error_msg.split('DETAIL:')[1].split('\n')[0].strip()
        return f"{main_error}. {detail_part}"

    return error_msg.split('\n')[0]
