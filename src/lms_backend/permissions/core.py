"""
Permission checking entry points.

Every read or write against a protected entity goes through
``check_permissions`` (existing rows) and ``check_write`` (new row state).
Role lookups used inside the predicates live in ``permissions.roles`` and do
not pass through here.
"""

from typing import Any, Dict, Mapping, Optional
from sqlalchemy.inspection import inspect
from sqlalchemy.orm import Session, Query

from lms_backend.permissions.handlers import permission_registry
from lms_backend.permissions.handlers_impl import (
    ProfilePermissionHandler,
    UserRolePermissionHandler,
    CoursePermissionHandler,
    CourseModulePermissionHandler,
    LessonPermissionHandler,
    CourseReviewPermissionHandler,
    EnrollmentPermissionHandler,
)
from lms_backend.permissions.principal import Principal
from lms_backend.model.auth import Profile
from lms_backend.model.role import UserRole
from lms_backend.model.course import Course, CourseModule, Lesson
from lms_backend.model.enrollment import Enrollment, CourseReview


def initialize_permission_handlers():
    """Initialize and register all permission handlers"""

    permission_registry.register(Profile, ProfilePermissionHandler(Profile))
    permission_registry.register(UserRole, UserRolePermissionHandler(UserRole))

    # Content hierarchy
    permission_registry.register(Course, CoursePermissionHandler(Course))
    permission_registry.register(CourseModule, CourseModulePermissionHandler(CourseModule))
    permission_registry.register(Lesson, LessonPermissionHandler(Lesson))

    # Enrollment and review store
    permission_registry.register(Enrollment, EnrollmentPermissionHandler(Enrollment))
    permission_registry.register(CourseReview, CourseReviewPermissionHandler(CourseReview))


def check_permissions(principal: Principal, entity: Any, action: str, db: Session) -> Query:
    """
    Main entry point for permission checking.
    Returns a query over ``entity`` restricted to the rows ``action`` may touch.
    """
    return permission_registry.check_permissions(principal, entity, action, db)


def check_write(principal: Principal, entity: Any, action: str, values: Mapping[str, Any], db: Session,
                previous: Optional[Mapping[str, Any]] = None):
    """Raise AuthorizationDenied unless the new row state passes the entity's check"""
    permission_registry.check_write(principal, entity, action, values, db, previous)


def row_state(db_item: Any) -> Dict[str, Any]:
    """Column values of a mapped instance, keyed by attribute name"""
    mapper = inspect(type(db_item))
    return {column.key: getattr(db_item, column.key) for column in mapper.column_attrs}


# Initialize handlers on module import
initialize_permission_handlers()
