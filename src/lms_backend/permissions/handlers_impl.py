from typing import Any, Mapping, Optional
from sqlalchemy import false, or_, and_, select
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from lms_backend.permissions.handlers import PermissionHandler, READ_ACTIONS
from lms_backend.permissions.principal import Principal
from lms_backend.model.course import Course, CourseModule, Lesson
from lms_backend.model.enrollment import Enrollment


class ProfilePermissionHandler(PermissionHandler):
    """Profiles are private to their owner; there is no admin override"""

    def row_filter(self, principal: Principal, action: str, db: Session) -> ColumnElement[bool]:
        if action in READ_ACTIONS or action == "update":
            return self.owner_clause(principal, self.entity.user_id)

        # Nobody deletes profiles through the API
        return false()

    def can_write_row(self, principal: Principal, action: str, values: Mapping[str, Any], db: Session,
                      previous: Optional[Mapping[str, Any]] = None) -> bool:
        return self.is_owner(principal, values)


class UserRolePermissionHandler(PermissionHandler):
    """Principals see their own grants, admins manage all of them"""

    def row_filter(self, principal: Principal, action: str, db: Session) -> ColumnElement[bool]:
        if action in READ_ACTIONS:
            return or_(
                self.owner_clause(principal, self.entity.user_id),
                self.admin_clause(principal)
            )

        return self.admin_clause(principal)


class CoursePermissionHandler(PermissionHandler):
    """Published courses are public, everything else is admin-only"""

    def row_filter(self, principal: Principal, action: str, db: Session) -> ColumnElement[bool]:
        if action in READ_ACTIONS:
            return or_(
                self.entity.is_published.is_(True),
                self.admin_clause(principal)
            )

        return self.admin_clause(principal)


class CourseModulePermissionHandler(PermissionHandler):
    """Modules inherit visibility from the publication flag of their course"""

    @staticmethod
    def published_course_clause() -> ColumnElement[bool]:
        return (
            select(Course.id)
            .where(Course.id == CourseModule.course_id, Course.is_published.is_(True))
            .exists()
        )

    def row_filter(self, principal: Principal, action: str, db: Session) -> ColumnElement[bool]:
        if action in READ_ACTIONS:
            return or_(
                self.published_course_clause(),
                self.admin_clause(principal)
            )

        return self.admin_clause(principal)


class LessonPermissionHandler(PermissionHandler):
    """
    Lesson visibility.

    A lesson is readable when it is a preview lesson of a published course,
    when the principal holds an active enrollment in the lesson's course
    (regardless of preview flag or publication), or by admins.
    """

    @staticmethod
    def preview_clause() -> ColumnElement[bool]:
        published_parent = (
            select(CourseModule.id)
            .join(Course, Course.id == CourseModule.course_id)
            .where(CourseModule.id == Lesson.module_id, Course.is_published.is_(True))
            .exists()
        )
        return and_(Lesson.is_preview.is_(True), published_parent)

    @staticmethod
    def enrolled_clause(principal: Principal) -> ColumnElement[bool]:
        if principal.user_id is None:
            return false()

        return (
            select(Enrollment.id)
            .join(CourseModule, CourseModule.course_id == Enrollment.course_id)
            .where(
                CourseModule.id == Lesson.module_id,
                Enrollment.user_id == principal.user_id,
                Enrollment.status == "active"
            )
            .exists()
        )

    def row_filter(self, principal: Principal, action: str, db: Session) -> ColumnElement[bool]:
        if action in READ_ACTIONS:
            return or_(
                self.preview_clause(),
                self.enrolled_clause(principal),
                self.admin_clause(principal)
            )

        return self.admin_clause(principal)


class CourseReviewPermissionHandler(PermissionHandler):
    """Approved reviews are public; authors manage their own, admins moderate"""

    def row_filter(self, principal: Principal, action: str, db: Session) -> ColumnElement[bool]:
        if action in READ_ACTIONS:
            return or_(
                self.entity.is_approved.is_(True),
                self.owner_clause(principal, self.entity.user_id),
                self.admin_clause(principal)
            )

        if action == "update":
            return or_(
                self.owner_clause(principal, self.entity.user_id),
                self.admin_clause(principal)
            )

        return self.admin_clause(principal)

    def can_write_row(self, principal: Principal, action: str, values: Mapping[str, Any], db: Session,
                      previous: Optional[Mapping[str, Any]] = None) -> bool:
        if self.check_admin(principal, db):
            return True

        if not self.is_owner(principal, values):
            return False

        # Intentionally stricter than ownership alone: a non-admin insert must
        # arrive unapproved and a non-admin update must keep is_approved as is
        was_approved = bool((previous or {}).get("is_approved", False))
        return bool(values.get("is_approved", False)) == was_approved


class EnrollmentPermissionHandler(PermissionHandler):
    """Principals see their own enrollments, admins manage all of them"""

    def row_filter(self, principal: Principal, action: str, db: Session) -> ColumnElement[bool]:
        if action in READ_ACTIONS:
            return or_(
                self.owner_clause(principal, self.entity.user_id),
                self.admin_clause(principal)
            )

        return self.admin_clause(principal)
