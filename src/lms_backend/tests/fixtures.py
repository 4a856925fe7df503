"""
Test data builders.

They write with elevated rights, directly on the session, the way an
administrator or a migration would.
"""

from typing import Optional
from uuid import UUID, uuid4
from jose import jwt
from sqlalchemy.orm import Session

from lms_backend.model import AppRole, Course, CourseModule, Enrollment, Lesson, UserRole
from lms_backend.permissions.principal import Principal

TEST_JWT_SECRET = "test-jwt-secret"


def new_principal(email: Optional[str] = None) -> Principal:
    return Principal(user_id=uuid4(), email=email)


def grant_role(db: Session, user_id: UUID, role: AppRole) -> UserRole:
    grant = UserRole(user_id=user_id, role=role)
    db.add(grant)
    db.commit()
    return grant


def make_course(db: Session, slug: str, is_published: bool = True, **kwargs) -> Course:
    course = Course(title=kwargs.pop("title", slug.replace("-", " ").title()), slug=slug, is_published=is_published, **kwargs)
    db.add(course)
    db.commit()
    db.refresh(course)
    return course


def make_module(db: Session, course: Course, title: str = "Basics", sort_order: int = 0) -> CourseModule:
    module = CourseModule(course_id=course.id, title=title, sort_order=sort_order)
    db.add(module)
    db.commit()
    db.refresh(module)
    return module


def make_lesson(db: Session, module: CourseModule, title: str, is_preview: bool = False, sort_order: int = 0) -> Lesson:
    lesson = Lesson(module_id=module.id, title=title, is_preview=is_preview, sort_order=sort_order)
    db.add(lesson)
    db.commit()
    db.refresh(lesson)
    return lesson


def enroll(db: Session, user_id: UUID, course: Course, status: str = "active") -> Enrollment:
    enrollment = Enrollment(user_id=user_id, course_id=course.id, status=status)
    db.add(enrollment)
    db.commit()
    db.refresh(enrollment)
    return enrollment


def make_token(user_id: UUID, secret: str = TEST_JWT_SECRET, audience: str = "authenticated", **claims) -> str:
    payload = {"sub": str(user_id), "aud": audience, "role": "authenticated", **claims}
    return jwt.encode(payload, secret, algorithm="HS256")
