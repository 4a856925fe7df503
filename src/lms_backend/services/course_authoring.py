"""
Course structure authoring.

A course is edited as one document: the course row plus its ordered modules
and their ordered lessons. Saving replaces the whole module/lesson structure,
so module and lesson ids change on every save. Every step is evaluated by the
policy engine and the sequence is committed as a single transaction.
"""

import logging
import re
from collections import defaultdict
from typing import Optional
from uuid import UUID
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from lms_backend.errors import AuthorizationDenied, ConstraintViolation, CourseSaveFailure, PlatformError
from lms_backend.interface.course_modules import CourseModuleGet
from lms_backend.interface.course_structure import CourseDraft, CourseStructureGet, ModuleStructureGet
from lms_backend.interface.courses import CourseGet
from lms_backend.interface.lessons import LessonGet
from lms_backend.model.course import Course, CourseModule, Lesson
from lms_backend.permissions.core import check_permissions, check_write, row_state
from lms_backend.permissions.principal import Principal

logger = logging.getLogger(__name__)

_SLUG_SEPARATOR = re.compile(r"[^a-z0-9]+")


def generate_slug(title: str) -> str:
    """``"Intro to CS!"`` -> ``"intro-to-cs"``"""
    return _SLUG_SEPARATOR.sub("-", title.lower()).strip("-")


def _course_values(principal: Principal, draft: CourseDraft) -> dict:
    values = draft.model_dump(exclude={"modules"})
    values["slug"] = draft.slug or generate_slug(draft.title)
    # the saving admin becomes the creator, on re-save too
    values["created_by"] = principal.user_id
    return values


def _insert_course(principal: Principal, db: Session, values: dict) -> Course:
    check_write(principal, Course, "create", values, db)

    course = Course(**values)
    db.add(course)
    db.flush()
    return course


def _update_course(principal: Principal, db: Session, course_id: UUID, values: dict) -> Course:
    course = check_permissions(principal, Course, "update", db).filter(Course.id == course_id).first()

    if course is None:
        raise AuthorizationDenied(Course.__name__, "update")

    previous = row_state(course)
    check_write(principal, Course, "update", {**previous, **values}, db, previous)

    for key, value in values.items():
        setattr(course, key, value)

    # lessons go with their modules through ON DELETE CASCADE
    modules = (
        check_permissions(principal, CourseModule, "delete", db)
        .filter(CourseModule.course_id == course.id)
        .all()
    )
    for module in modules:
        db.delete(module)

    db.flush()
    db.expire(course, ["modules"])
    return course


def _insert_structure(principal: Principal, db: Session, course: Course, draft: CourseDraft) -> int:
    lesson_count = 0

    for module_index, module_draft in enumerate(draft.modules):
        module_values = {
            "course_id": course.id,
            "title": module_draft.title,
            "description": module_draft.description,
            "sort_order": module_index,
        }
        check_write(principal, CourseModule, "create", module_values, db)

        module = CourseModule(**module_values)
        db.add(module)
        db.flush()

        for lesson_index, lesson_draft in enumerate(module_draft.lessons):
            lesson_values = {
                **lesson_draft.model_dump(),
                "module_id": module.id,
                "sort_order": lesson_index,
            }
            check_write(principal, Lesson, "create", lesson_values, db)

            db.add(Lesson(**lesson_values))
            lesson_count += 1

    db.flush()
    return lesson_count


def save_course(principal: Principal, db: Session, draft: CourseDraft, course_id: Optional[UUID] = None) -> CourseStructureGet:
    """
    Create (``course_id`` None) or replace a course with its full structure.

    Modules and lessons get ``sort_order`` equal to their list position. On
    failure nothing is changed: policy denials and constraint violations are
    re-raised after the rollback, other storage errors become CourseSaveFailure.
    """
    values = _course_values(principal, draft)

    try:
        if course_id is None:
            course = _insert_course(principal, db, values)
        else:
            course = _update_course(principal, db, course_id, values)

        lesson_count = _insert_structure(principal, db, course, draft)

        db.commit()
    except PlatformError:
        db.rollback()
        raise
    except IntegrityError as e:
        db.rollback()
        raise ConstraintViolation.from_integrity_error(Course.__name__, e)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Saving course {course_id or values['slug']} failed: {e}")
        raise CourseSaveFailure(course_id, str(getattr(e, "orig", None) or e).split("\n")[0])

    logger.info(f"Saved course {course.id} with {len(draft.modules)} modules and {lesson_count} lessons")

    return load_course_structure(principal, db, course.id)


def load_course_structure(principal: Principal, db: Session, course_id: UUID) -> CourseStructureGet:
    """Course with ordered modules and lessons, each level filtered for ``principal``."""
    course = check_permissions(principal, Course, "get", db).filter(Course.id == course_id).first()

    if course is None:
        raise AuthorizationDenied(Course.__name__, "get")

    modules = (
        check_permissions(principal, CourseModule, "list", db)
        .filter(CourseModule.course_id == course.id)
        .order_by(CourseModule.sort_order)
        .all()
    )

    lessons_by_module = defaultdict(list)
    if modules:
        lessons = (
            check_permissions(principal, Lesson, "list", db)
            .filter(Lesson.module_id.in_([module.id for module in modules]))
            .order_by(Lesson.sort_order)
            .all()
        )
        for lesson in lessons:
            lessons_by_module[lesson.module_id].append(LessonGet.model_validate(lesson))

    return CourseStructureGet(
        course=CourseGet.model_validate(course),
        modules=[
            ModuleStructureGet(
                **CourseModuleGet.model_validate(module).model_dump(),
                lessons=lessons_by_module[module.id]
            )
            for module in modules
        ]
    )


def delete_course(principal: Principal, db: Session, course_id: UUID):
    """Delete a course; modules, lessons, enrollments and reviews go with it."""
    course = check_permissions(principal, Course, "delete", db).filter(Course.id == course_id).first()

    if course is None:
        raise AuthorizationDenied(Course.__name__, "delete")

    try:
        db.delete(course)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Deleting course {course_id} failed")
        raise

    logger.info(f"Deleted course {course_id}")
