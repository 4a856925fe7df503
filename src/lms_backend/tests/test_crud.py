"""
Generic CRUD through the policy engine: constraint violations surface as
ConstraintViolation, denials look exactly like missing rows.
"""

from datetime import datetime
from uuid import uuid4

import pytest

from lms_backend.api.crud import create_db, delete_db, get_id_db, list_db, update_db
from lms_backend.api.exceptions import NotFoundException
from lms_backend.errors import AuthorizationDenied, ConstraintViolation
from lms_backend.interface.course_reviews import CourseReviewApproval, CourseReviewCreate, CourseReviewInterface, CourseReviewUpdate
from lms_backend.interface.courses import CourseCreate, CourseInterface, CourseQuery
from lms_backend.interface.enrollments import EnrollmentCreate, EnrollmentInterface, EnrollmentUpdate
from lms_backend.interface.profiles import ProfileCreate, ProfileInterface
from lms_backend.interface.user_roles import UserRoleCreate, UserRoleInterface
from lms_backend.model import AppRole, Course, CourseReview
from lms_backend.tests.fixtures import make_course

pytestmark = pytest.mark.unit


class TestReviews:
    @pytest.mark.asyncio
    async def test_rating_out_of_range_is_constraint_violation(self, db, student):
        course = make_course(db, "published")

        with pytest.raises(ConstraintViolation) as exc_info:
            await create_db(student, db, CourseReviewCreate(course_id=course.id, rating=6), CourseReviewInterface)
        assert exc_info.value.entity_type == "CourseReview"

        review = await create_db(student, db, CourseReviewCreate(course_id=course.id, rating=5), CourseReviewInterface)
        assert review.rating == 5

    @pytest.mark.asyncio
    async def test_author_defaults_to_caller(self, db, student):
        course = make_course(db, "published")

        review = await create_db(student, db, CourseReviewCreate(course_id=course.id, rating=4), CourseReviewInterface)

        assert review.user_id == student.user_id
        assert review.is_approved is False

    @pytest.mark.asyncio
    async def test_second_review_for_same_course_rejected(self, db, student):
        course = make_course(db, "published")
        await create_db(student, db, CourseReviewCreate(course_id=course.id, rating=4), CourseReviewInterface)

        with pytest.raises(ConstraintViolation):
            await create_db(student, db, CourseReviewCreate(course_id=course.id, rating=2), CourseReviewInterface)

        assert db.query(CourseReview).count() == 1

    @pytest.mark.asyncio
    async def test_reviewing_as_someone_else_denied(self, db, student, other_student):
        course = make_course(db, "published")
        payload = CourseReviewCreate(course_id=course.id, rating=5, user_id=other_student.user_id)

        with pytest.raises(AuthorizationDenied):
            await create_db(student, db, payload, CourseReviewInterface)

    @pytest.mark.asyncio
    async def test_author_edits_but_cannot_approve(self, db, admin, student):
        course = make_course(db, "published")
        review = await create_db(student, db, CourseReviewCreate(course_id=course.id, rating=3), CourseReviewInterface)

        updated = update_db(student, db, review.id, CourseReviewUpdate(rating=4, review_text="Better now"), CourseReviewInterface)
        assert updated.rating == 4

        with pytest.raises(AuthorizationDenied):
            update_db(student, db, review.id, CourseReviewApproval(is_approved=True), CourseReviewInterface)

        approved = update_db(admin, db, review.id, CourseReviewApproval(is_approved=True), CourseReviewInterface)
        assert approved.is_approved is True

    @pytest.mark.asyncio
    async def test_update_rating_out_of_range_rolls_back(self, db, student):
        course = make_course(db, "published")
        review = await create_db(student, db, CourseReviewCreate(course_id=course.id, rating=3), CourseReviewInterface)

        with pytest.raises(ConstraintViolation):
            update_db(student, db, review.id, CourseReviewUpdate(rating=0), CourseReviewInterface)

        assert db.get(CourseReview, review.id).rating == 3


class TestEnrollments:
    @pytest.mark.asyncio
    async def test_duplicate_enrollment_rejected(self, db, admin, student):
        course = make_course(db, "published")
        payload = EnrollmentCreate(user_id=student.user_id, course_id=course.id)

        await create_db(admin, db, payload, EnrollmentInterface)
        with pytest.raises(ConstraintViolation):
            await create_db(admin, db, payload, EnrollmentInterface)

    @pytest.mark.asyncio
    async def test_invalid_status_rejected(self, db, admin, student):
        course = make_course(db, "published")
        enrollment = await create_db(admin, db, EnrollmentCreate(user_id=student.user_id, course_id=course.id), EnrollmentInterface)

        with pytest.raises(ConstraintViolation):
            update_db(admin, db, enrollment.id, EnrollmentUpdate(status="paused"), EnrollmentInterface)

        refunded = update_db(admin, db, enrollment.id, EnrollmentUpdate(status="refunded"), EnrollmentInterface)
        assert refunded.status == "refunded"
        assert refunded.is_active is False

    @pytest.mark.asyncio
    async def test_students_cannot_enroll(self, db, student):
        course = make_course(db, "published")

        with pytest.raises(AuthorizationDenied):
            await create_db(student, db, EnrollmentCreate(user_id=student.user_id, course_id=course.id), EnrollmentInterface)


class TestRoleGrants:
    @pytest.mark.asyncio
    async def test_duplicate_grant_rejected(self, db, admin, student):
        with pytest.raises(ConstraintViolation):
            await create_db(admin, db, UserRoleCreate(user_id=student.user_id, role=AppRole.student), UserRoleInterface)

    @pytest.mark.asyncio
    async def test_admin_grants_admin(self, db, admin, student):
        grant = await create_db(admin, db, UserRoleCreate(user_id=student.user_id, role=AppRole.admin), UserRoleInterface)
        assert grant.role == AppRole.admin


class TestCourses:
    @pytest.mark.asyncio
    async def test_creator_recorded(self, db, admin):
        course = await create_db(admin, db, CourseCreate(title="Intro CS", slug="intro-cs"), CourseInterface)
        assert course.created_by == admin.user_id

    @pytest.mark.asyncio
    async def test_duplicate_slug_rejected(self, db, admin):
        make_course(db, "intro-cs")

        with pytest.raises(ConstraintViolation):
            await create_db(admin, db, CourseCreate(title="Intro CS", slug="intro-cs"), CourseInterface)

    @pytest.mark.asyncio
    async def test_list_newest_first_with_total(self, db, visitor):
        make_course(db, "old", created_at=datetime(2024, 1, 1))
        make_course(db, "new", created_at=datetime(2025, 1, 1))
        make_course(db, "hidden", is_published=False, created_at=datetime(2026, 1, 1))

        courses, total = await list_db(visitor, db, CourseQuery(), CourseInterface)

        assert [c.slug for c in courses] == ["new", "old"]
        assert total == 2

    @pytest.mark.asyncio
    async def test_list_pagination_keeps_total(self, db, admin):
        for i in range(5):
            make_course(db, f"course-{i}")

        courses, total = await list_db(admin, db, CourseQuery(skip=1, limit=2), CourseInterface)

        assert len(courses) == 2
        assert total == 5

    @pytest.mark.asyncio
    async def test_hidden_course_indistinguishable_from_missing(self, db, student):
        draft = make_course(db, "draft", is_published=False)

        with pytest.raises(NotFoundException) as hidden:
            await get_id_db(student, db, draft.id, CourseInterface)
        with pytest.raises(NotFoundException) as missing:
            await get_id_db(student, db, uuid4(), CourseInterface)

        assert hidden.value.status_code == missing.value.status_code == 404
        assert hidden.value.detail == missing.value.detail

    def test_student_delete_looks_like_missing(self, db, student):
        course = make_course(db, "published")

        with pytest.raises(NotFoundException):
            delete_db(student, db, course.id, Course)
        assert db.get(Course, course.id) is not None


class TestProfiles:
    @pytest.mark.asyncio
    async def test_profile_for_self(self, db, student):
        profile = await create_db(student, db, ProfileCreate(full_name="Ada"), ProfileInterface)
        assert profile.user_id == student.user_id

    @pytest.mark.asyncio
    async def test_profile_for_someone_else_denied(self, db, admin, student):
        with pytest.raises(AuthorizationDenied):
            await create_db(admin, db, ProfileCreate(user_id=student.user_id), ProfileInterface)
