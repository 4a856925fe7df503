from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from lms_backend.errors import AuthorizationDenied, ConstraintViolation, CourseSaveFailure
from lms_backend.interface.course_structure import CourseDraft, LessonDraft, ModuleDraft
from lms_backend.model import AppRole, Course, CourseModule, Enrollment, Lesson
from lms_backend.services.course_authoring import delete_course, generate_slug, load_course_structure, save_course
from lms_backend.tests.fixtures import enroll, grant_role, make_course, new_principal

pytestmark = pytest.mark.unit


def intro_cs(*modules, **fields) -> CourseDraft:
    fields.setdefault("title", "Intro CS")
    fields.setdefault("slug", "intro-cs")
    return CourseDraft(modules=list(modules), **fields)


BASICS = ModuleDraft(
    title="Basics",
    lessons=[
        LessonDraft(title="Welcome", is_preview=True),
        LessonDraft(title="Setup", is_preview=False),
    ]
)


@pytest.mark.parametrize("title,slug", [
    ("Intro to CS", "intro-to-cs"),
    ("  Python 101: The Basics!  ", "python-101-the-basics"),
    ("C++ & Rust", "c-rust"),
    ("Ünïcode", "n-code"),
    ("---", ""),
])
def test_generate_slug(title, slug):
    assert generate_slug(title) == slug


class TestSaveCourse:
    def test_create_with_structure(self, db, admin):
        saved = save_course(admin, db, intro_cs(BASICS))

        assert saved.course.slug == "intro-cs"
        assert saved.course.created_by == admin.user_id
        assert [m.title for m in saved.modules] == ["Basics"]
        assert [(l.title, l.sort_order, l.is_preview) for l in saved.modules[0].lessons] == [
            ("Welcome", 0, True),
            ("Setup", 1, False),
        ]
        assert saved.lesson_count == 2

    def test_slug_falls_back_to_title(self, db, admin):
        saved = save_course(admin, db, CourseDraft(title="Data Science: Part 2"))
        assert saved.course.slug == "data-science-part-2"

    def test_resave_replaces_structure(self, db, admin):
        first = save_course(admin, db, intro_cs(BASICS))
        old_module_ids = [m.id for m in first.modules]
        old_lesson_ids = [l.id for m in first.modules for l in m.lessons]

        second = save_course(admin, db, intro_cs(ModuleDraft(title="Basics"), ModuleDraft(title="Advanced")), first.course.id)

        modules = db.query(CourseModule).filter(CourseModule.course_id == first.course.id).order_by(CourseModule.sort_order).all()
        assert [(m.title, m.sort_order) for m in modules] == [("Basics", 0), ("Advanced", 1)]
        assert [m.id for m in second.modules] == [m.id for m in modules]

        assert db.query(CourseModule).filter(CourseModule.id.in_(old_module_ids)).count() == 0
        assert db.query(Lesson).filter(Lesson.id.in_(old_lesson_ids)).count() == 0

    def test_resave_makes_saving_admin_the_creator(self, db, admin):
        first = save_course(admin, db, intro_cs())

        other_admin = new_principal()
        grant_role(db, other_admin.user_id, AppRole.admin)

        second = save_course(other_admin, db, intro_cs(title="Intro CS, 2nd edition"), first.course.id)

        assert second.course.title == "Intro CS, 2nd edition"
        assert second.course.created_by == other_admin.user_id

    def test_duplicate_slug_rolls_back_resave(self, db, admin):
        make_course(db, "taken")
        first = save_course(admin, db, intro_cs(BASICS))

        with pytest.raises(ConstraintViolation):
            save_course(admin, db, intro_cs(ModuleDraft(title="Other"), slug="taken"), first.course.id)

        after = load_course_structure(admin, db, first.course.id)
        assert after.course.slug == "intro-cs"
        assert [m.id for m in after.modules] == [m.id for m in first.modules]
        assert after.lesson_count == 2

    def test_storage_failure_mid_save_rolls_back(self, db, admin, monkeypatch):
        first = save_course(admin, db, intro_cs(BASICS))

        real_flush = db.flush
        calls = {"count": 0}

        def failing_flush(*args, **kwargs):
            calls["count"] += 1
            # let the delete of the old structure through, fail on the first reinsert
            if calls["count"] == 2:
                raise OperationalError("INSERT INTO course_modules", {}, Exception("connection lost"))
            return real_flush(*args, **kwargs)

        monkeypatch.setattr(db, "flush", failing_flush)

        with pytest.raises(CourseSaveFailure):
            save_course(admin, db, intro_cs(ModuleDraft(title="Replacement")), first.course.id)

        monkeypatch.undo()

        after = load_course_structure(admin, db, first.course.id)
        assert [m.id for m in after.modules] == [m.id for m in first.modules]
        assert after.lesson_count == 2

    def test_students_cannot_save(self, db, admin, student):
        with pytest.raises(AuthorizationDenied):
            save_course(student, db, intro_cs(BASICS))
        assert db.query(Course).count() == 0

        course_id = save_course(admin, db, intro_cs(BASICS)).course.id
        with pytest.raises(AuthorizationDenied):
            save_course(student, db, intro_cs(), course_id)
        assert db.query(CourseModule).filter(CourseModule.course_id == course_id).count() == 1

    def test_missing_course_reported_like_denial(self, db, admin):
        with pytest.raises(AuthorizationDenied):
            save_course(admin, db, intro_cs(), uuid4())


class TestLoadCourseStructure:
    @pytest.fixture
    def course_id(self, db, admin):
        return save_course(admin, db, intro_cs(BASICS, is_published=True)).course.id

    def test_visitor_sees_preview_lessons_only(self, db, visitor, course_id):
        structure = load_course_structure(visitor, db, course_id)

        assert [m.title for m in structure.modules] == ["Basics"]
        assert [l.title for l in structure.modules[0].lessons] == ["Welcome"]

    def test_enrolled_student_sees_all_lessons(self, db, student, course_id):
        enroll(db, student.user_id, db.get(Course, course_id))

        structure = load_course_structure(student, db, course_id)

        assert [l.title for l in structure.modules[0].lessons] == ["Welcome", "Setup"]

    def test_unpublished_course_hidden(self, db, admin, student):
        course_id = save_course(admin, db, intro_cs(BASICS)).course.id

        with pytest.raises(AuthorizationDenied):
            load_course_structure(student, db, course_id)


class TestDeleteCourse:
    def test_admin_delete_cascades(self, db, admin, student):
        saved = save_course(admin, db, intro_cs(BASICS, is_published=True))
        enroll(db, student.user_id, db.get(Course, saved.course.id))

        delete_course(admin, db, saved.course.id)
        db.expunge_all()

        assert db.query(Course).count() == 0
        assert db.query(CourseModule).count() == 0
        assert db.query(Lesson).count() == 0
        assert db.query(Enrollment).count() == 0

    def test_student_delete_denied(self, db, admin, student):
        course_id = save_course(admin, db, intro_cs(is_published=True)).course.id

        with pytest.raises(AuthorizationDenied):
            delete_course(student, db, course_id)
        assert db.get(Course, course_id) is not None
