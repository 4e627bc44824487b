"""Unit tests for the in-memory course, student and enrollment catalogs."""

import threading
from uuid import uuid4

import pytest

from lms_core.catalog import (
    CourseCatalog,
    CourseCreate,
    EnrollmentCatalog,
    EnrollmentCreate,
    StudentCatalog,
    StudentCreate,
)
from lms_core.exceptions import DuplicateError, NotFoundError, ValidationFailedError
from lms_core.query.models import PagingQuery


@pytest.fixture
def courses() -> CourseCatalog:
    catalog = CourseCatalog()
    for code, title in [("PY201", "Advanced Python"), ("PY101", "Python basics"),
                        ("GO101", "Go basics")]:
        catalog.create(CourseCreate(code=code, title=title))
    return catalog


class TestCourseCatalog:
    def test_create_trims_and_returns_dto(self):
        catalog = CourseCatalog()

        course = catalog.create(CourseCreate(code=" CS50 ", title=" Intro ", description=" "))

        assert course.code == "CS50"
        assert course.title == "Intro"
        assert course.description is None
        assert catalog.get(course.id) == course
        assert len(catalog) == 1

    @pytest.mark.parametrize(
        ("description", "expected"),
        [(None, None), ("", None), ("   ", None), ("\t\n", None), (" Loops ", "Loops")],
    )
    def test_blank_description_stored_as_none(self, description, expected):
        course = CourseCatalog().create(
            CourseCreate(code="CS50", title="Intro", description=description)
        )

        assert course.description == expected

    @pytest.mark.parametrize(
        ("code", "title", "error_code"),
        [(" ", "Title", "course.code_required"), ("CS50", "", "course.title_required")],
    )
    def test_blank_fields_rejected(self, code, title, error_code):
        with pytest.raises(ValidationFailedError) as exc_info:
            CourseCatalog().create(CourseCreate(code=code, title=title))

        assert exc_info.value.code == error_code
        assert exc_info.value.status_code == 422

    def test_duplicate_code_case_insensitive(self, courses):
        with pytest.raises(DuplicateError) as exc_info:
            courses.create(CourseCreate(code="py101", title="Again"))

        assert exc_info.value.code == "course.duplicate_code"
        assert exc_info.value.status_code == 409
        assert len(courses) == 3

    def test_get_missing(self, courses):
        with pytest.raises(NotFoundError) as exc_info:
            courses.get(uuid4())

        assert exc_info.value.code == "course.not_found"

    def test_default_order_is_by_code(self, courses):
        page = courses.query(PagingQuery())
        assert [c.code for c in page.items] == ["GO101", "PY101", "PY201"]

    def test_sort_descending_by_title(self, courses):
        page = courses.query(PagingQuery(sort="-title"))
        assert [c.title for c in page.items] == ["Python basics", "Go basics", "Advanced Python"]

    def test_search_matches_title_or_code(self, courses):
        assert [c.code for c in courses.query(PagingQuery(search="BASICS")).items] == [
            "GO101",
            "PY101",
        ]
        assert [c.code for c in courses.query(PagingQuery(search="py2")).items] == ["PY201"]

    def test_paging(self, courses):
        page = courses.query(PagingQuery(page=2, page_size=2))

        assert [c.code for c in page.items] == ["PY201"]
        assert page.total_count == 3
        assert page.total_pages == 2
        assert page.has_previous_page is True
        assert page.has_next_page is False

    def test_concurrent_duplicate_creates(self):
        catalog = CourseCatalog()
        errors: list[Exception] = []

        def create() -> None:
            try:
                catalog.create(CourseCreate(code="RACE", title="Race"))
            except DuplicateError as e:
                errors.append(e)

        threads = [threading.Thread(target=create) for _ in range(10)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(catalog) == 1
        assert len(errors) == 9


class TestStudentCatalog:
    def test_create_and_get(self):
        catalog = StudentCatalog()

        student = catalog.create(StudentCreate(name=" Ada ", email="ada@example.com"))

        assert student.name == "Ada"
        assert catalog.get(student.id) == student

    @pytest.mark.parametrize("email", ["", "ada", "ada@", "ada@example", "a b@example.com"])
    def test_invalid_email(self, email):
        with pytest.raises(ValidationFailedError) as exc_info:
            StudentCatalog().create(StudentCreate(name="Ada", email=email))

        assert exc_info.value.code == "student.invalid_email"

    def test_blank_name(self):
        with pytest.raises(ValidationFailedError) as exc_info:
            StudentCatalog().create(StudentCreate(name="  ", email="ada@example.com"))

        assert exc_info.value.code == "student.name_required"

    def test_duplicate_emails_allowed(self):
        catalog = StudentCatalog()
        catalog.create(StudentCreate(name="Ada", email="ada@example.com"))
        catalog.create(StudentCreate(name="Ada", email="ada@example.com"))

        assert len(catalog) == 2

    def test_get_missing(self):
        with pytest.raises(NotFoundError) as exc_info:
            StudentCatalog().get(uuid4())

        assert exc_info.value.code == "student.not_found"

    def test_query_default_order_and_search(self):
        catalog = StudentCatalog()
        for name, email in [("Grace", "grace@navy.mil"), ("Ada", "ada@example.com"),
                            ("Alan", "alan@example.com")]:
            catalog.create(StudentCreate(name=name, email=email))

        assert [s.name for s in catalog.query(PagingQuery()).items] == ["Ada", "Alan", "Grace"]
        assert [s.name for s in catalog.query(PagingQuery(search="EXAMPLE")).items] == [
            "Ada",
            "Alan",
        ]
        assert [s.name for s in catalog.query(PagingQuery(sort="-email")).items] == [
            "Grace",
            "Alan",
            "Ada",
        ]


class TestEnrollmentCatalog:
    @pytest.fixture
    def catalogs(self) -> tuple[CourseCatalog, StudentCatalog, EnrollmentCatalog]:
        courses = CourseCatalog()
        students = StudentCatalog()
        return courses, students, EnrollmentCatalog(courses, students)

    def test_assign_expands_student_and_course(self, catalogs):
        courses, students, enrollments = catalogs
        course = courses.create(CourseCreate(code="PY101", title="Python basics"))
        student = students.create(StudentCreate(name="Ada", email="ada@example.com"))

        enrollment = enrollments.assign(
            EnrollmentCreate(student_id=student.id, course_id=course.id)
        )

        assert enrollment.student_id == student.id
        assert enrollment.course_id == course.id
        assert enrollment.student_name == "Ada"
        assert enrollment.course_code == "PY101"
        assert len(enrollments) == 1

    def test_accepts_camel_case_payload(self):
        student_id, course_id = uuid4(), uuid4()

        payload = EnrollmentCreate.model_validate(
            {"studentId": str(student_id), "courseId": str(course_id)}
        )

        assert (payload.student_id, payload.course_id) == (student_id, course_id)

    def test_missing_course(self, catalogs):
        _, students, enrollments = catalogs
        student = students.create(StudentCreate(name="Ada", email="ada@example.com"))

        with pytest.raises(NotFoundError) as exc_info:
            enrollments.assign(EnrollmentCreate(student_id=student.id, course_id=uuid4()))

        assert exc_info.value.code == "enrollment.course_missing"

    def test_missing_student(self, catalogs):
        courses, _, enrollments = catalogs
        course = courses.create(CourseCreate(code="PY101", title="Python basics"))

        with pytest.raises(NotFoundError) as exc_info:
            enrollments.assign(EnrollmentCreate(student_id=uuid4(), course_id=course.id))

        assert exc_info.value.code == "enrollment.student_missing"

    def test_duplicate_enrollment(self, catalogs):
        courses, students, enrollments = catalogs
        course = courses.create(CourseCreate(code="PY101", title="Python basics"))
        student = students.create(StudentCreate(name="Ada", email="ada@example.com"))
        payload = EnrollmentCreate(student_id=student.id, course_id=course.id)
        enrollments.assign(payload)

        with pytest.raises(DuplicateError) as exc_info:
            enrollments.assign(payload)

        assert exc_info.value.code == "enrollment.duplicate"
        assert exc_info.value.status_code == 409
        assert len(enrollments) == 1
