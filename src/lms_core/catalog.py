"""In-memory course, student and enrollment catalogs for the demo API.

The catalogs are the collaborators the idempotency gate protects and the
query pipeline pages over. They keep entities in a dict guarded by a
threading.Lock, so uniqueness checks and inserts happen atomically even when
requests run concurrently.

Examples:
    Creating and listing courses::

        courses = CourseCatalog()
        courses.create(CourseCreate(code="PY101", title="Python basics"))
        page = courses.query(PagingQuery(sort="-code"))
"""

import re
import threading
from datetime import UTC, datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from lms_core.exceptions import DuplicateError, NotFoundError, ValidationFailedError
from lms_core.observability.logging import get_logger
from lms_core.query.models import PagedResult, PagingQuery
from lms_core.query.pipeline import contains_ignore_case, field_selector, run_query

logger = get_logger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _utc_now() -> datetime:
    return datetime.now(UTC)


class Course(BaseModel):
    """Course entity."""

    id: UUID = Field(default_factory=uuid4)
    code: str
    title: str
    description: str | None = None
    created_at: datetime = Field(default_factory=_utc_now)


class CourseCreate(BaseModel):
    """Payload for creating a course."""

    code: str = Field(..., max_length=32, examples=["PY101"])
    title: str = Field(..., max_length=200, examples=["Python basics"])
    description: str | None = Field(default=None, max_length=2000)


class CourseDto(BaseModel):
    """Course as returned by the API."""

    id: UUID
    code: str
    title: str
    description: str | None = None

    @classmethod
    def from_entity(cls, course: Course) -> "CourseDto":
        return cls(
            id=course.id,
            code=course.code,
            title=course.title,
            description=course.description,
        )


class Student(BaseModel):
    """Student entity."""

    id: UUID = Field(default_factory=uuid4)
    name: str
    email: str
    created_at: datetime = Field(default_factory=_utc_now)


class StudentCreate(BaseModel):
    """Payload for creating a student."""

    name: str = Field(..., max_length=200, examples=["Ada Lovelace"])
    email: str = Field(..., max_length=320, examples=["ada@example.com"])


class StudentDto(BaseModel):
    """Student as returned by the API."""

    id: UUID
    name: str
    email: str

    @classmethod
    def from_entity(cls, student: Student) -> "StudentDto":
        return cls(id=student.id, name=student.name, email=student.email)


class CourseCatalog:
    """Thread-safe in-memory course repository.

    Course codes are unique, compared case-insensitively.
    """

    search_predicate = staticmethod(contains_ignore_case(lambda c: (c.title, c.code)))
    sort_key = staticmethod(
        field_selector(
            {"code": lambda c: c.code, "title": lambda c: c.title},
            default=lambda c: str(c.id),
        )
    )

    def __init__(self) -> None:
        self._courses: dict[UUID, Course] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._courses)

    def create(self, payload: CourseCreate) -> CourseDto:
        """Create a course.

        Raises:
            ValidationFailedError: If code or title is blank
            DuplicateError: If another course already uses the code
        """
        code = payload.code.strip()
        title = payload.title.strip()
        if not code:
            raise ValidationFailedError("Course code is required", code="course.code_required")
        if not title:
            raise ValidationFailedError("Course title is required", code="course.title_required")

        description = (payload.description or "").strip() or None
        course = Course(code=code, title=title, description=description)

        with self._lock:
            if any(c.code.casefold() == code.casefold() for c in self._courses.values()):
                raise DuplicateError(
                    f"Course code '{code}' already exists",
                    code="course.duplicate_code",
                )
            self._courses[course.id] = course

        logger.info("catalog.course_created", course_id=str(course.id), code=code)
        return CourseDto.from_entity(course)

    def get(self, course_id: UUID) -> CourseDto:
        """Fetch one course.

        Raises:
            NotFoundError: If the course does not exist
        """
        with self._lock:
            course = self._courses.get(course_id)

        if course is None:
            raise NotFoundError(f"Course '{course_id}' was not found", code="course.not_found")
        return CourseDto.from_entity(course)

    def query(self, query: PagingQuery) -> PagedResult[CourseDto]:
        """Search, sort and page the catalog. Default order is by code."""
        with self._lock:
            courses = sorted(self._courses.values(), key=lambda c: c.code)

        return run_query(
            courses,
            query,
            search_predicate=self.search_predicate,
            sort_key=self.sort_key,
            mapper=CourseDto.from_entity,
            resource="courses",
        )


class StudentCatalog:
    """Thread-safe in-memory student repository."""

    search_predicate = staticmethod(contains_ignore_case(lambda s: (s.name, s.email)))
    sort_key = staticmethod(
        field_selector(
            {"name": lambda s: s.name, "email": lambda s: s.email},
            default=lambda s: str(s.id),
        )
    )

    def __init__(self) -> None:
        self._students: dict[UUID, Student] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._students)

    def create(self, payload: StudentCreate) -> StudentDto:
        """Create a student.

        Raises:
            ValidationFailedError: If the name is blank or the email is invalid
        """
        name = payload.name.strip()
        email = payload.email.strip()
        if not name:
            raise ValidationFailedError("Student name is required", code="student.name_required")
        if not EMAIL_PATTERN.match(email):
            raise ValidationFailedError(
                f"Email '{email}' is invalid",
                code="student.invalid_email",
            )

        student = Student(name=name, email=email)
        with self._lock:
            self._students[student.id] = student

        logger.info("catalog.student_created", student_id=str(student.id))
        return StudentDto.from_entity(student)

    def get(self, student_id: UUID) -> StudentDto:
        """Fetch one student.

        Raises:
            NotFoundError: If the student does not exist
        """
        with self._lock:
            student = self._students.get(student_id)

        if student is None:
            raise NotFoundError(f"Student '{student_id}' was not found", code="student.not_found")
        return StudentDto.from_entity(student)

    def query(self, query: PagingQuery) -> PagedResult[StudentDto]:
        """Search, sort and page the catalog. Default order is by name."""
        with self._lock:
            students = sorted(self._students.values(), key=lambda s: s.name)

        return run_query(
            students,
            query,
            search_predicate=self.search_predicate,
            sort_key=self.sort_key,
            mapper=StudentDto.from_entity,
            resource="students",
        )


class Enrollment(BaseModel):
    """Enrollment of a student in a course."""

    id: UUID = Field(default_factory=uuid4)
    student_id: UUID
    course_id: UUID
    enrolled_at: datetime = Field(default_factory=_utc_now)


class EnrollmentCreate(BaseModel):
    """Payload for assigning a student to a course."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    student_id: UUID
    course_id: UUID


class EnrollmentDto(BaseModel):
    """Enrollment with the student and course it links."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: UUID
    student_id: UUID
    course_id: UUID
    enrollment_date: datetime
    student_name: str
    student_email: str
    course_code: str
    course_title: str


class EnrollmentCatalog:
    """Thread-safe in-memory enrollments between existing students and courses.

    A student can be enrolled in a given course only once.
    """

    def __init__(self, courses: CourseCatalog, students: StudentCatalog) -> None:
        self._courses = courses
        self._students = students
        self._enrollments: dict[UUID, Enrollment] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._enrollments)

    def assign(self, payload: EnrollmentCreate) -> EnrollmentDto:
        """Enroll a student in a course.

        Raises:
            NotFoundError: If the course or the student does not exist
            DuplicateError: If the student is already enrolled in the course
        """
        try:
            course = self._courses.get(payload.course_id)
        except NotFoundError:
            raise NotFoundError(
                f"Course '{payload.course_id}' not found",
                code="enrollment.course_missing",
            ) from None
        try:
            student = self._students.get(payload.student_id)
        except NotFoundError:
            raise NotFoundError(
                f"Student '{payload.student_id}' not found",
                code="enrollment.student_missing",
            ) from None

        enrollment = Enrollment(student_id=student.id, course_id=course.id)
        with self._lock:
            if any(
                e.student_id == student.id and e.course_id == course.id
                for e in self._enrollments.values()
            ):
                raise DuplicateError(
                    f"Student '{student.id}' already enrolled to course '{course.id}'",
                    code="enrollment.duplicate",
                )
            self._enrollments[enrollment.id] = enrollment

        logger.info(
            "catalog.student_enrolled",
            enrollment_id=str(enrollment.id),
            student_id=str(student.id),
            course_id=str(course.id),
        )
        return EnrollmentDto(
            id=enrollment.id,
            student_id=student.id,
            course_id=course.id,
            enrollment_date=enrollment.enrolled_at,
            student_name=student.name,
            student_email=student.email,
            course_code=course.code,
            course_title=course.title,
        )
