"""FastAPI application wiring the idempotency gate and the query pipeline.

``create_app`` builds a self-contained demo LMS API:

- POST /api/courses, POST /api/students: require an Idempotency-Key
- POST /api/enrollments: honors an Idempotency-Key when one is sent
- GET /api/courses, GET /api/students: paged, sortable, searchable lists
- GET /api/courses/{id}, GET /api/students/{id}
- GET /health and /metrics (Prometheus)

The cache store, route policy table and catalogs are created once here and
shared by every request.
"""

from uuid import UUID

from fastapi import Depends, FastAPI, Request, Response
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app

from lms_core import __version__
from lms_core.adapters.asgi import ASGIIdempotencyMiddleware
from lms_core.catalog import (
    CourseCatalog,
    CourseCreate,
    CourseDto,
    EnrollmentCatalog,
    EnrollmentCreate,
    EnrollmentDto,
    StudentCatalog,
    StudentCreate,
    StudentDto,
)
from lms_core.config import IdempotencyConfig
from lms_core.exceptions import CatalogError
from lms_core.models import IdempotencyPolicy, ProblemDetails
from lms_core.observability.logging import get_logger
from lms_core.query.dependencies import paging_query
from lms_core.query.models import PagedResult, PagingQuery
from lms_core.routing import RoutePolicyTable
from lms_core.storage.base import CacheStore
from lms_core.storage.memory import MemoryCacheStore

logger = get_logger(__name__)

COURSES_PATH = "/api/courses"
STUDENTS_PATH = "/api/students"
ENROLLMENTS_PATH = "/api/enrollments"


def build_route_policies() -> RoutePolicyTable:
    """Idempotency policies of the demo API's mutating routes."""
    policies = RoutePolicyTable()
    policies.register("POST", COURSES_PATH, IdempotencyPolicy.REQUIRED)
    policies.register("POST", STUDENTS_PATH, IdempotencyPolicy.REQUIRED)
    policies.register("POST", ENROLLMENTS_PATH, IdempotencyPolicy.OPTIONAL)
    return policies


async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    """Render catalog errors as RFC 7807 problem details."""
    logger.warning(
        "catalog.request_failed",
        code=exc.code,
        status_code=exc.status_code,
        path=request.url.path,
    )
    problem = ProblemDetails(
        title=exc.code,
        status=exc.status_code,
        detail=exc.message,
        instance=request.url.path,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=problem.model_dump(exclude_none=True),
        media_type="application/problem+json",
    )


def create_app(
    store: CacheStore | None = None,
    config: IdempotencyConfig | None = None,
    courses: CourseCatalog | None = None,
    students: StudentCatalog | None = None,
    enrollments: EnrollmentCatalog | None = None,
) -> FastAPI:
    """Build the demo API.

    Args:
        store: Idempotency cache (a fresh MemoryCacheStore by default)
        config: Gate configuration (defaults if not provided)
        courses: Course catalog (empty by default)
        students: Student catalog (empty by default)
        enrollments: Enrollment catalog (empty, over ``courses`` and
            ``students``, by default)

    Returns:
        The configured FastAPI application. The collaborators are also
        reachable on ``app.state``.
    """
    store = store if store is not None else MemoryCacheStore()
    config = config or IdempotencyConfig()
    courses = courses if courses is not None else CourseCatalog()
    students = students if students is not None else StudentCatalog()
    if enrollments is None:
        enrollments = EnrollmentCatalog(courses, students)
    policies = build_route_policies()

    app = FastAPI(
        title="LMS Dashboard API",
        description="Demo LMS API with idempotent creates and paged lists",
        version=__version__,
    )
    app.state.store = store
    app.state.courses = courses
    app.state.students = students
    app.state.enrollments = enrollments
    app.state.policies = policies

    app.add_middleware(
        ASGIIdempotencyMiddleware,
        store=store,
        policies=policies,
        config=config,
    )
    app.add_exception_handler(CatalogError, catalog_error_handler)
    app.mount("/metrics", make_asgi_app())

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get(COURSES_PATH, response_model=PagedResult[CourseDto])
    async def list_courses(query: PagingQuery = Depends(paging_query)) -> PagedResult[CourseDto]:
        """Courses, paged, sortable by code or title, searchable by code or title."""
        return courses.query(query)

    @app.get(COURSES_PATH + "/{course_id}", response_model=CourseDto)
    async def get_course(course_id: UUID) -> CourseDto:
        return courses.get(course_id)

    @app.post(COURSES_PATH, response_model=CourseDto, status_code=201)
    async def create_course(payload: CourseCreate, response: Response) -> CourseDto:
        """Create a course. Retries with the same Idempotency-Key replay the first result."""
        course = courses.create(payload)
        response.headers["Location"] = f"{COURSES_PATH}/{course.id}"
        return course

    @app.get(STUDENTS_PATH, response_model=PagedResult[StudentDto])
    async def list_students(
        query: PagingQuery = Depends(paging_query),
    ) -> PagedResult[StudentDto]:
        """Students, paged, sortable by name or email, searchable by name or email."""
        return students.query(query)

    @app.get(STUDENTS_PATH + "/{student_id}", response_model=StudentDto)
    async def get_student(student_id: UUID) -> StudentDto:
        return students.get(student_id)

    @app.post(STUDENTS_PATH, response_model=StudentDto, status_code=201)
    async def create_student(payload: StudentCreate, response: Response) -> StudentDto:
        """Create a student. Retries with the same Idempotency-Key replay the first result."""
        student = students.create(payload)
        response.headers["Location"] = f"{STUDENTS_PATH}/{student.id}"
        return student

    @app.post(ENROLLMENTS_PATH, response_model=EnrollmentDto, status_code=201)
    async def assign_student(payload: EnrollmentCreate) -> EnrollmentDto:
        """Enroll a student in a course. The Idempotency-Key header is optional."""
        return enrollments.assign(payload)

    return app
