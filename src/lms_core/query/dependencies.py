"""FastAPI dependency reading paging options from the query string.

Recognized parameters: ``page``, ``pageSize``, ``sort`` and ``search``.

Example:
    >>> @app.get("/api/courses", response_model=PagedResult[CourseDto])
    ... async def list_courses(query: PagingQuery = Depends(paging_query)):
    ...     return catalog.query(query)
"""

from fastapi import Query

from lms_core.query.models import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, PagingQuery


def paging_query(
    page: int = Query(DEFAULT_PAGE, description="1-based page number"),
    page_size: int = Query(
        DEFAULT_PAGE_SIZE,
        alias="pageSize",
        description="Items per page, clamped to 1-100",
    ),
    sort: str | None = Query(
        None,
        description="Comma-separated fields, '-' prefix for descending",
    ),
    search: str | None = Query(None, description="Free-text filter"),
) -> PagingQuery:
    """Build a PagingQuery from request query parameters."""
    return PagingQuery(page=page, page_size=page_size, sort=sort, search=search)
