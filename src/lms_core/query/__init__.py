"""Search, sort and paging pipeline shared by list endpoints."""

from lms_core.query.dependencies import paging_query
from lms_core.query.models import (
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    PagedResult,
    PagingQuery,
)
from lms_core.query.pipeline import (
    apply_pagination,
    apply_search,
    apply_sort,
    contains_ignore_case,
    field_selector,
    parse_sort,
    run_query,
)

__all__ = [
    "DEFAULT_PAGE",
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "PagedResult",
    "PagingQuery",
    "apply_pagination",
    "apply_search",
    "apply_sort",
    "contains_ignore_case",
    "field_selector",
    "paging_query",
    "parse_sort",
    "run_query",
]
