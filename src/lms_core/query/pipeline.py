"""Search, sort and paginate in-memory collections.

Every list endpoint runs its entities through the same three stages:

1. ``apply_search`` keeps items accepted by an entity-specific predicate
2. ``apply_sort`` orders by one or more fields, each ascending or descending
3. ``apply_pagination`` clamps the page request, slices and maps to DTOs

The stages are pure functions. The entity-specific parts (how to match a
search term, how to read a sort field, how to build a DTO) are passed in by
the caller, so the pipeline knows nothing about students or courses.

Examples:
    Paging courses::

        result = run_query(
            courses,
            PagingQuery(page=1, page_size=10, sort="-code", search="py"),
            search_predicate=contains_ignore_case(lambda c: (c.code, c.title)),
            sort_key=field_selector({"code": lambda c: c.code}, default=lambda c: c.id),
            mapper=CourseDto.from_entity,
        )
        result.total_count
"""

import math
from collections.abc import Callable, Iterable, Mapping
from functools import partial
from typing import Any, TypeVar

from lms_core.observability.logging import get_logger
from lms_core.observability.metrics import record_page
from lms_core.query.models import MAX_PAGE_SIZE, PagedResult, PagingQuery

logger = get_logger(__name__)

T = TypeVar("T")
D = TypeVar("D")


def apply_search(
    items: Iterable[T],
    query: PagingQuery,
    predicate: Callable[[T, str], bool],
) -> list[T]:
    """Keep the items matching the query's search term.

    Args:
        items: Source collection
        query: Paging query; only ``search`` is used
        predicate: ``(item, term) -> bool``

    Returns:
        Matching items in source order, or all items when search is blank
    """
    if query.search is None or not query.search.strip():
        return list(items)

    term = query.search
    return [item for item in items if predicate(item, term)]


def parse_sort(sort: str | None) -> list[tuple[str, bool]]:
    """Split a sort expression into (field, descending) pairs.

    Example:
        >>> parse_sort(" code , -title,,")
        [('code', False), ('title', True)]
    """
    if sort is None:
        return []

    keys: list[tuple[str, bool]] = []
    for token in sort.split(","):
        token = token.strip()
        if not token:
            continue
        if token.startswith("-"):
            keys.append((token[1:], True))
        else:
            keys.append((token, False))

    return keys


def _ordering_key(selector: Callable[[Any, str], Any], field: str, item: Any) -> tuple[bool, Any]:
    # None orders before every other value
    value = selector(item, field)
    return (value is not None, value)


def apply_sort(
    items: Iterable[T],
    query: PagingQuery,
    key_selector: Callable[[T, str], Any],
) -> list[T]:
    """Order items by the query's sort expression.

    The first field is the primary key, later fields break ties. Each field
    has its own direction. Items that compare equal on every field keep
    their source order.

    Args:
        items: Source collection
        query: Paging query; only ``sort`` is used
        key_selector: ``(item, field) -> value``; by convention unknown
            fields return the entity id

    Returns:
        Sorted items, or items in source order when sort is blank
    """
    result = list(items)
    keys = parse_sort(query.sort)
    if not keys:
        return result

    # Stable sorts applied from the least to the most significant key
    for field, descending in reversed(keys):
        result.sort(key=partial(_ordering_key, key_selector, field), reverse=descending)

    return result


def apply_pagination(
    items: Iterable[T],
    query: PagingQuery,
    mapper: Callable[[T], D],
) -> PagedResult[D]:
    """Slice one page out of the items and map it to DTOs.

    The page is clamped to at least 1 and the page size to [1, 100]. A page
    past the end yields no items rather than an error.

    Args:
        items: Filtered and sorted collection
        query: Paging query; ``page`` and ``page_size`` are used
        mapper: Converts an entity into its DTO

    Returns:
        PagedResult with the page's DTOs and position metadata
    """
    source = list(items)
    page = max(1, query.page)
    size = min(max(1, query.page_size), MAX_PAGE_SIZE)
    total = len(source)
    total_pages = math.ceil(total / size)

    start = (page - 1) * size
    page_items = [mapper(item) for item in source[start : start + size]]

    return PagedResult(
        items=page_items,
        page_number=page,
        page_size=size,
        total_pages=total_pages,
        total_count=total,
        has_previous_page=1 < page <= total_pages,
        has_next_page=page < total_pages,
    )


def run_query(
    items: Iterable[T],
    query: PagingQuery,
    *,
    search_predicate: Callable[[T, str], bool],
    sort_key: Callable[[T, str], Any],
    mapper: Callable[[T], D],
    resource: str | None = None,
) -> PagedResult[D]:
    """Run search, sort and pagination in order.

    Args:
        items: Source collection
        query: Paging query
        search_predicate: ``(item, term) -> bool``
        sort_key: ``(item, field) -> value``
        mapper: Entity to DTO conversion
        resource: Name used for logs and metrics, e.g. "courses"

    Returns:
        The requested page
    """
    filtered = apply_search(items, query, search_predicate)
    ordered = apply_sort(filtered, query, sort_key)
    result = apply_pagination(ordered, query, mapper)

    if resource is not None:
        record_page(resource)
        logger.debug(
            "query.paged",
            resource=resource,
            page=result.page_number,
            page_size=result.page_size,
            total_count=result.total_count,
        )

    return result


def contains_ignore_case(
    fields: Callable[[T], Iterable[str | None]],
) -> Callable[[T, str], bool]:
    """Build a predicate matching the term as a case-insensitive substring.

    Args:
        fields: Returns the searchable text fields of an item; None is skipped

    Returns:
        A predicate suitable for ``apply_search``

    Example:
        >>> match = contains_ignore_case(lambda s: (s.name, s.email))
        >>> match(student, "ADA")
        True
    """

    def predicate(item: T, term: str) -> bool:
        needle = term.casefold()
        return any(value is not None and needle in value.casefold() for value in fields(item))

    return predicate


def field_selector(
    fields: Mapping[str, Callable[[T], Any]],
    default: Callable[[T], Any],
) -> Callable[[T, str], Any]:
    """Build a sort key selector from a table of named accessors.

    Field names are matched exactly. Unknown names fall back to ``default``,
    normally the entity id, so a bad sort parameter still gives a stable order.

    Args:
        fields: Field name -> accessor
        default: Accessor used for unknown field names

    Returns:
        A selector suitable for ``apply_sort``
    """

    def selector(item: T, field: str) -> Any:
        accessor = fields.get(field, default)
        return accessor(item)

    return selector
