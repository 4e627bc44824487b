"""Request and response models for paged list endpoints.

Both models serialize with camelCase field names (``pageSize``,
``totalCount``, ...) so that list endpoints share one JSON envelope.
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


class PagingQuery(BaseModel):
    """Paging, sorting and search options supplied by the caller.

    Values are taken as given; the pipeline clamps page and page size, so
    out-of-range numbers never cause an error.

    Attributes:
        page: 1-based page number (default 1)
        page_size: Items per page (default 20, effectively at most 100)
        sort: Comma-separated field names, "-" prefix for descending,
            e.g. "code,-title"
        search: Free-text filter
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    page: int = Field(default=DEFAULT_PAGE, examples=[1])
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, examples=[20])
    sort: str | None = Field(default=None, examples=["code,-title"])
    search: str | None = Field(default=None, examples=["basics"])


class PagedResult(BaseModel, Generic[T]):
    """One page of a larger ordered collection plus position metadata.

    Attributes:
        items: Items on this page, at most page_size of them
        page_number: The (clamped) page number
        page_size: The (clamped) page size
        total_pages: ceil(total_count / page_size), 0 for an empty collection
        total_count: Size of the filtered collection before paging
        has_previous_page: True when an earlier page holds items
        has_next_page: True when a later page holds items
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    items: list[T] = Field(default_factory=list)
    page_number: int = Field(..., ge=1)
    page_size: int = Field(..., ge=1, le=MAX_PAGE_SIZE)
    total_pages: int = Field(..., ge=0)
    total_count: int = Field(..., ge=0)
    has_previous_page: bool
    has_next_page: bool
