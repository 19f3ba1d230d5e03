"""Pagination Window: page/limit query parameters to limit, offset and neighbours.

Invariants:
    - page >= 1, 1 <= limit <= MAX_LIMIT
    - offset == (page - 1) * limit, exactly
    - limit above MAX_LIMIT is clamped, never rejected
    - next_page is always page + 1 (total count is unknown)
    - prev_page is 0 on the first page
"""

from dataclasses import dataclass

from userbook.core.domain_types import PaginationRejection
from userbook.core.errors import InvalidPaginationError
from userbook.core.parse_int import parse_int64


DEFAULT_PAGE: int = 1
DEFAULT_LIMIT: int = 10
MAX_LIMIT: int = 100


@dataclass(frozen=True)
class PageWindow:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def prev_page(self) -> int:
        return self.page - 1 if self.page > 1 else 0

    @property
    def next_page(self) -> int:
        return self.page + 1


def resolve_page(raw_page: str | None, raw_limit: str | None) -> PageWindow:
    """Resolve query parameters into a PageWindow.

    Absent or empty parameters fall back to the defaults. Raises
    InvalidPaginationError naming the offending field (and, for a bad
    limit, carrying the page that was accepted).
    """
    page = DEFAULT_PAGE
    if raw_page:
        parsed = parse_int64(raw_page)
        if parsed is None or parsed < 1:
            raise InvalidPaginationError("page", PaginationRejection.INVALID_PAGE)
        page = parsed

    limit = DEFAULT_LIMIT
    if raw_limit:
        parsed = parse_int64(raw_limit)
        if parsed is None or parsed < 1:
            raise InvalidPaginationError(
                "limit", PaginationRejection.INVALID_LIMIT, page=page,
            )
        limit = min(parsed, MAX_LIMIT)

    return PageWindow(page=page, limit=limit)
