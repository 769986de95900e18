"""Pagination Math — page/limit arithmetic and the immutable page value types.

Invariants:
    - skip = (page - 1) * limit
    - page_count = ceil(total_count / limit), and 0 when total_count is 0
    - A page past the last one is a valid request with zero items (not an error)
    - No clamping: limit >= 1 and page >= 1 are enforced upstream by the
      query schema; anything else is handed to the datastore unchanged

Design Decisions:
    - Frozen dataclasses: a PageResult cannot be mutated after it is returned
    - Integer ceiling (-(-a // b)) over math.ceil: no float rounding on large counts
"""

from dataclasses import dataclass, field
from typing import Any, Generic, Sequence, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class PageRequest:
    """One inbound collection read: opaque filter plus page window."""
    filter: Any
    limit: int
    page: int = 1

    @property
    def skip(self) -> int:
        return compute_skip(self.page, self.limit)


@dataclass(frozen=True)
class PageMeta:
    total_count: int
    page: int
    limit: int
    page_count: int

    def to_dict(self) -> dict:
        return {
            "totalCount": self.total_count,
            "page": self.page,
            "limit": self.limit,
            "pageCount": self.page_count,
        }


@dataclass(frozen=True)
class PageResult(Generic[T]):
    items: tuple[T, ...] = field(default_factory=tuple)
    meta: PageMeta = field(default_factory=lambda: PageMeta(0, 1, 1, 0))


def compute_skip(page: int, limit: int) -> int:
    """Number of records before the requested page."""
    return (page - 1) * limit


def compute_page_count(total_count: int, limit: int) -> int:
    if total_count <= 0:
        return 0
    return -(-total_count // limit)


def compute_page_meta(total_count: int, page: int, limit: int) -> PageMeta:
    return PageMeta(
        total_count=total_count,
        page=page,
        limit=limit,
        page_count=compute_page_count(total_count, limit),
    )


def build_page_result(
    items: Sequence[T], total_count: int, page: int, limit: int,
) -> PageResult[T]:
    """Shape raw datastore reads into a PageResult."""
    return PageResult(
        items=tuple(items),
        meta=compute_page_meta(total_count, page, limit),
    )
