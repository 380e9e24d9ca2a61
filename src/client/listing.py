"""Search, filter, sort and pagination for the profile list view."""

from dataclasses import dataclass, replace
from datetime import date, datetime, timezone
from enum import StrEnum
from typing import Any, Iterable, Sequence

from client.models import Profile

PAGE_SIZE_OPTIONS = (5, 10, 25, 50)
DEFAULT_PAGE_SIZE = 10


class SortField(StrEnum):
    NAME = "name"
    EMAIL = "email"
    AGE = "age"
    CREATED_AT = "createdAt"


class SortOrder(StrEnum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class ListQuery:
    """Everything the list view needs to turn the profile list into one page.

    ``page`` is zero-based. Range bounds are inclusive; a bound of None
    leaves that side open.
    """

    search: str = ""
    min_age: int | None = None
    max_age: int | None = None
    created_from: date | None = None
    created_to: date | None = None
    sort_by: SortField = SortField.CREATED_AT
    sort_order: SortOrder = SortOrder.DESC
    page: int = 0
    page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        if self.page_size not in PAGE_SIZE_OPTIONS:
            raise ValueError(
                f"page_size must be one of {PAGE_SIZE_OPTIONS}, got {self.page_size}"
            )
        if self.page < 0:
            raise ValueError("page must not be negative")

    @property
    def is_filtered(self) -> bool:
        return bool(
            self.search.strip()
            or self.min_age is not None
            or self.max_age is not None
            or self.created_from
            or self.created_to
        )

    def toggle_sort(self, field: SortField) -> "ListQuery":
        """Clicking the active column flips its order; a new column starts ascending."""
        if self.sort_by == field and self.sort_order == SortOrder.ASC:
            order = SortOrder.DESC
        else:
            order = SortOrder.ASC
        return replace(self, sort_by=field, sort_order=order)

    def reset_filters(self) -> "ListQuery":
        return ListQuery(page_size=self.page_size)


@dataclass(frozen=True)
class Page:
    items: list[Profile]
    total: int
    page: int
    page_size: int

    @property
    def page_count(self) -> int:
        return max(1, -(-self.total // self.page_size))


def filter_profiles(profiles: Iterable[Profile], query: ListQuery) -> list[Profile]:
    result = list(profiles)

    term = query.search.strip().lower()
    if term:
        result = [p for p in result if term in p.name.lower() or term in p.email.lower()]

    if query.min_age is not None:
        result = [p for p in result if p.age >= query.min_age]
    if query.max_age is not None:
        result = [p for p in result if p.age <= query.max_age]

    if query.created_from is not None:
        result = [
            p for p in result if p.created_at and p.created_at.date() >= query.created_from
        ]
    if query.created_to is not None:
        result = [
            p for p in result if p.created_at and p.created_at.date() <= query.created_to
        ]

    return result


def _sort_key(field: SortField) -> Any:
    if field == SortField.NAME:
        return lambda p: p.name.lower()
    if field == SortField.EMAIL:
        return lambda p: p.email.lower()
    if field == SortField.AGE:
        return lambda p: p.age
    return lambda p: _naive(p.created_at) or datetime.min


def _naive(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def sort_profiles(profiles: Sequence[Profile], query: ListQuery) -> list[Profile]:
    """Stable sort; ties keep their original relative order in either direction."""
    return sorted(
        profiles,
        key=_sort_key(query.sort_by),
        reverse=query.sort_order == SortOrder.DESC,
    )


def paginate(profiles: Sequence[Profile], query: ListQuery) -> Page:
    start = query.page * query.page_size
    return Page(
        items=list(profiles[start : start + query.page_size]),
        total=len(profiles),
        page=query.page,
        page_size=query.page_size,
    )


def apply_query(profiles: Iterable[Profile], query: ListQuery) -> Page:
    """Search, filter, sort, then slice out the requested page."""
    return paginate(sort_profiles(filter_profiles(profiles, query), query), query)
