"""Search, filter and sort over the record collection."""

from datetime import date
from enum import Enum
from typing import Any, Literal, Optional, Sequence

from pydantic import BaseModel, Field, field_validator

from .models import FIELD_NAMES, Category, JobApplicationRecord, Position, Status

# Fields matched by the free-text search
SEARCH_FIELDS = [
    "contact_name",
    "organization_name",
    "end_client",
    "location",
    "email",
    "phone",
    "position",
]

_STORED_TO_ATTRIBUTE = {stored: name for name, stored in FIELD_NAMES.items()}


class QueryFilters(BaseModel):
    """Exact-match filters; unset ones are ignored."""

    category: Optional[Category] = None
    position: Optional[Position] = None
    status: Optional[Status] = None
    applied_date: Optional[date] = None

    def is_active(self) -> bool:
        return any(value is not None for value in self.model_dump().values())

    def matches(self, record: JobApplicationRecord) -> bool:
        for name, expected in self:
            if expected is not None and getattr(record, name) != expected:
                return False
        return True


class SortSpec(BaseModel):
    """Sort key (attribute or stored name) and direction."""

    key: str = "applied_date"
    direction: Literal["asc", "desc"] = "desc"

    @field_validator("key")
    @classmethod
    def validate_key(cls, value: str) -> str:
        if value in FIELD_NAMES:
            return value
        if value in _STORED_TO_ATTRIBUTE:
            return _STORED_TO_ATTRIBUTE[value]
        raise ValueError(f"Unknown sort field: {value}")


class ViewState(BaseModel):
    """Everything the visible list depends on besides the records."""

    search_term: str = ""
    filters: QueryFilters = Field(default_factory=QueryFilters)
    sort: SortSpec = Field(default_factory=SortSpec)

    def clear_filters(self) -> "ViewState":
        """Drop the search term and all filters, keeping the sort."""
        return ViewState(sort=self.sort)


def toggle_sort(current: SortSpec, key: str) -> SortSpec:
    """Sort spec after clicking ``key``: asc first, asc -> desc on repeat."""
    requested = SortSpec(key=key, direction="asc")
    if current.key == requested.key and current.direction == "asc":
        return SortSpec(key=requested.key, direction="desc")
    return requested


def matches_search(record: JobApplicationRecord, search_term: str) -> bool:
    needle = search_term.lower()
    for name in SEARCH_FIELDS:
        value = getattr(record, name)
        if isinstance(value, Enum):
            value = value.value
        if needle in value.lower():
            return True
    return False


def _sort_value(record: JobApplicationRecord, key: str) -> Any:
    value = getattr(record, key)
    if isinstance(value, Enum):
        return value.value
    return value


def view(
    records: Sequence[JobApplicationRecord],
    search_term: str = "",
    filters: Optional[QueryFilters] = None,
    sort: Optional[SortSpec] = None,
) -> list[JobApplicationRecord]:
    """Visible subset of ``records``: search, then filters, then a stable sort."""
    filters = filters or QueryFilters()
    sort = sort or SortSpec()

    result = list(records)

    if search_term:
        result = [record for record in result if matches_search(record, search_term)]

    if filters.is_active():
        result = [record for record in result if filters.matches(record)]

    # sorted() stays stable with reverse=True
    return sorted(
        result,
        key=lambda record: _sort_value(record, sort.key),
        reverse=sort.direction == "desc",
    )
