"""
Transient search parameter and result objects for program search.

These are built per request and never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any

from mentorme.core.exceptions import ValidationError

SORT_ORDERS = ("asc", "desc")


@dataclass(frozen=True)
class InstitutionalProgramSearchCriteria:
    """Open filter over programs. Every field is optional; None means "any"."""

    program_name: str | None = None
    institution_id: int | None = None
    start_date: date | None = None
    end_date: date | None = None
    min_duration_in_days: int | None = None
    max_duration_in_days: int | None = None


@dataclass(frozen=True)
class Paging:
    """Zero-based page request.

    Raises:
        ValidationError: page_size is not positive, page_number is negative,
            or sort_order is not ``asc``/``desc``.
    """

    page_number: int = 0
    page_size: int = 10
    sort_by: str = "id"
    sort_order: str = "asc"

    def __post_init__(self) -> None:
        if self.page_size <= 0:
            raise ValidationError(
                "page_size must be positive", details={"page_size": self.page_size}
            )
        if self.page_number < 0:
            raise ValidationError(
                "page_number must not be negative", details={"page_number": self.page_number}
            )
        if self.sort_order not in SORT_ORDERS:
            raise ValidationError(
                f"Invalid sort_order: '{self.sort_order}'. Allowed: {list(SORT_ORDERS)}",
                details={"sort_order": self.sort_order},
            )

    @property
    def offset(self) -> int:
        return self.page_number * self.page_size


@dataclass
class SearchResult:
    """A page of matched entities plus the unpaged match count."""

    total: int
    total_pages: int
    entities: list[Any] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "total_pages": self.total_pages,
            "entities": [e.to_dict() for e in self.entities],
        }
