# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Deterministic ordering and offset/limit windows for member listings."""
from dataclasses import dataclass
from typing import Any, Mapping

from app.core.config import settings
from app.models.domain import FIRST_NAME, ID

# (field, ascending). Identifier breaks first-name ties so repeated queries agree.
MEMBER_SORT: tuple[tuple[str, bool], ...] = ((FIRST_NAME, True), (ID, True))


@dataclass(frozen=True)
class PageRequest:
    page: int = 1
    limit: int = settings.DEFAULT_PAGE_LIMIT

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError("page must be >= 1")
        if self.limit < 1:
            raise ValueError("limit must be >= 1")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def sort_records(records: list[Mapping[str, Any]],
                 sort: tuple[tuple[str, bool], ...]) -> list[Mapping[str, Any]]:
    """Sort in-process records the way the SQL store orders rows: nulls first."""
    ordered = list(records)
    # Stable sorts applied from the least significant key up.
    for field, ascending in reversed(sort):
        present = [r for r in ordered if r.get(field) is not None]
        missing = [r for r in ordered if r.get(field) is None]
        present.sort(key=lambda r: r[field], reverse=not ascending)
        ordered = missing + present if ascending else present + missing
    return ordered
