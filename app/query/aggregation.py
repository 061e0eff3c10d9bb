# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Aggregation engine — grouped member counts over one category field.

An AggregationSpec describes the reduction (field, ordering, optional top-N); stores
execute it and return ``(key, count)`` rows, which are reshaped here into the
``{name, count}`` entries the statistics endpoints return.
"""

from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping, Optional

from app.models.domain import Category
from app.query.predicates import NotEmpty, Predicate


class GroupOrder(str, Enum):
    COUNT_DESC = "count_desc"
    KEY_ASC = "key_asc"


@dataclass(frozen=True)
class AggregationSpec:
    field: str
    order: GroupOrder
    limit: Optional[int] = None

    @property
    def match(self) -> Predicate:
        return NotEmpty(self.field)


def spec_for(category: Category, top_n: Optional[int] = None) -> AggregationSpec:
    """Build the reduction for ``category``.

    Year moved is ordered chronologically by key and never truncated; the
    other categories are ordered by popularity and keep ``top_n`` groups when
    it is given.
    """
    if category is Category.YEAR_MOVED:
        return AggregationSpec(category.field, GroupOrder.KEY_ASC)
    return AggregationSpec(category.field, GroupOrder.COUNT_DESC, top_n)


def group_counts(records: Iterable[Mapping[str, Any]],
                 spec: AggregationSpec) -> list[tuple[Any, int]]:
    """Reduce records in-process. Mirrors the SQL GROUP BY the database store issues."""
    predicate = spec.match
    counts = Counter(r[spec.field] for r in records if predicate.matches(r))
    if spec.order is GroupOrder.KEY_ASC:
        rows = sorted(counts.items(), key=lambda kv: str(kv[0]))
    else:
        rows = sorted(counts.items(), key=lambda kv: (-kv[1], str(kv[0])))
    if spec.limit is not None:
        rows = rows[: spec.limit]
    return rows


def reshape(rows: Iterable[tuple[Any, int]]) -> list[dict[str, Any]]:
    return [{"name": str(key), "count": int(count)} for key, count in rows]
