# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: in-process member store.
Evaluates predicate trees directly against record dicts. Used when no
DATABASE_URL is configured and in unit tests.
"""

import threading
from typing import Any, Iterable, Optional

from app.core.logging import get_logger
from app.models.domain import ID, normalize_record
from app.query.aggregation import AggregationSpec, group_counts
from app.query.pagination import sort_records
from app.query.predicates import Predicate
from app.query.projection import project

logger = get_logger(__name__)


class InMemoryMemberRepository:
    """Dict-backed member storage keyed by identifier."""

    kind = "memory"

    def __init__(self) -> None:
        self._store: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()

    def create_schema(self) -> None:
        pass

    # ── Read ──

    def find(
        self,
        predicate: Predicate,
        fields: Optional[tuple[str, ...]] = None,
        sort: tuple[tuple[str, bool], ...] = (),
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        with self._lock:
            matched = [r for r in self._store.values() if predicate.matches(r)]
        if sort:
            matched = sort_records(matched, sort)
        end = None if limit is None else skip + limit
        return [project(r, fields) for r in matched[skip:end]]

    def find_one(
        self, predicate: Predicate, fields: Optional[tuple[str, ...]] = None
    ) -> Optional[dict[str, Any]]:
        found = self.find(predicate, fields=fields, sort=((ID, True),), limit=1)
        return found[0] if found else None

    def aggregate(self, spec: AggregationSpec) -> list[tuple[Any, int]]:
        with self._lock:
            records = list(self._store.values())
        return group_counts(records, spec)

    def count(self) -> int:
        return len(self._store)

    # ── Write ──

    def update_one(self, member_id: str, fields: dict[str, Any]) -> int:
        with self._lock:
            record = self._store.get(member_id)
            if record is None:
                return 0
            record.update({k: v for k, v in fields.items() if k != ID})
        return 1

    def insert_many(self, records: Iterable[dict[str, Any]]) -> list[str]:
        """Insert a batch atomically: a malformed or duplicate id writes nothing."""
        rows = [normalize_record(r) for r in records]
        ids = [row[ID] for row in rows]
        with self._lock:
            seen: set[str] = set()
            for member_id in ids:
                if member_id in self._store or member_id in seen:
                    raise ValueError(f"Duplicate member id '{member_id}'")
                seen.add(member_id)
            self._store.update((row[ID], row) for row in rows)
        logger.info("Inserted %d members", len(ids))
        return ids

    # ── Lifecycle ──

    def verify_connection(self) -> None:
        pass

    def dispose(self) -> None:
        pass

    def clear(self) -> None:
        with self._lock:
            self._store.clear()
