# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Data-access layer for members, backed by SQLAlchemy Core."""

from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy import and_, false, func, or_, select, text, true, update
from sqlalchemy.engine import Engine

from app.core.database import members, metadata
from app.core.logging import get_logger
from app.models.domain import ID, MEMBER_FIELDS, normalize_record
from app.query.aggregation import AggregationSpec, GroupOrder
from app.query.predicates import And, Contains, Equals, MatchAll, NotEmpty, Or, Predicate

logger = get_logger(__name__)


def compile_predicate(predicate: Predicate):
    """Translate a predicate tree into a SQLAlchemy boolean clause."""
    if isinstance(predicate, MatchAll):
        return true()
    if isinstance(predicate, Equals):
        return members.c[predicate.field] == predicate.value
    if isinstance(predicate, Contains):
        # Term is folded with str.lower(); SQL lower() must agree (see build_engine for SQLite).
        return func.lower(members.c[predicate.field]).contains(
            predicate.term.lower(), autoescape=True
        )
    if isinstance(predicate, NotEmpty):
        column = members.c[predicate.field]
        return and_(column.is_not(None), column != "")
    if isinstance(predicate, And):
        return and_(*(compile_predicate(p) for p in predicate.children))
    if isinstance(predicate, Or):
        if not predicate.children:
            return false()
        return or_(*(compile_predicate(p) for p in predicate.children))
    raise TypeError(f"Unsupported predicate: {type(predicate).__name__}")


class MemberRepository:
    kind = "sql"

    def __init__(self, engine: Engine):
        self._engine = engine

    def create_schema(self) -> None:
        metadata.create_all(self._engine)

    # ── Read ───────────────────────────────────────────────────────────

    def find(self, predicate: Predicate, fields: Optional[Tuple[str, ...]] = None,
             sort: Tuple[Tuple[str, bool], ...] = (), skip: int = 0,
             limit: Optional[int] = None) -> List[Dict[str, Any]]:
        columns = [members.c[f] for f in (fields or MEMBER_FIELDS)]
        stmt = select(*columns).where(compile_predicate(predicate))
        for field, ascending in sort:
            column = members.c[field]
            stmt = stmt.order_by(column.asc().nulls_first() if ascending
                                 else column.desc().nulls_last())
        if skip:
            stmt = stmt.offset(skip)
        if limit is not None:
            stmt = stmt.limit(limit)
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [dict(r) for r in rows]

    def find_one(self, predicate: Predicate,
                 fields: Optional[Tuple[str, ...]] = None) -> Optional[Dict[str, Any]]:
        found = self.find(predicate, fields=fields, sort=((ID, True),), limit=1)
        return found[0] if found else None

    def aggregate(self, spec: AggregationSpec) -> List[Tuple[Any, int]]:
        column = members.c[spec.field]
        member_count = func.count().label("member_count")
        stmt = (
            select(column.label("key"), member_count)
            .where(compile_predicate(spec.match))
            .group_by(column)
        )
        if spec.order is GroupOrder.KEY_ASC:
            stmt = stmt.order_by(column.asc())
        else:
            stmt = stmt.order_by(member_count.desc(), column.asc())
        if spec.limit is not None:
            stmt = stmt.limit(spec.limit)
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).fetchall()
        return [(r[0], r[1]) for r in rows]

    def count(self) -> int:
        with self._engine.connect() as conn:
            return conn.execute(select(func.count()).select_from(members)).scalar() or 0

    # ── Write ──────────────────────────────────────────────────────────

    def update_one(self, member_id: str, fields: Dict[str, Any]) -> int:
        """Set ``fields`` on one member. Returns the number of matched rows (0 or 1)."""
        with self._engine.begin() as conn:
            result = conn.execute(
                update(members).where(members.c.id == member_id).values(**fields)
            )
            matched = result.rowcount
        return matched

    def insert_many(self, records: Iterable[Dict[str, Any]]) -> List[str]:
        rows = [normalize_record(r) for r in records]
        if rows:
            with self._engine.begin() as conn:
                conn.execute(members.insert(), rows)
        logger.info("Inserted %d members", len(rows))
        return [r[ID] for r in rows]

    # ── Lifecycle ──────────────────────────────────────────────────────

    def verify_connection(self) -> None:
        with self._engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    def dispose(self) -> None:
        self._engine.dispose()
