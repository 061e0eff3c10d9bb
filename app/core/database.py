# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""SQLAlchemy table definition and engine factory for the member store."""
from sqlalchemy import Column, DateTime, MetaData, String, Table, Text, create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from app.core.config import settings

metadata = MetaData()

members = Table(
    "members",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("first_name", Text),
    Column("last_name", Text),
    Column("spouse_first_name", Text),
    Column("spouse_last_name", Text),
    Column("email", Text, index=True),
    Column("spouse_email", Text, index=True),
    Column("mobile", Text),
    Column("spouse_mobile", Text),
    Column("city", Text),
    Column("native_place", Text),
    Column("kovil", Text),
    Column("year_since", Text),
    Column("photo_link", Text),
    Column("user_updated", DateTime(timezone=True)),
)


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def build_engine(url: str = settings.DATABASE_URL) -> Engine:
    """Create the engine owned by the process entry point."""
    if url.startswith("sqlite"):
        # Single shared connection so an in-memory SQLite database survives across requests.
        engine = create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

        # SQLite's built-in lower() folds ASCII only; search must fold like str.lower().
        @event.listens_for(engine, "connect")
        def _register_lower(dbapi_connection, _record):
            dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)

        return engine
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=settings.POOL_SIZE,
        max_overflow=settings.MAX_OVERFLOW,
        pool_recycle=settings.POOL_RECYCLE,
    )
