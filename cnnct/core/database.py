"""SQLite engine for the SQL persistence gateway.

Every connection runs in WAL mode, so dashboards can list events while a
status change is being written, and with foreign keys enforced, so
participant rows cannot outlive their event. ``check_same_thread`` is off
because gateway calls are awaited from an event loop and may reuse a
pooled connection on another thread.
"""

from sqlalchemy import event as sa_event
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine

from cnnct.core.config import settings

SQLITE_PRAGMAS = ("journal_mode=WAL", "foreign_keys=ON")


def apply_sqlite_pragmas(dbapi_connection, connection_record):
    """Run SQLITE_PRAGMAS on a freshly opened connection."""
    cursor = dbapi_connection.cursor()
    for pragma in SQLITE_PRAGMAS:
        cursor.execute(f"PRAGMA {pragma}")
    cursor.close()


def make_engine(url: str | None = None, **engine_kwargs) -> Engine:
    """Create an engine for ``url`` (default: settings) with the pragmas installed."""
    target = create_engine(
        url or settings.database_url,
        connect_args={"check_same_thread": False},
        echo=settings.debug,
        **engine_kwargs,
    )
    sa_event.listen(target, "connect", apply_sqlite_pragmas)
    return target


engine = make_engine()


def create_db_and_tables(target: Engine | None = None):
    """Create all database tables."""
    # Table classes register themselves on import
    import cnnct.models  # noqa: F401

    SQLModel.metadata.create_all(target or engine)
