"""
core/db.py -- Engine construction and record helpers shared by the stores.

auth/store.py and posts/store.py each own their tables and engine; this module
only holds what they would otherwise duplicate.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode for concurrent read safety.

    WAL allows readers to proceed without blocking during writes. Set
    per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


def make_engine(db_url: str) -> Engine:
    """Create an engine, applying the SQLite connection settings when relevant."""
    connect_args: dict = {}
    if db_url.startswith("sqlite"):
        # Handlers run in FastAPI's thread pool, so connections cross threads.
        connect_args["check_same_thread"] = False
    engine = create_engine(db_url, connect_args=connect_args)
    if db_url.startswith("sqlite"):
        event.listen(engine, "connect", _set_wal_mode)
    return engine


def new_record_id() -> str:
    """Return a fresh opaque record id (uuid4 hex)."""
    return uuid.uuid4().hex


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
