"""Engine construction. Callers own the engine; there is no module-level singleton."""
from __future__ import annotations
from pathlib import Path
from sqlalchemy import event
from sqlalchemy.engine import Engine, make_url
from sqlmodel import SQLModel, create_engine
import filedrop.models  # noqa: F401   # registers the upload table mapper

SQLITE_BUSY_TIMEOUT_MS = 5000


def _set_wal_mode(dbapi_conn, _):
    cur = dbapi_conn.cursor()
    cur.execute("PRAGMA journal_mode=WAL")
    cur.execute("PRAGMA synchronous=NORMAL")
    cur.execute(f"PRAGMA busy_timeout={SQLITE_BUSY_TIMEOUT_MS}")
    cur.close()


def make_engine(database_url: str, *, echo: bool = False) -> Engine:
    """Create an engine for *database_url*.

    SQLite engines are shared across the request thread and the relocation
    workers, so they are opened with ``check_same_thread=False`` and WAL mode.
    """
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return create_engine(database_url, echo=echo, pool_pre_ping=True)

    if url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(
        database_url,
        echo=echo,
        connect_args={"check_same_thread": False},
    )
    event.listen(engine, "connect", _set_wal_mode)
    return engine


def init_db(engine: Engine) -> None:
    """Create missing tables and backfill additive schema changes."""
    from filedrop.infra.db.schema_compat import ensure_schema_compat
    ensure_schema_compat(engine)
    SQLModel.metadata.create_all(engine)
