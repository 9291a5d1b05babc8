"""Runtime DB compatibility helpers for legacy SQLite schemas.

Databases created by the first deployment have an ``uploads`` table without
``error_message`` defaults or a ``status`` index. These helpers backfill
additive schema changes for deployments that rely on
``SQLModel.metadata.create_all()`` instead of migrations.
"""

from __future__ import annotations

import logging

from sqlalchemy import text
from sqlalchemy.engine import Connection, Engine

logger = logging.getLogger(__name__)


def ensure_schema_compat(engine: Engine) -> None:
    """Apply additive compatibility upgrades for existing SQLite databases."""
    if engine.dialect.name != "sqlite":
        return

    with engine.begin() as conn:
        _ensure_upload_error_message(conn)


def _ensure_upload_error_message(conn: Connection) -> None:
    if not _table_exists(conn, "uploads"):
        return

    if not _column_exists(conn, "uploads", "error_message"):
        conn.execute(
            text("ALTER TABLE uploads ADD COLUMN error_message VARCHAR NOT NULL DEFAULT ''")
        )
        logger.info("Applied compatibility upgrade: added uploads.error_message")

    # Older rows were written with NULL for non-failed uploads.
    updated = conn.execute(
        text("UPDATE uploads SET error_message = '' WHERE error_message IS NULL")
    ).rowcount
    if updated:
        logger.info("Backfilled empty error_message on %d upload row(s)", updated)

    _ensure_index(conn, "ix_uploads_status", "uploads", "status")


def _table_exists(conn: Connection, table_name: str) -> bool:
    return (
        conn.execute(
            text(
                "SELECT 1 FROM sqlite_master "
                "WHERE type = 'table' AND name = :name LIMIT 1"
            ),
            {"name": table_name},
        ).first()
        is not None
    )


def _column_exists(conn: Connection, table_name: str, column_name: str) -> bool:
    rows = conn.execute(text(f"PRAGMA table_info({table_name})")).fetchall()
    return any(row[1] == column_name for row in rows)


def _ensure_index(
    conn: Connection, index_name: str, table_name: str, column_name: str
) -> None:
    exists = conn.execute(
        text(
            "SELECT 1 FROM sqlite_master "
            "WHERE type = 'index' AND name = :name LIMIT 1"
        ),
        {"name": index_name},
    ).first()
    if exists is None:
        conn.execute(text(f"CREATE INDEX {index_name} ON {table_name} ({column_name})"))
