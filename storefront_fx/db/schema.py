"""Database schema DDL definitions and initialization utilities.

Tables:
  - metadata: key/value store (general settings, cached exchange rate, schema version)
  - exchange_rate_quota: per-month count of calls made to the remote rate API
"""

from __future__ import annotations
import sqlite3
from typing import Sequence
from pathlib import Path

BASIC_UTC_NOW = "strftime('%Y-%m-%dT%H:%M:%fZ','now')"
SCHEMA_VERSION = 1
SCHEMA_VERSION_KEY = "schema_version"

METADATA_DDL = f"""
CREATE TABLE IF NOT EXISTS metadata (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW})
);
"""

QUOTA_DDL = f"""
CREATE TABLE IF NOT EXISTS exchange_rate_quota (
    month TEXT PRIMARY KEY, -- 'YYYY-MM'
    count INTEGER NOT NULL DEFAULT 0 CHECK (count >= 0),
    updated_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW})
);
"""

DDL_ORDER: Sequence[str] = (
    METADATA_DDL,
    QUOTA_DDL,
)


def init_db(path: Path) -> int:
    """Create all tables idempotently and return the schema version.

    Parameters
    ----------
    path: Path to SQLite database file.
    """
    conn = sqlite3.connect(path)
    try:
        cur = conn.cursor()
        for ddl in DDL_ORDER:
            cur.execute(ddl)
        _set_schema_version(cur, SCHEMA_VERSION)
        conn.commit()
        return SCHEMA_VERSION
    finally:
        conn.close()


def _set_schema_version(cur: sqlite3.Cursor, version: int) -> None:
    cur.execute(
        "INSERT INTO metadata (key, value) VALUES (?, ?) "
        "ON CONFLICT(key) DO UPDATE SET value=excluded.value, "
        f"updated_at=({BASIC_UTC_NOW})",
        (SCHEMA_VERSION_KEY, str(version)),
    )
