"""Data Access Layer for the exchange rate service.

Responsibilities
----------------
- Raw key/value access to the metadata table (settings, cached rate).
- Backend-held monthly quota counter for the remote exchange rate API.
"""

from __future__ import annotations

from pathlib import Path
import sqlite3
from typing import Optional

from storefront_fx.models.rates import QuotaUsage

UTC_NOW_SQL = "strftime('%Y-%m-%dT%H:%M:%fZ','now')"


class Database:
    def __init__(self, db_path: Path):
        self.db_path = db_path

    # ------------------------------------------------------------------
    # Connection helpers
    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    # ------------------------------------------------------------------
    # Metadata key/value
    def get_metadata_value(self, key: str) -> Optional[str]:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("SELECT value FROM metadata WHERE key=?", (key,))
            row = cur.fetchone()
            return row[0] if row else None

    def set_metadata_value(self, key: str, value: str) -> None:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                f"""
                INSERT INTO metadata (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = ({UTC_NOW_SQL})
                """,
                (key, value),
            )

    def delete_metadata_value(self, key: str) -> bool:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("DELETE FROM metadata WHERE key=?", (key,))
            return cur.rowcount > 0

    # ------------------------------------------------------------------
    # Exchange rate API quota (one row per calendar month)
    def get_quota(self, month: str) -> QuotaUsage:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                "SELECT count FROM exchange_rate_quota WHERE month = ?", (month,)
            )
            row = cur.fetchone()
            return QuotaUsage(count=int(row[0]) if row else 0, month=month)

    def increment_quota(self, month: str) -> QuotaUsage:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                f"""
                INSERT INTO exchange_rate_quota (month, count) VALUES (?, 1)
                ON CONFLICT(month) DO UPDATE SET
                    count = count + 1,
                    updated_at = ({UTC_NOW_SQL})
                """,
                (month,),
            )
            cur.execute(
                "SELECT count FROM exchange_rate_quota WHERE month = ?", (month,)
            )
            row = cur.fetchone()
            return QuotaUsage(count=int(row[0]), month=month)
