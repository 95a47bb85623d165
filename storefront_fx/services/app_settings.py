"""Application settings backed by the metadata table.

Readers are resilient: a missing or invalid value degrades to "not configured"
rather than raising. Writers validate and raise ValueError.

Metadata keys:
  - manual_exchange_rate_zmw_per_usd: str, positive decimal (ZMW per 1 USD)
"""

from __future__ import annotations
import logging
import math
import sqlite3
from typing import Any, Dict, Optional

from storefront_fx.db.dal import Database

logger = logging.getLogger("storefront_fx.settings")

MANUAL_RATE_KEY = "manual_exchange_rate_zmw_per_usd"
GENERAL_MANUAL_RATE_FIELD = "manualExchangeRateZmwPerUsd"


def parse_positive_rate(raw: Any) -> Optional[float]:
    """Return raw as a finite float > 0, or None when blank / invalid."""
    if raw is None or isinstance(raw, bool):
        return None
    text = str(raw).strip()
    if not text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value


# ------------- Manual exchange rate --------------


def get_manual_rate_raw(db: Database) -> Optional[str]:
    return db.get_metadata_value(MANUAL_RATE_KEY)


def get_manual_rate(db: Database) -> Optional[float]:
    try:
        raw = get_manual_rate_raw(db)
    except sqlite3.Error:
        logger.exception("failed to load manual exchange rate setting")
        return None
    if raw is None or raw == "":
        return None
    parsed = parse_positive_rate(raw)
    if parsed is None:
        logger.warning("manual exchange rate %r invalid, falling back", raw)
    return parsed


def set_manual_rate(db: Database, value: Any) -> Optional[float]:
    """Store a manual override; None or blank clears it."""
    if value is None or (isinstance(value, str) and not value.strip()):
        db.delete_metadata_value(MANUAL_RATE_KEY)
        logger.info("manual exchange rate cleared")
        return None
    parsed = parse_positive_rate(value)
    if parsed is None:
        raise ValueError("manual exchange rate must be a number greater than 0")
    db.set_metadata_value(MANUAL_RATE_KEY, repr(parsed))
    logger.info("manual exchange rate set to %s", parsed)
    return parsed


# ------------- General category ------------------


def get_general_settings(db: Database) -> Dict[str, Any]:
    raw = get_manual_rate_raw(db)
    return {GENERAL_MANUAL_RATE_FIELD: raw if raw else None}


class MetadataManualRateSource:
    """ManualRateSource over the metadata table."""

    def __init__(self, db: Database):
        self._db = db

    def get_manual_rate(self) -> Optional[float]:
        return get_manual_rate(self._db)


__all__ = [
    "MANUAL_RATE_KEY",
    "GENERAL_MANUAL_RATE_FIELD",
    "parse_positive_rate",
    "get_manual_rate_raw",
    "get_manual_rate",
    "set_manual_rate",
    "get_general_settings",
    "MetadataManualRateSource",
]
