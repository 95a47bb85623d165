from __future__ import annotations

import logging
import sqlite3
from datetime import datetime
from typing import Optional

from pydantic import ValidationError

from storefront_fx.db.dal import Database
from storefront_fx.models.rates import CachedRate
from .providers import to_epoch_ms

"""Persistent USD->ZMW rate cache.

Purpose:
    Hold the last successfully fetched rate under a single metadata key as
    {rate, timestamp, expiresAt} (epoch milliseconds), so repeated storefront
    page loads within the TTL never reach the paid remote API.

Design:
    - One entry only; every successful remote fetch overwrites it.
    - expiresAt = timestamp + TTL (24h by default).
    - Unreadable or corrupt entries count as absent; write failures are logged
      and swallowed. Concurrent writers are last-write-wins.
"""

CACHE_KEY = "exchange_rate_cache"
DEFAULT_TTL_SECONDS = 24 * 60 * 60

logger = logging.getLogger("storefront_fx.rates.cache")


class MetadataRateCache:
    def __init__(self, db: Database, ttl_seconds: int = DEFAULT_TTL_SECONDS):
        if ttl_seconds <= 0:
            raise ValueError("cache ttl must be positive seconds")
        self._db = db
        self._ttl_ms = ttl_seconds * 1000

    # Internal --------------------------------------------------
    def _read(self) -> Optional[CachedRate]:
        try:
            raw = self._db.get_metadata_value(CACHE_KEY)
        except sqlite3.Error:
            logger.exception("failed to read cache from storage")
            return None
        if not raw:
            return None
        try:
            return CachedRate.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("discarding corrupt cache entry: %s", e.errors()[:1])
            return None

    # Public API -----------------------------------------------
    def get_cached_rate(self, now: datetime) -> Optional[CachedRate]:
        """Return the entry only while now < expiresAt."""
        entry = self._read()
        if entry and entry.is_valid_at(to_epoch_ms(now)):
            return entry
        return None

    def get_last_cached_rate(self) -> Optional[CachedRate]:
        return self._read()

    def set_cached_rate(self, rate: float, now: datetime) -> Optional[CachedRate]:
        now_ms = to_epoch_ms(now)
        try:
            entry = CachedRate(rate=rate, timestamp=now_ms, expiresAt=now_ms + self._ttl_ms)
        except ValidationError:
            logger.warning("refusing to cache invalid rate %r", rate)
            return None
        try:
            self._db.set_metadata_value(CACHE_KEY, entry.model_dump_json(by_alias=True))
        except sqlite3.Error:
            logger.exception("failed to save cache to storage")
        return entry

    def clear(self) -> bool:
        return self._db.delete_metadata_value(CACHE_KEY)
