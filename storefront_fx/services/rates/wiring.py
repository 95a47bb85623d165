"""Production wiring for the resolver: SQLite-backed stores + configured remote client."""

from __future__ import annotations

from typing import Optional

from storefront_fx.core.config import Settings
from storefront_fx.db.dal import Database
from storefront_fx.services.app_settings import MetadataManualRateSource
from .base import RemoteRateClient
from .cache_service import MetadataRateCache
from .providers import Clock, make_rate_client, utc_now
from .quota import QuotaTracker
from .resolver import ExchangeRateResolver


def build_quota_tracker(db: Database, clock: Clock = utc_now) -> QuotaTracker:
    return QuotaTracker(db, clock=clock)


def build_exchange_rate_resolver(
    db: Database,
    settings: Settings,
    remote: Optional[RemoteRateClient] = None,
    clock: Clock = utc_now,
) -> ExchangeRateResolver:
    return ExchangeRateResolver(
        MetadataManualRateSource(db),
        MetadataRateCache(db, settings.rates_cache_ttl_seconds),
        remote or make_rate_client(settings, clock),
        build_quota_tracker(db, clock),
        clock=clock,
        fallback_rate=settings.fallback_rate,
    )
