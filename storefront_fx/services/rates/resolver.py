from __future__ import annotations

import logging
from typing import Optional

from storefront_fx.models.rates import FetchResult, ResolvedRate
from .base import (
    ANONYMOUS,
    ClientContext,
    ManualRateSource,
    RateCache,
    RemoteRateClient,
    SupportsQuota,
)
from .providers import FALLBACK_RATE, Clock, to_epoch_ms, utc_now

"""USD->ZMW rate resolution.

Order, first hit wins:
    1. manual override from general settings (quota read for display only)
    2. cached rate while now < expiresAt (quota read for display only)
    3. remote API; the quota is incremented because a call was made and a
       successful result is cached for the TTL
    4. on remote failure: last stored cache entry even if expired, else the
       fallback constant

Nothing here raises to the caller; every failure degrades to the next step.
"""

logger = logging.getLogger("storefront_fx.rates.resolver")

DEFAULT_FETCH_ERROR = "Failed to fetch exchange rate"


class ExchangeRateResolver:
    def __init__(
        self,
        manual_source: ManualRateSource,
        cache: RateCache,
        remote: RemoteRateClient,
        quota: SupportsQuota,
        *,
        clock: Clock = utc_now,
        fallback_rate: float = FALLBACK_RATE,
    ):
        self._manual_source = manual_source
        self._cache = cache
        self._remote = remote
        self._quota = quota
        self._clock = clock
        self._fallback_rate = fallback_rate

    # Internal --------------------------------------------------
    def _manual_rate(self) -> Optional[float]:
        try:
            rate = self._manual_source.get_manual_rate()
        except Exception:  # noqa: BLE001 - treated as "not configured"
            logger.exception("failed to load manual exchange rate setting")
            return None
        if rate is not None and rate > 0:
            return rate
        return None

    def _fetch_remote(self) -> FetchResult:
        try:
            return self._remote.fetch_exchange_rate()
        except Exception as e:  # noqa: BLE001
            logger.exception("remote rate client raised")
            return FetchResult(
                rate=self._fallback_rate,
                timestamp=to_epoch_ms(self._clock()),
                success=False,
                error=str(e) or DEFAULT_FETCH_ERROR,
            )

    # Public API -----------------------------------------------
    def resolve_rate(self, ctx: ClientContext = ANONYMOUS) -> ResolvedRate:
        now = self._clock()

        manual = self._manual_rate()
        if manual is not None:
            logger.debug("using manual exchange rate %s, skipping external API", manual)
            return ResolvedRate(
                rate=manual,
                source="manual",
                lastUpdated=to_epoch_ms(now),
                quotaUsage=self._quota.get_quota(ctx),
            )

        cached = self._cache.get_cached_rate(now)
        if cached is not None:
            logger.debug("using cached exchange rate %s, skipping external API", cached.rate)
            return ResolvedRate(
                rate=cached.rate,
                source="cache",
                lastUpdated=cached.timestamp,
                quotaUsage=self._quota.get_quota(ctx),
            )

        result = self._fetch_remote()
        quota = self._quota.increment_quota(ctx)

        if result.success:
            self._cache.set_cached_rate(result.rate, now)
            return ResolvedRate(
                rate=result.rate,
                source="live",
                lastUpdated=result.timestamp,
                quotaUsage=quota,
            )

        error = result.error or DEFAULT_FETCH_ERROR
        stale = self._cache.get_last_cached_rate()
        if stale is not None:
            logger.warning("remote fetch failed, serving stale cached rate %s", stale.rate)
            return ResolvedRate(
                rate=stale.rate,
                source="stale_cache",
                lastUpdated=stale.timestamp,
                error=error,
                quotaUsage=quota,
            )
        logger.warning("remote fetch failed, serving fallback rate %s", self._fallback_rate)
        return ResolvedRate(
            rate=self._fallback_rate,
            source="fallback",
            lastUpdated=to_epoch_ms(now),
            error=error,
            quotaUsage=quota,
        )

    # Storefront calls this on mount and on demand; same policy either way
    refresh_rate = resolve_rate
