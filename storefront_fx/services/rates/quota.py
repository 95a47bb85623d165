"""Monthly quota tracking for the paid exchange rate API.

The counter lives in the backend store, one row per "YYYY-MM". Tracking is
only active for an authenticated administrator on an /admin page (never the
login screen) so anonymous storefront traffic cannot inflate usage. Inactive
calls return a zero quota for the current month without touching the store.
"""

from __future__ import annotations

import logging
from datetime import datetime

from storefront_fx.models.rates import QuotaStatus, QuotaUsage
from .base import ClientContext, QuotaStore
from .providers import Clock, utc_now

logger = logging.getLogger("storefront_fx.rates.quota")

QUOTA_LIMIT = 1500
WARNING_PCT = 80.0
CRITICAL_PCT = 95.0


def month_key(moment: datetime) -> str:
    return f"{moment.year:04d}-{moment.month:02d}"


def should_track_quota(ctx: ClientContext) -> bool:
    return ctx.is_admin and ctx.on_admin_page


class QuotaTracker:
    def __init__(self, store: QuotaStore, clock: Clock = utc_now):
        self._store = store
        self._clock = clock

    def _zero(self) -> QuotaUsage:
        return QuotaUsage(count=0, month=month_key(self._clock()))

    def get_quota(self, ctx: ClientContext) -> QuotaUsage:
        if not should_track_quota(ctx):
            return self._zero()
        try:
            return self._store.get_quota(month_key(self._clock()))
        except Exception:  # noqa: BLE001 - quota is display-only
            logger.exception("failed to fetch quota from store")
            return self._zero()

    def increment_quota(self, ctx: ClientContext) -> QuotaUsage:
        if not should_track_quota(ctx):
            return self._zero()
        try:
            usage = self._store.increment_quota(month_key(self._clock()))
        except Exception:  # noqa: BLE001 - no retry; the API call already happened
            logger.exception("failed to increment quota in store")
            return self.get_quota(ctx)
        logger.debug("exchange rate quota now %s for %s", usage.count, usage.month)
        return usage


def quota_status(usage: QuotaUsage, limit: int = QUOTA_LIMIT) -> QuotaStatus:
    """Banner view of usage: percentage of the plan limit plus a severity level."""
    if limit <= 0:
        raise ValueError("quota limit must be positive")
    percentage = usage.count * 100 / limit
    if percentage >= CRITICAL_PCT:
        level = "critical"
    elif percentage >= WARNING_PCT:
        level = "warning"
    else:
        level = "normal"
    return QuotaStatus(
        count=usage.count,
        month=usage.month,
        limit=limit,
        percentage=round(percentage, 1),
        level=level,
    )
