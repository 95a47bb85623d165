from __future__ import annotations

"""Collaborator interfaces for the exchange rate resolver.

The resolver never talks to SQLite or HTTP directly; it is handed a settings
source, a rate cache, a remote client and a quota tracker. Production wiring
lives in `storefront_fx.services.rates.wiring`; tests pass fakes.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol

from storefront_fx.models.rates import CachedRate, FetchResult, QuotaUsage

ADMIN_PREFIX = "/admin"
ADMIN_LOGIN_PATH = "/admin/login"


@dataclass(frozen=True)
class ClientContext:
    """Who is asking and from which storefront route."""

    path: str = "/"
    is_admin: bool = False

    @property
    def on_admin_page(self) -> bool:
        path = self.path.rstrip("/") or "/"
        if not path.startswith(ADMIN_PREFIX):
            return False
        return path != ADMIN_LOGIN_PATH


ANONYMOUS = ClientContext()


class ManualRateSource(Protocol):
    def get_manual_rate(self) -> Optional[float]: ...


class RateCache(Protocol):
    def get_cached_rate(self, now: datetime) -> Optional[CachedRate]: ...

    def get_last_cached_rate(self) -> Optional[CachedRate]: ...

    def set_cached_rate(self, rate: float, now: datetime) -> Optional[CachedRate]: ...


class RemoteRateClient(Protocol):
    def fetch_exchange_rate(self) -> FetchResult: ...


class QuotaStore(Protocol):
    def get_quota(self, month: str) -> QuotaUsage: ...

    def increment_quota(self, month: str) -> QuotaUsage: ...


class SupportsQuota(Protocol):
    def get_quota(self, ctx: ClientContext) -> QuotaUsage: ...

    def increment_quota(self, ctx: ClientContext) -> QuotaUsage: ...
