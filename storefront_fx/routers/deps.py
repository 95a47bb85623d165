from __future__ import annotations

from fastapi import Depends, Query

from storefront_fx.core.auth import get_app_settings, is_admin_request
from storefront_fx.core.config import Settings
from storefront_fx.db.dal import Database
from storefront_fx.services.rates.base import ClientContext, RemoteRateClient
from storefront_fx.services.rates.providers import Clock, make_rate_client, utc_now
from storefront_fx.services.rates.quota import QuotaTracker
from storefront_fx.services.rates.resolver import ExchangeRateResolver
from storefront_fx.services.rates.wiring import (
    build_exchange_rate_resolver,
    build_quota_tracker,
)


def get_db(settings: Settings = Depends(get_app_settings)) -> Database:
    return Database(settings.db_path)


def get_clock() -> Clock:
    return utc_now


def get_remote_client(
    settings: Settings = Depends(get_app_settings), clock: Clock = Depends(get_clock)
) -> RemoteRateClient:
    return make_rate_client(settings, clock)


def get_client_context(
    path: str = Query("/", description="Storefront route the caller is on"),
    is_admin: bool = Depends(is_admin_request),
) -> ClientContext:
    return ClientContext(path=path, is_admin=is_admin)


def get_quota_tracker(
    db: Database = Depends(get_db), clock: Clock = Depends(get_clock)
) -> QuotaTracker:
    return build_quota_tracker(db, clock)


def get_resolver(
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    remote: RemoteRateClient = Depends(get_remote_client),
    clock: Clock = Depends(get_clock),
) -> ExchangeRateResolver:
    return build_exchange_rate_resolver(db, settings, remote=remote, clock=clock)
