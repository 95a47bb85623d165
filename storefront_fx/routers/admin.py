from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from storefront_fx.core.auth import get_app_settings, require_admin
from storefront_fx.core.config import Settings
from storefront_fx.db.dal import Database
from storefront_fx.models.rates import QuotaStatus, QuotaUsage
from storefront_fx.models.settings import GeneralSettings
from storefront_fx.services.app_settings import get_general_settings, set_manual_rate
from storefront_fx.services.rates.cache_service import MetadataRateCache
from storefront_fx.services.rates.providers import Clock
from storefront_fx.services.rates.quota import month_key, quota_status
from .deps import get_clock, get_db

"""Admin endpoints (bearer admin token required).

    - GET  /admin/settings/general                -> general settings
    - PUT  /admin/settings/general                -> set / clear manual rate override
    - GET  /admin/exchange-rate/quota             -> current month quota
    - POST /admin/exchange-rate/quota/increment   -> count one remote API call
    - GET  /admin/exchange-rate/quota/status      -> quota banner view
    - DELETE /admin/exchange-rate/cache           -> drop the cached rate
"""

router = APIRouter(
    prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)]
)


@router.get("/settings/general", response_model=GeneralSettings)
async def read_general_settings(db: Database = Depends(get_db)):
    return get_general_settings(db)


@router.put("/settings/general", response_model=GeneralSettings)
async def update_general_settings(
    payload: GeneralSettings, db: Database = Depends(get_db)
):
    try:
        set_manual_rate(db, payload.manual_exchange_rate_zmw_per_usd)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return get_general_settings(db)


@router.get("/exchange-rate/quota", response_model=QuotaUsage)
async def read_quota(db: Database = Depends(get_db), clock: Clock = Depends(get_clock)):
    return db.get_quota(month_key(clock()))


@router.post("/exchange-rate/quota/increment", response_model=QuotaUsage)
async def increment_quota(
    db: Database = Depends(get_db), clock: Clock = Depends(get_clock)
):
    return db.increment_quota(month_key(clock()))


@router.get("/exchange-rate/quota/status", response_model=QuotaStatus)
async def read_quota_status(
    db: Database = Depends(get_db),
    clock: Clock = Depends(get_clock),
    settings: Settings = Depends(get_app_settings),
):
    usage = db.get_quota(month_key(clock()))
    return quota_status(usage, settings.quota_limit)


@router.delete("/exchange-rate/cache")
async def clear_cache(
    db: Database = Depends(get_db), settings: Settings = Depends(get_app_settings)
):
    removed = MetadataRateCache(db, settings.rates_cache_ttl_seconds).clear()
    if not removed:
        raise HTTPException(status_code=404, detail="no cached rate")
    return {"status": "deleted"}
