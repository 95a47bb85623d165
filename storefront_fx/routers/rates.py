from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from storefront_fx.models.rates import ConversionOut, ResolvedRate
from storefront_fx.services.rates.base import ClientContext
from storefront_fx.services.rates.conversion import convert_usd
from storefront_fx.services.rates.resolver import ExchangeRateResolver
from .deps import get_client_context, get_resolver

"""Storefront-facing exchange rate endpoints.

    - GET  /exchange-rate           -> resolved USD->ZMW rate + quota usage
    - POST /exchange-rate/refresh   -> same policy, explicit refresh
    - GET  /exchange-rate/convert   -> resolve and convert a USD amount

`path` is the storefront route the caller is on; quota is only tracked for an
admin on an /admin page.
"""

router = APIRouter(prefix="/exchange-rate", tags=["exchange-rate"])


@router.get("", response_model=ResolvedRate, summary="Resolve the USD->ZMW rate")
async def get_rate(
    ctx: ClientContext = Depends(get_client_context),
    resolver: ExchangeRateResolver = Depends(get_resolver),
):
    return resolver.resolve_rate(ctx)


@router.post("/refresh", response_model=ResolvedRate, summary="Refresh the USD->ZMW rate")
async def refresh_rate(
    ctx: ClientContext = Depends(get_client_context),
    resolver: ExchangeRateResolver = Depends(get_resolver),
):
    return resolver.refresh_rate(ctx)


@router.get("/convert", response_model=ConversionOut, summary="Convert a USD amount to ZMW")
async def convert(
    amount: float = Query(..., ge=0, description="Amount in USD"),
    ctx: ClientContext = Depends(get_client_context),
    resolver: ExchangeRateResolver = Depends(get_resolver),
):
    resolved = resolver.resolve_rate(ctx)
    result = convert_usd(amount, resolved.rate)
    return ConversionOut(
        amountUsd=result.amount_usd,
        rate=result.rate,
        amountZmw=result.amount_zmw,
        source=resolved.source,
    )
