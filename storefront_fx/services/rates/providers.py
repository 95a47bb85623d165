from __future__ import annotations

"""Remote USD->ZMW rate providers and factory.

'exchangerate-api' calls the paid ExchangeRate-API v6 endpoint; every call
counts against the monthly plan quota. 'static' never leaves the process and
answers with the configured fallback constant, which is handy for local
development without an API key.
"""
import logging
import math
from datetime import datetime, timezone
from typing import Any, Callable, Dict

from storefront_fx.core.config import Settings
from storefront_fx.models.rates import FetchResult
from storefront_fx.services.http_client import get_json, HttpError
from .base import RemoteRateClient

logger = logging.getLogger("storefront_fx.rates.remote")

FALLBACK_RATE = 18.89
QUOTE_CURRENCY = "ZMW"

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_epoch_ms(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


class InvalidPayloadError(ValueError):
    pass


def extract_zmw_rate(payload: Dict[str, Any]) -> float:
    """Pull rates.ZMW out of an ExchangeRate-API response or raise InvalidPayloadError."""
    if payload.get("result") != "success":
        raise InvalidPayloadError("Invalid API response format")
    rates = payload.get("rates")
    if not isinstance(rates, dict):
        raise InvalidPayloadError("Invalid API response format")
    value = rates.get(QUOTE_CURRENCY)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidPayloadError("Invalid API response format")
    # json.loads accepts NaN and Infinity literals
    if not math.isfinite(value) or value <= 0:
        raise InvalidPayloadError("Invalid API response format")
    return float(value)


class ExchangeRateApiClient:
    def __init__(
        self,
        url: str,
        *,
        timeout: float = 10.0,
        retries: int = 0,
        fallback_rate: float = FALLBACK_RATE,
        clock: Clock = utc_now,
    ):
        self._url = url
        self._timeout = timeout
        self._retries = retries
        self._fallback_rate = fallback_rate
        self._clock = clock

    def fetch_exchange_rate(self) -> FetchResult:
        try:
            payload = get_json(self._url, timeout=self._timeout, retries=self._retries)
            rate = extract_zmw_rate(payload)
        except (HttpError, InvalidPayloadError) as e:
            logger.warning("failed to fetch exchange rate from API: %s", e)
            return FetchResult(
                rate=self._fallback_rate,
                timestamp=to_epoch_ms(self._clock()),
                success=False,
                error=str(e) or "Unknown error",
            )
        logger.info("fetched USD->ZMW rate %s", rate)
        return FetchResult(rate=rate, timestamp=to_epoch_ms(self._clock()), success=True)


class StaticRateClient:
    def __init__(self, rate: float = FALLBACK_RATE, clock: Clock = utc_now):
        self._rate = rate
        self._clock = clock

    def fetch_exchange_rate(self) -> FetchResult:
        return FetchResult(rate=self._rate, timestamp=to_epoch_ms(self._clock()), success=True)


def _make_exchangerate_api(settings: Settings, clock: Clock) -> RemoteRateClient:
    return ExchangeRateApiClient(
        settings.exchange_api_url,
        timeout=settings.http_timeout_seconds,
        retries=settings.exchange_api_retries,
        fallback_rate=settings.fallback_rate,
        clock=clock,
    )


def _make_static(settings: Settings, clock: Clock) -> RemoteRateClient:
    return StaticRateClient(settings.fallback_rate, clock=clock)


_PROVIDER_REGISTRY = {
    "exchangerate-api": _make_exchangerate_api,
    "static": _make_static,
}

ALLOWED_RATE_PROVIDERS = frozenset(_PROVIDER_REGISTRY)


def make_rate_client(settings: Settings, clock: Clock = utc_now) -> RemoteRateClient:
    factory = _PROVIDER_REGISTRY.get(settings.exchange_rate_provider)
    if not factory:
        raise ValueError(
            f"Unknown rate provider kind '{settings.exchange_rate_provider}'"
        )
    return factory(settings, clock)
