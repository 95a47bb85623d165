"""Pydantic domain models for the storefront exchange rate service."""

from .rates import (
    CachedRate,
    ConversionOut,
    FetchResult,
    QuotaStatus,
    QuotaUsage,
    ResolvedRate,
)
from .settings import GeneralSettings

__all__ = [
    "CachedRate",
    "ConversionOut",
    "FetchResult",
    "QuotaStatus",
    "QuotaUsage",
    "ResolvedRate",
    "GeneralSettings",
]
