from __future__ import annotations
from dataclasses import dataclass
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"

RateSource = Literal["manual", "cache", "live", "stale_cache", "fallback"]
QuotaLevel = Literal["normal", "warning", "critical"]


class CachedRate(BaseModel):
    """Serialized form of the single cache entry: {rate, timestamp, expiresAt} in epoch ms."""

    model_config = ConfigDict(populate_by_name=True)

    rate: float = Field(..., gt=0, allow_inf_nan=False)
    timestamp: int = Field(..., ge=0)
    expires_at: int = Field(..., alias="expiresAt", ge=0)

    @field_validator("expires_at")
    @classmethod
    def expires_after_timestamp(cls, v: int, info) -> int:  # type: ignore[override]
        ts = info.data.get("timestamp")
        if ts is not None and v < ts:
            raise ValueError("expiresAt cannot precede timestamp")
        return v

    def is_valid_at(self, now_ms: int) -> bool:
        return now_ms < self.expires_at


class QuotaUsage(BaseModel):
    count: int = Field(0, ge=0)
    month: str = Field(..., pattern=MONTH_PATTERN)


class QuotaStatus(BaseModel):
    count: int
    month: str
    limit: int
    percentage: float
    level: QuotaLevel


@dataclass(frozen=True)
class FetchResult:
    rate: float
    timestamp: int
    success: bool
    error: Optional[str] = None


class ResolvedRate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    rate: float
    source: RateSource
    last_updated: int = Field(..., alias="lastUpdated")
    error: Optional[str] = None
    quota_usage: QuotaUsage = Field(..., alias="quotaUsage")


class ConversionOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    amount_usd: float = Field(..., alias="amountUsd")
    rate: float
    amount_zmw: float = Field(..., alias="amountZmw")
    source: RateSource
