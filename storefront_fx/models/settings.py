from __future__ import annotations
from typing import Optional, Union
from pydantic import BaseModel, ConfigDict, Field


class GeneralSettings(BaseModel):
    """`general` settings category as the storefront reads it."""

    model_config = ConfigDict(populate_by_name=True)

    manual_exchange_rate_zmw_per_usd: Optional[Union[float, str]] = Field(
        None,
        alias="manualExchangeRateZmwPerUsd",
        description="ZMW per 1 USD; empty or null clears the override",
    )
