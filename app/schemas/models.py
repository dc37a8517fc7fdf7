from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from fastapi.encoders import decimal_encoder
from datetime import datetime
from decimal import Decimal
from typing import Annotated


# NUMERIC(38, 18) comes back padded; send the shortest JSON number instead
JsonDecimal = Annotated[
    Decimal,
    PlainSerializer(
        lambda v: decimal_encoder(v.normalize()),
        return_type=int | float,
        when_used="json",
    ),
]


class PriceRecord(BaseModel):
    """One accepted (price, timestamp) observation of an asset."""

    price: Decimal = Field(gt=0)
    recorded_at: datetime

    model_config = ConfigDict(frozen=True, extra="forbid")


class MarketQuote(BaseModel):
    id: str
    image: str | None = None

    model_config = ConfigDict(extra="ignore")


class LatestPrice(BaseModel):
    name: str
    symbol: str
    external_id: str
    icon_url: str | None = None
    latest_price: JsonDecimal | None = None
    last_updated: datetime | None = None
    previous_price: JsonDecimal | None = None


class UpdateSummary(BaseModel):
    saved: int = 0
    rejected: int = 0
    missing: int = 0
