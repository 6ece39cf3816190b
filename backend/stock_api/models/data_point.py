# models/data_point.py

from datetime import datetime, timezone
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite drops the offset) and convert aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class PricePoint(BaseModel):
    symbol: str = Field(..., description="Ticker symbol, e.g., AAPL")
    price: Decimal = Field(..., gt=0, decimal_places=2, description="Synthesized price")
    timestamp: datetime = Field(..., description="Synthetic trading day of the price")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "symbol": "AAPL",
                "price": 101.37,
                "timestamp": "2025-01-12T18:25:43.511Z"
            }
        }
    )

    @field_validator("timestamp")
    @classmethod
    def _normalize_timestamp(cls, value: datetime) -> datetime:
        return as_utc(value)

    @field_serializer("price")
    def _price_as_number(self, value: Decimal) -> float:
        return float(value)
