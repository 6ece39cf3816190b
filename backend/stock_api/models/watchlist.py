# models/watchlist.py

import json
from typing import Any, Optional

from pydantic import BaseModel, Field


class Quote(BaseModel):
    """Current quote as returned by the provider; `data` keeps the full payload."""

    symbol: str
    short_name: Optional[str] = None
    price: Optional[float] = None
    data: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_provider(cls, info: dict[str, Any]) -> "Quote":
        price = info.get("regularMarketPrice")
        if price is None:
            price = info.get("currentPrice")
        return cls(
            symbol=info["symbol"],
            short_name=info.get("shortName"),
            price=price,
            data=info,
        )

    def snapshot(self) -> str:
        """Serialized payload stored next to the watchlist entry."""
        return json.dumps(self.data, default=str)


class TrackedSymbol(BaseModel):
    symbol: str = Field(..., description="Ticker symbol, e.g., AAPL")
    short_name: str = Field("", description="Display name, may be empty")
    snapshot: Optional[str] = Field(None, exclude=True, description="Quote payload captured on add")
