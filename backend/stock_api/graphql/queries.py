import strawberry
from typing import List, Optional
from strawberry.types import Info

from ..models.data_point import PricePoint
from ..models.watchlist import TrackedSymbol
from ..services.watchlist_service import WatchlistService


def get_service(info: Info) -> WatchlistService:
    return info.context["request"].app.state.watchlist_service


@strawberry.type
class StockQuote:
    symbol: str
    short_name: Optional[str]
    price: Optional[float]


@strawberry.type
class WatchlistStock:
    symbol: str
    short_name: str

    @classmethod
    def from_model(cls, stock: TrackedSymbol) -> "WatchlistStock":
        return cls(symbol=stock.symbol, short_name=stock.short_name)


@strawberry.type
class PriceTick:
    symbol: str
    price: float
    timestamp: str

    @classmethod
    def from_model(cls, point: PricePoint) -> "PriceTick":
        return cls(symbol=point.symbol, price=float(point.price), timestamp=point.timestamp.isoformat())


@strawberry.type
class Query:
    @strawberry.field
    async def quote(self, info: Info, symbol: str) -> StockQuote:
        quote = await get_service(info).get_quote(symbol)
        return StockQuote(symbol=quote.symbol, short_name=quote.short_name, price=quote.price)

    @strawberry.field
    async def watchlist(self, info: Info) -> List[WatchlistStock]:
        stocks = await get_service(info).list_symbols()
        return [WatchlistStock.from_model(s) for s in stocks]

    @strawberry.field
    async def price_history(self, info: Info, symbol: str) -> List[PriceTick]:
        points = await get_service(info).price_history(symbol)
        return [PriceTick.from_model(p) for p in points]
