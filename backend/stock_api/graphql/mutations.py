import strawberry
from strawberry.types import Info

from .queries import WatchlistStock, get_service


@strawberry.type
class Mutation:
    @strawberry.mutation
    async def add_to_watchlist(self, info: Info, ticker: str) -> WatchlistStock:
        stock = await get_service(info).add_symbol(ticker)
        return WatchlistStock.from_model(stock)

    @strawberry.mutation
    async def remove_from_watchlist(self, info: Info, ticker: str) -> bool:
        await get_service(info).remove_symbol(ticker)
        return True
