from ..models.data_point import PricePoint
from ..models.watchlist import Quote, TrackedSymbol
from ..utils.logger import log
from .errors import AlreadyTracked, DuplicateSymbol, InvalidTicker, NotFound, QuoteUnavailable
from .fetcher import QuoteFetcher
from .price_store import PriceHistoryStore
from .watchlist_store import WatchlistStore

logger = log


def _clean(ticker: str | None) -> str:
    ticker = (ticker or "").strip()
    if not ticker:
        raise InvalidTicker("Ticker is required.")
    return ticker


class WatchlistService:
    """Request handlers shared by the REST and GraphQL layers."""

    def __init__(self, watchlist: WatchlistStore, history: PriceHistoryStore, quotes: QuoteFetcher):
        self.watchlist = watchlist
        self.history = history
        self.quotes = quotes

    async def get_quote(self, ticker: str) -> Quote:
        # QuoteUnavailable is an UpstreamUnavailable, let it through
        return await self.quotes.fetch_quote(_clean(ticker))

    async def list_symbols(self) -> list[TrackedSymbol]:
        return await self.watchlist.list()

    async def add_symbol(self, ticker: str) -> TrackedSymbol:
        ticker = _clean(ticker)
        try:
            quote = await self.quotes.fetch_quote(ticker)
        except QuoteUnavailable as e:
            logger.warning(f"Rejected add of {ticker}: no quote")
            raise NotFound("Stock not found.") from e

        if await self.watchlist.get(quote.symbol):
            logger.warning(f"Rejected add of {quote.symbol}: already tracked")
            raise AlreadyTracked("Stock already in watchlist.")

        try:
            return await self.watchlist.add(quote.symbol, quote.short_name or "", quote.snapshot())
        except DuplicateSymbol as e:
            # lost a race with a concurrent add of the same symbol
            raise AlreadyTracked("Stock already in watchlist.") from e

    async def remove_symbol(self, ticker: str) -> None:
        symbol = _clean(ticker).upper()
        if not await self.watchlist.remove(symbol):
            logger.warning(f"Rejected removal of {symbol}: not tracked")
            raise NotFound("Stock not found in the watchlist")

    async def price_history(self, ticker: str) -> list[PricePoint]:
        symbol = _clean(ticker).upper()
        if not await self.watchlist.get(symbol):
            raise NotFound("Stock not found in watchlist.")
        return await self.history.get_history(symbol)
