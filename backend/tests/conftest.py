import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from stock_api.config.settings import Settings
from stock_api.database.connection import Database
from stock_api.main import create_app
from stock_api.models.watchlist import Quote
from stock_api.services.errors import QuoteUnavailable
from stock_api.services.price_store import PriceHistoryStore
from stock_api.services.watchlist_service import WatchlistService
from stock_api.services.watchlist_store import WatchlistStore

QUOTES = {
    "AAPL": {"symbol": "AAPL", "shortName": "Apple Inc.", "regularMarketPrice": 189.42},
    "MSFT": {"symbol": "MSFT", "shortName": "Microsoft Corporation", "regularMarketPrice": 411.1},
    "BRK-B": {"symbol": "BRK-B", "regularMarketPrice": 402.5},
}


class FakeQuoteFetcher:
    """Stands in for Yahoo Finance; unknown tickers fail like the real provider."""

    def __init__(self, quotes=None):
        self.quotes = dict(QUOTES if quotes is None else quotes)
        self.calls = []

    async def fetch_quote(self, ticker: str) -> Quote:
        self.calls.append(ticker)
        info = self.quotes.get(ticker.upper())
        if info is None:
            raise QuoteUnavailable(f"Failed to fetch stock data: no quote for {ticker}")
        return Quote.from_provider(info)


class RecordingBroadcaster:
    def __init__(self):
        self.published = []

    async def publish(self, point):
        self.published.append(point)
        return 0

    async def close(self):
        pass


@pytest_asyncio.fixture
async def database(tmp_path):
    db = Database(f"sqlite:///{tmp_path / 'stocks.db'}")
    await db.create_schema()
    yield db
    await db.dispose()


@pytest.fixture
def watchlist(database):
    return WatchlistStore(database)


@pytest.fixture
def history(database):
    return PriceHistoryStore(database)


@pytest.fixture
def quotes():
    return FakeQuoteFetcher()


@pytest.fixture
def broadcaster():
    return RecordingBroadcaster()


@pytest.fixture
def service(watchlist, history, quotes):
    return WatchlistService(watchlist, history, quotes)


@pytest.fixture
def app(database, quotes, broadcaster):
    settings = Settings(SCHEDULER_ENABLED=False)
    return create_app(settings, database=database, quote_fetcher=quotes, broadcaster=broadcaster)


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
