from datetime import datetime, timezone
from decimal import Decimal

import pytest

from stock_api.config.settings import Settings
from stock_api.database.orm import Base
from stock_api.main import create_app


@pytest.mark.asyncio
async def test_index_page(client):
    r = await client.get("/")
    assert r.status_code == 200
    assert "stock-api-backend" in r.text


@pytest.mark.asyncio
async def test_add_and_list_watchlist(client):
    r = await client.post("/api/watchlist", json={"ticker": "AAPL"})
    assert r.status_code == 201
    assert r.json() == {
        "message": "Stock added to watchlist",
        "stock": {"symbol": "AAPL", "short_name": "Apple Inc."},
    }

    r = await client.get("/api/watchlist")
    assert r.status_code == 200
    assert r.json() == [{"symbol": "AAPL", "short_name": "Apple Inc."}]


@pytest.mark.asyncio
async def test_add_duplicate_returns_400(client):
    await client.post("/api/watchlist", json={"ticker": "AAPL"})
    r = await client.post("/api/watchlist", json={"ticker": "AAPL"})

    assert r.status_code == 400
    assert r.json() == {"error": "AlreadyTracked", "details": "Stock already in watchlist."}
    assert len((await client.get("/api/watchlist")).json()) == 1


@pytest.mark.asyncio
async def test_add_unknown_ticker_returns_404(client):
    r = await client.post("/api/watchlist", json={"ticker": "ZZZZ"})
    assert r.status_code == 404
    assert r.json()["error"] == "NotFound"


@pytest.mark.asyncio
async def test_add_without_ticker_returns_400(client):
    r = await client.post("/api/watchlist", json={})
    assert r.status_code == 400
    assert r.json()["error"] == "InvalidTicker"


@pytest.mark.asyncio
async def test_remove_from_watchlist(client):
    await client.post("/api/watchlist", json={"ticker": "AAPL"})

    r = await client.delete("/api/watchlist/AAPL")
    assert r.status_code == 200
    assert r.json() == {"message": "Stock removed from the watchlist"}

    r = await client.delete("/api/watchlist/AAPL")
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_price_data(client, history):
    r = await client.get("/api/stocks/priceData/MSFT")
    assert r.status_code == 404
    assert r.json()["details"] == "Stock not found in watchlist."

    await client.post("/api/watchlist", json={"ticker": "MSFT"})
    await history.append("MSFT", Decimal("412.35"), datetime(2025, 1, 2, tzinfo=timezone.utc))

    r = await client.get("/api/stocks/priceData/msft")
    assert r.status_code == 200
    body = r.json()
    assert len(body) == 1
    assert body[0]["price"] == 412.35
    assert body[0]["timestamp"].startswith("2025-01-02T00:00:00")


@pytest.mark.asyncio
async def test_live_quote(client):
    r = await client.get("/api/stocks/AAPL")
    assert r.status_code == 200
    assert r.json()["shortName"] == "Apple Inc."

    r = await client.get("/api/stocks/ZZZZ")
    assert r.status_code == 502
    assert r.json()["error"] == "UpstreamUnavailable"


# -----------------------------
# GraphQL
# -----------------------------
async def graphql(client, query, **variables):
    r = await client.post("/graphql", json={"query": query, "variables": variables})
    assert r.status_code == 200
    return r.json()


@pytest.mark.asyncio
async def test_graphql_watchlist_flow(client):
    body = await graphql(
        client,
        "mutation Add($t: String!) { addToWatchlist(ticker: $t) { symbol shortName } }",
        t="AAPL",
    )
    assert body["data"]["addToWatchlist"] == {"symbol": "AAPL", "shortName": "Apple Inc."}

    body = await graphql(client, "{ watchlist { symbol shortName } }")
    assert body["data"]["watchlist"] == [{"symbol": "AAPL", "shortName": "Apple Inc."}]

    body = await graphql(client, '{ priceHistory(symbol: "AAPL") { price timestamp } }')
    assert body["data"]["priceHistory"] == []

    body = await graphql(client, 'mutation { removeFromWatchlist(ticker: "AAPL") }')
    assert body["data"]["removeFromWatchlist"] is True


@pytest.mark.asyncio
async def test_graphql_errors_carry_detail(client):
    await graphql(client, 'mutation { addToWatchlist(ticker: "AAPL") { symbol } }')

    body = await graphql(client, 'mutation { addToWatchlist(ticker: "AAPL") { symbol } }')
    assert body["data"] is None
    assert body["errors"][0]["message"] == "Stock already in watchlist."
    assert body["errors"][0]["extensions"]["kind"] == "AlreadyTracked"

    body = await graphql(client, '{ priceHistory(symbol: "MSFT") { price } }')
    assert body["errors"][0]["message"] == "Stock not found in watchlist."
    assert body["errors"][0]["extensions"]["kind"] == "NotFound"


@pytest.mark.asyncio
async def test_graphql_quote(client):
    body = await graphql(client, '{ quote(symbol: "MSFT") { symbol shortName price } }')
    assert body["data"]["quote"] == {"symbol": "MSFT", "shortName": "Microsoft Corporation", "price": 411.1}


@pytest.mark.asyncio
async def test_graphql_quote_failure_kind(client):
    body = await graphql(client, '{ quote(symbol: "ZZZZ") { symbol } }')
    assert body["errors"][0]["extensions"]["kind"] == "UpstreamUnavailable"


@pytest.mark.asyncio
async def test_database_failure_returns_500(client, database):
    async with database.engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    r = await client.get("/api/watchlist")
    assert r.status_code == 500
    assert r.json()["error"] == "StoreError"


def test_debug_flag_reaches_app(quotes, broadcaster):
    settings = Settings(DEBUG=False, SCHEDULER_ENABLED=False)
    app = create_app(settings, quote_fetcher=quotes, broadcaster=broadcaster)
    assert app.debug is False
