import asyncio
import json
from datetime import datetime, timezone
from decimal import Decimal

import pytest
from fakeredis import FakeAsyncRedis
from redis.exceptions import ConnectionError as RedisConnectionError

from stock_api.models.data_point import PricePoint
from stock_api.services.broadcaster import PriceBroadcaster

POINT = PricePoint(symbol="AAPL", price=Decimal("101.37"), timestamp=datetime(2025, 1, 2, tzinfo=timezone.utc))


class DownRedis:
    async def publish(self, channel, message):
        raise RedisConnectionError("Connection refused")


@pytest.mark.asyncio
async def test_publish_without_subscribers():
    broadcaster = PriceBroadcaster(client=FakeAsyncRedis(decode_responses=True))
    assert await broadcaster.publish(POINT) == 0


@pytest.mark.asyncio
async def test_publish_reaches_symbol_channel():
    redis = FakeAsyncRedis(decode_responses=True)
    broadcaster = PriceBroadcaster(channel_prefix="stockprices", client=redis)
    pubsub = redis.pubsub()
    await pubsub.subscribe("stockprices:AAPL")

    assert await broadcaster.publish(POINT) == 1

    message = None
    for _ in range(50):
        message = await pubsub.get_message(ignore_subscribe_messages=True, timeout=0.1)
        if message:
            break
    assert message is not None
    assert json.loads(message["data"]) == {
        "symbol": "AAPL",
        "price": 101.37,
        "timestamp": "2025-01-02T00:00:00Z",
    }
    await pubsub.aclose()


@pytest.mark.asyncio
async def test_stream_yields_published_points():
    broadcaster = PriceBroadcaster(client=FakeAsyncRedis(decode_responses=True))
    stream = broadcaster.stream("aapl")

    pending = asyncio.ensure_future(stream.__anext__())
    for _ in range(50):
        if await broadcaster.publish(POINT):
            break
        await asyncio.sleep(0.02)

    received = await asyncio.wait_for(pending, timeout=2)
    assert received == POINT
    await stream.aclose()


@pytest.mark.asyncio
async def test_publish_swallows_redis_outage():
    broadcaster = PriceBroadcaster(client=DownRedis())
    assert await broadcaster.publish(POINT) == 0
