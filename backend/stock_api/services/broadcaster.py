from typing import AsyncGenerator

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from ..models.data_point import PricePoint
from ..utils.logger import log

logger = log


class PriceBroadcaster:
    """
    Publishes synthesized prices on a Redis channel per symbol.

    Publishing is fire-and-forget: nobody listening is fine, and a Redis
    outage is logged without reaching the caller.
    """

    def __init__(self, redis_url="redis://localhost:6379/0", channel_prefix="stockprices", client=None):
        self.redis_url = redis_url
        self.channel_prefix = channel_prefix
        self.redis = client

    def connect(self):
        if not self.redis:
            self.redis = aioredis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
            logger.info("Connected to Redis")
        return self.redis

    def channel(self, symbol: str) -> str:
        return f"{self.channel_prefix}:{symbol.upper()}"

    async def publish(self, point: PricePoint) -> int:
        """Returns the number of subscribers reached."""
        try:
            return await self.connect().publish(self.channel(point.symbol), point.model_dump_json())
        except RedisError as e:
            logger.warning(f"Price broadcast failed for {point.symbol}: {e}")
            return 0

    async def stream(self, symbol: str) -> AsyncGenerator[PricePoint, None]:
        pubsub = self.connect().pubsub()
        await pubsub.subscribe(self.channel(symbol))
        try:
            async for message in pubsub.listen():
                if message["type"] != "message":
                    continue
                yield PricePoint.model_validate_json(message["data"])
        finally:
            await pubsub.unsubscribe(self.channel(symbol))
            await pubsub.aclose()

    async def close(self):
        if self.redis:
            await self.redis.aclose()
            self.redis = None
