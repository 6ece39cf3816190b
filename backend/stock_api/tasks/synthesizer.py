from datetime import datetime, timedelta, timezone
from decimal import ROUND_DOWN, Decimal
from typing import Callable, Optional

import numpy as np

from ..models.data_point import PricePoint
from ..services.broadcaster import PriceBroadcaster
from ..services.price_store import PriceHistoryStore
from ..services.watchlist_store import WatchlistStore
from ..utils.logger import log

logger = log

CENT = Decimal("0.01")
ONE_DAY = timedelta(days=1)


def next_price(last_price: Decimal, change_percent: float) -> Decimal:
    """
    Move `last_price` by `change_percent` (0.03 == +3%) and keep two decimals.

    The move itself is rounded toward zero, so the new price never lands
    further from `last_price` than the drawn percentage allows.
    """
    last_price = Decimal(last_price).quantize(CENT)
    delta = (last_price * Decimal(str(change_percent))).quantize(CENT, rounding=ROUND_DOWN)
    return last_price + delta


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PriceSynthesizer:
    """
    Extends every tracked symbol's history by one synthetic trading day.

    Timestamps advance one day per round regardless of how often rounds run,
    so a short interval quickly builds a continuous daily series.
    """

    def __init__(
        self,
        watchlist: WatchlistStore,
        history: PriceHistoryStore,
        broadcaster: Optional[PriceBroadcaster] = None,
        seed_price: float = 100.00,
        max_change: float = 0.05,
        rng: Optional[np.random.Generator] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.watchlist = watchlist
        self.history = history
        self.broadcaster = broadcaster
        self.seed_price = Decimal(str(seed_price)).quantize(CENT)
        self.max_change = max_change
        self.rng = rng or np.random.default_rng()
        self.clock = clock

    def draw_change(self) -> float:
        return float(self.rng.uniform(-self.max_change, self.max_change))

    async def synthesize(self, symbol: str, now: datetime) -> PricePoint:
        latest = await self.history.get_latest(symbol)
        if latest is None:
            last_price, last_timestamp = self.seed_price, now
        else:
            last_price, last_timestamp = latest.price, latest.timestamp

        price = next_price(last_price, self.draw_change())
        point = await self.history.append(symbol, price, last_timestamp + ONE_DAY)
        logger.info(f"Inserted new price for {symbol}: ${point.price} at {point.timestamp.isoformat()}")

        if self.broadcaster is not None:
            try:
                await self.broadcaster.publish(point)
            except Exception as e:
                logger.warning(f"Price broadcast failed for {symbol}: {e}")
        return point

    async def run_round(self, now: Optional[datetime] = None) -> list[PricePoint]:
        """One synthesis round. Per-symbol failures are logged and skipped."""
        now = now or self.clock()
        try:
            symbols = await self.watchlist.symbols()
        except Exception as e:
            logger.error(f"❌ Synthesis round skipped, watchlist unavailable: {e}")
            return []

        points = []
        for symbol in symbols:
            try:
                points.append(await self.synthesize(symbol, now))
            except Exception as e:
                logger.error(f"❌ Price synthesis failed for {symbol}: {e}")
        return points
