from datetime import datetime
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from ..database.connection import Database
from ..database.orm import StockPrice, WatchlistEntry
from ..models.data_point import PricePoint, as_utc
from ..utils.logger import log
from .errors import StoreError, SymbolNotTracked

logger = log


def _to_point(row: StockPrice) -> PricePoint:
    return PricePoint(symbol=row.stock_symbol, price=row.price, timestamp=row.timestamp)


class PriceHistoryStore:
    """Append-only price series per tracked symbol."""

    def __init__(self, db: Database):
        self.db = db

    # -------------------------
    # READS
    # -------------------------
    async def get_latest(self, symbol: str) -> PricePoint | None:
        async with self.db.session() as session:
            row = await session.scalar(
                select(StockPrice)
                .where(StockPrice.stock_symbol == symbol)
                .order_by(StockPrice.timestamp.desc())
                .limit(1)
            )
            return _to_point(row) if row else None

    async def get_history(self, symbol: str) -> list[PricePoint]:
        async with self.db.session() as session:
            rows = await session.scalars(
                select(StockPrice)
                .where(StockPrice.stock_symbol == symbol)
                .order_by(StockPrice.timestamp.asc())
            )
            return [_to_point(row) for row in rows]

    # -------------------------
    # WRITES
    # -------------------------
    async def append(self, symbol: str, price: Decimal, timestamp: datetime) -> PricePoint:
        row = StockPrice(stock_symbol=symbol, price=price, timestamp=as_utc(timestamp))
        async with self.db.session() as session:
            session.add(row)
            try:
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                tracked = await session.scalar(
                    select(WatchlistEntry.id).where(WatchlistEntry.stock_symbol == symbol)
                )
                if tracked is None:
                    logger.warning(f"Dropped price for {symbol}: not in the watchlist")
                    raise SymbolNotTracked(f"{symbol} is not in the watchlist") from e
                raise StoreError(f"Price for {symbol} at {timestamp.isoformat()} rejected: {e.orig}") from e
        return PricePoint(symbol=symbol, price=price, timestamp=timestamp)
