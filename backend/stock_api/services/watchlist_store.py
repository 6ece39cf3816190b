from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError

from ..database.connection import Database
from ..database.orm import StockPrice, WatchlistEntry
from ..models.watchlist import TrackedSymbol
from ..utils.logger import log
from .errors import DuplicateSymbol

logger = log


def _to_model(row: WatchlistEntry) -> TrackedSymbol:
    return TrackedSymbol(symbol=row.stock_symbol, short_name=row.short_name or "", snapshot=row.data)


class WatchlistStore:
    """Durable set of tracked symbols, one row per symbol."""

    def __init__(self, db: Database):
        self.db = db

    async def list(self) -> list[TrackedSymbol]:
        async with self.db.session() as session:
            rows = await session.scalars(select(WatchlistEntry).order_by(WatchlistEntry.id))
            return [_to_model(row) for row in rows]

    async def symbols(self) -> list[str]:
        async with self.db.session() as session:
            rows = await session.scalars(
                select(WatchlistEntry.stock_symbol).order_by(WatchlistEntry.id)
            )
            return list(rows)

    async def get(self, symbol: str) -> TrackedSymbol | None:
        async with self.db.session() as session:
            row = await session.scalar(
                select(WatchlistEntry).where(WatchlistEntry.stock_symbol == symbol)
            )
            return _to_model(row) if row else None

    async def add(self, symbol: str, short_name: str, snapshot: str | None) -> TrackedSymbol:
        row = WatchlistEntry(stock_symbol=symbol, short_name=short_name or "", data=snapshot)
        async with self.db.session() as session:
            session.add(row)
            try:
                await session.commit()
            except IntegrityError as e:
                raise DuplicateSymbol(f"{symbol} is already tracked") from e
        logger.info(f"Added {symbol} to watchlist")
        return _to_model(row)

    async def remove(self, symbol: str) -> bool:
        """
        Delete the price history of `symbol`, then the symbol itself.

        The two deletes are committed separately, history first, so an
        interrupted removal never leaves a tracked symbol pointing at
        half-deleted history. Returns whether a watchlist row existed.
        """
        async with self.db.session() as session:
            history = await session.execute(
                delete(StockPrice).where(StockPrice.stock_symbol == symbol)
            )
            await session.commit()

            result = await session.execute(
                delete(WatchlistEntry).where(WatchlistEntry.stock_symbol == symbol)
            )
            await session.commit()

        if result.rowcount == 0:
            return False
        logger.info(f"Removed {symbol} from watchlist ({history.rowcount} prices dropped)")
        return True
