import argparse
import asyncio

from stock_api.config.settings import settings
from stock_api.database.connection import Database
from stock_api.services.price_store import PriceHistoryStore
from stock_api.services.watchlist_store import WatchlistStore
from stock_api.tasks.synthesizer import PriceSynthesizer


async def main(rounds: int):
    db = Database(settings.DATABASE_URL, echo=settings.DB_ECHO)
    await db.create_schema()
    synthesizer = PriceSynthesizer(
        WatchlistStore(db),
        PriceHistoryStore(db),
        seed_price=settings.SEED_PRICE,
        max_change=settings.MAX_DAILY_CHANGE,
    )

    inserted = 0
    try:
        for _ in range(rounds):
            inserted += len(await synthesizer.run_round())
    finally:
        await db.dispose()

    print(f"Backfilled {inserted} prices over {rounds} rounds")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Append synthesized daily prices for every tracked symbol.")
    parser.add_argument("rounds", type=int, nargs="?", default=30, help="Synthetic days to add (default: 30)")
    args = parser.parse_args()
    asyncio.run(main(args.rounds))
