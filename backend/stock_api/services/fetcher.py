import asyncio
from typing import Any

import yfinance as yf

from ..models.watchlist import Quote
from ..utils.logger import log
from .errors import QuoteUnavailable

logger = log


class QuoteFetcher:
    """Current quotes from Yahoo Finance. Every provider failure becomes QuoteUnavailable."""

    async def fetch_quote(self, ticker: str) -> Quote:
        try:
            info = await asyncio.to_thread(self._lookup, ticker)
        except Exception as e:
            logger.error(f"Error fetching stock data for {ticker}: {e}")
            raise QuoteUnavailable(f"Failed to fetch stock data: {e}") from e

        if not info or not info.get("symbol"):
            logger.warning(f"No quote data for {ticker}")
            raise QuoteUnavailable(f"Failed to fetch stock data: no quote for {ticker}")

        return Quote.from_provider(info)

    @staticmethod
    def _lookup(ticker: str) -> dict[str, Any]:
        return yf.Ticker(ticker).info
