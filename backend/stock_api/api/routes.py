from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..services.errors import (
    AlreadyTracked,
    InvalidTicker,
    NotFound,
    StockApiError,
    UpstreamUnavailable,
)
from ..services.watchlist_service import WatchlistService
from ..utils.logger import log

router = APIRouter(prefix="/api")

STATUS_CODES = {
    InvalidTicker: 400,
    AlreadyTracked: 400,
    NotFound: 404,
    UpstreamUnavailable: 502,
}


class AddStockRequest(BaseModel):
    ticker: str = ""


def get_service(request: Request) -> WatchlistService:
    return request.app.state.watchlist_service


async def stock_api_error_handler(request: Request, exc: StockApiError) -> JSONResponse:
    status = next((code for kind, code in STATUS_CODES.items() if isinstance(exc, kind)), 500)
    if status >= 500:
        log.error(f"Error in {request.url.path}: {exc.detail}")
    return JSONResponse(status_code=status, content={"error": exc.kind, "details": exc.detail})


@router.get("/stocks/priceData/{ticker}")
async def get_price_data(ticker: str, service: WatchlistService = Depends(get_service)) -> list[dict[str, Any]]:
    points = await service.price_history(ticker)
    return [p.model_dump(mode="json", include={"price", "timestamp"}) for p in points]


@router.get("/stocks/{ticker}")
async def get_stock(ticker: str, service: WatchlistService = Depends(get_service)) -> dict[str, Any]:
    quote = await service.get_quote(ticker)
    return quote.data


@router.get("/watchlist")
async def get_watchlist(service: WatchlistService = Depends(get_service)) -> list[dict[str, Any]]:
    return [stock.model_dump() for stock in await service.list_symbols()]


@router.post("/watchlist", status_code=201)
async def add_to_watchlist(body: AddStockRequest, service: WatchlistService = Depends(get_service)):
    stock = await service.add_symbol(body.ticker)
    return {"message": "Stock added to watchlist", "stock": stock.model_dump()}


@router.delete("/watchlist/{ticker}")
async def remove_from_watchlist(ticker: str, service: WatchlistService = Depends(get_service)):
    await service.remove_symbol(ticker)
    return {"message": "Stock removed from the watchlist"}
