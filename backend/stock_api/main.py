from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from strawberry.fastapi import GraphQLRouter

from .api.routes import router as rest_router, stock_api_error_handler
from .config.settings import Settings, settings as default_settings
from .database.connection import Database
from .graphql.schema import schema
from .services.broadcaster import PriceBroadcaster
from .services.errors import StockApiError
from .services.fetcher import QuoteFetcher
from .services.price_store import PriceHistoryStore
from .services.watchlist_service import WatchlistService
from .services.watchlist_store import WatchlistStore
from .tasks.runner import SynthesisScheduler
from .tasks.synthesizer import PriceSynthesizer
from .utils.logger import log


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info(f"🚀 Starting Stock API ({app.state.settings.ENV})")
    await app.state.database.create_schema()
    if app.state.settings.SCHEDULER_ENABLED:
        app.state.scheduler.start()

    yield

    log.info("Shutting down...")
    await app.state.scheduler.stop()
    await app.state.broadcaster.close()
    await app.state.database.dispose()


def create_app(
    settings: Settings = default_settings,
    database: Optional[Database] = None,
    quote_fetcher: Optional[QuoteFetcher] = None,
    broadcaster: Optional[PriceBroadcaster] = None,
) -> FastAPI:
    app = FastAPI(
        title="Stock API",
        description="Watchlist, synthesized price history and live quotes",
        version="1.0.0",
        debug=settings.DEBUG,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.FRONTEND_API_URL],
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
    )

    # -----------------------------
    # Stores, services and the synthesis loop
    # -----------------------------
    database = database or Database(settings.DATABASE_URL, echo=settings.DB_ECHO)
    broadcaster = broadcaster or PriceBroadcaster(settings.REDIS_URL, settings.PRICE_CHANNEL_PREFIX)
    watchlist = WatchlistStore(database)
    history = PriceHistoryStore(database)

    synthesizer = PriceSynthesizer(
        watchlist,
        history,
        broadcaster,
        seed_price=settings.SEED_PRICE,
        max_change=settings.MAX_DAILY_CHANGE,
    )

    app.state.settings = settings
    app.state.database = database
    app.state.broadcaster = broadcaster
    app.state.watchlist_service = WatchlistService(watchlist, history, quote_fetcher or QuoteFetcher())
    app.state.scheduler = SynthesisScheduler(synthesizer, interval=settings.SYNTHESIS_INTERVAL)

    # -----------------------------
    # REST + GraphQL
    # -----------------------------
    app.add_exception_handler(StockApiError, stock_api_error_handler)
    app.include_router(rest_router)

    graphql_app = GraphQLRouter(schema)
    app.include_router(graphql_app, prefix="/graphql")

    @app.get("/", response_class=HTMLResponse, include_in_schema=False)
    async def index():
        return """
        <h1>Welcome to the stock-api-backend</h1>
        <p>Click <a href="/docs">here</a> for the API documentation
        or open <a href="/graphql">/graphql</a> for the GraphQL playground.</p>
        """

    return app


app = create_app()


if __name__ == "__main__":
    log.info(f"Server is running on port {default_settings.PORT}")
    uvicorn.run(app, host="0.0.0.0", port=default_settings.PORT)
