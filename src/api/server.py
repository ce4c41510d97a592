# src/api/server.py

"""HTTP surface for the UI: search all markets, one market, list markets."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from src.config.logging_config import setup_logging
from src.config.settings import Settings
from src.services.aggregator import Aggregator

logger = logging.getLogger("price_compare.api")


def _aggregator(request: Request) -> Aggregator:
    aggregator: Aggregator = request.app.state.aggregator
    return aggregator


def create_app(aggregator: Aggregator | None = None) -> FastAPI:
    """Build the API app.

    The aggregator (and with it every provider's browser) lives for
    the lifetime of the app and is closed once on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging()
        app.state.aggregator = (
            aggregator if aggregator is not None else Aggregator()
        )
        logger.info(
            "API ready with markets: %s",
            ", ".join(app.state.aggregator.list_markets()),
        )
        try:
            yield
        finally:
            await app.state.aggregator.close()
            logger.info("API shut down")

    app = FastAPI(title="Price Compare API", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=Settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/", response_class=PlainTextResponse)
    async def root() -> str:
        return "Price Compare API is running"

    @app.get("/produtos/{termo}")
    async def search_all(termo: str, request: Request) -> list[dict[str, Any]]:
        products = await _aggregator(request).search_all(termo)
        return [p.to_dict() for p in products]

    @app.get("/produtos/{mercado}/{termo}")
    async def search_by_market(
        mercado: str, termo: str, request: Request,
    ) -> list[dict[str, Any]]:
        products = await _aggregator(request).search_by_market(
            termo, mercado
        )
        return [p.to_dict() for p in products]

    @app.get("/mercados")
    async def markets(request: Request) -> list[str]:
        return _aggregator(request).list_markets()

    return app
