# src/services/aggregator.py

"""Fans a search term out to every market provider and caches the merge."""

import asyncio
import logging
from types import TracebackType

from src.config.settings import Settings
from src.models.product import Product
from src.providers.base_provider import BaseProvider
from src.providers.registry import build_providers
from src.storage.ttl_cache import TtlCache

logger = logging.getLogger("price_compare.aggregator")

ALL_MARKETS_SCOPE = "all"


def cache_key(scope: str, term: str) -> tuple[str, str]:
    """Cache key for a search scope and term."""
    return (scope, term.lower())


class Aggregator:
    """Coordinates concurrent provider searches and the result cache.

    Results are merged in provider registration order regardless of
    which provider answers first.  A provider that fails contributes
    nothing; the aggregate call itself has no failure path.
    """

    def __init__(
        self,
        providers: list[BaseProvider] | None = None,
        cache: TtlCache | None = None,
        ttl: float | None = None,
    ) -> None:
        self.providers: list[BaseProvider] = (
            build_providers() if providers is None else list(providers)
        )
        self.cache = cache if cache is not None else TtlCache()
        self.ttl = Settings.CACHE_TTL if ttl is None else ttl

    async def __aenter__(self) -> "Aggregator":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    # ── Private helpers ──────────────────────────────────

    def _find_provider(self, market: str) -> BaseProvider | None:
        for provider in self.providers:
            if provider.matches(market):
                return provider
        return None

    async def _run_providers(self, term: str) -> list[Product]:
        """Run every provider concurrently and join them all."""
        batches = await asyncio.gather(
            *(provider.search(term) for provider in self.providers),
            return_exceptions=True,
        )

        products: list[Product] = []
        for provider, batch in zip(self.providers, batches):
            if isinstance(batch, BaseException):
                logger.error(
                    "Provider %s raised for '%s': %s",
                    provider.name,
                    term,
                    batch,
                    exc_info=batch,
                )
                continue
            products.extend(batch)
        return products

    # ── Public operations ────────────────────────────────

    async def search_all(self, term: str) -> list[Product]:
        """Search every market, serving repeats from the cache."""
        key = cache_key(ALL_MARKETS_SCOPE, term)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        products = await self._run_providers(term)
        self.cache.put(key, products, self.ttl)
        logger.info(
            "Search '%s' across %d markets: %d products",
            term,
            len(self.providers),
            len(products),
        )
        return products

    async def search_by_market(
        self, term: str, market: str,
    ) -> list[Product]:
        """Search one market by name (case-insensitive).

        Always queries the provider; the result is cached under the
        market's scope but never read back on this path.
        """
        provider = self._find_provider(market)
        if provider is None:
            logger.info("Unknown market '%s' requested", market)
            return []

        products = await provider.search(term)
        self.cache.put(
            cache_key(provider.name, term), products, self.ttl
        )
        return products

    def list_markets(self) -> list[str]:
        """Names of every registered market, in registration order."""
        return [provider.name for provider in self.providers]

    async def close(self) -> None:
        """Release every provider's long-lived resources."""
        for provider in self.providers:
            try:
                await provider.close()
            except Exception as exc:
                logger.error(
                    "Failed to close provider %s: %s",
                    provider.name,
                    exc,
                    exc_info=True,
                )
