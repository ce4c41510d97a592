# src/providers/base_provider.py

"""Abstract base class for all market providers."""

import logging
from abc import ABC, abstractmethod

from src.config.settings import Settings
from src.models.product import Product


class BaseProvider(ABC):
    """Translate a free-text term into Products for one market.

    Contract for subclasses:

    * ``search`` never raises.  Transport and parse faults are logged
      and collapsed into an empty list so that one broken market can
      not abort or taint an aggregate search.
    * ``search`` may run concurrently with other calls on the same
      instance; per-call state lives in locals.
    * Long-lived resources are created lazily and released in
      ``close``.
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self.logger = logging.getLogger(
            f"price_compare.{name.lower()}"
        )
        self.settings = Settings()

    @property
    def name(self) -> str:
        """Canonical display name, also used as the lookup key."""
        return self._name

    def matches(self, market: str) -> bool:
        """Case-insensitive identity check used by registry lookups."""
        return self._name.casefold() == market.strip().casefold()

    async def search(self, term: str) -> list[Product]:
        """Search this market, returning ``[]`` on any failure."""
        try:
            products = await self._search(term)
        except Exception as exc:
            self.logger.error(
                "[%s] Search failed for '%s': %s",
                self._name,
                term,
                exc,
                exc_info=True,
            )
            return []
        self.logger.info(
            "[%s] %d products for '%s'",
            self._name,
            len(products),
            term,
        )
        return products

    async def close(self) -> None:
        """Release long-lived resources. No-op by default."""

    @abstractmethod
    async def _search(self, term: str) -> list[Product]:
        """Market-specific search; may raise, ``search`` guards it."""
        ...
