# src/storage/ttl_cache.py

"""In-memory result cache with fixed per-entry time-to-live."""

import logging
import time
from collections.abc import Hashable, Sequence
from dataclasses import dataclass

from src.models.product import Product

logger = logging.getLogger("price_compare.cache")


@dataclass(frozen=True)
class CacheEntry:
    """Products cached for one (scope, term) key."""

    results: tuple[Product, ...]
    expires_at: float


class TtlCache:
    """Key to product-list store with lazy expiry.

    Entries are never swept in the background; an expired entry is
    dropped the next time its key is read.  There is no capacity
    bound and no manual invalidation.
    """

    def __init__(self) -> None:
        self._entries: dict[Hashable, CacheEntry] = {}

    def get(self, key: Hashable) -> list[Product] | None:
        """Return a copy of the cached products, or ``None`` on miss."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if time.time() >= entry.expires_at:
            # Only drop it if nobody re-put the key meanwhile
            if self._entries.get(key) is entry:
                del self._entries[key]
            logger.debug("Cache entry expired for %s", key)
            return None
        logger.info(
            "Cache hit for %s (%d products)", key, len(entry.results)
        )
        return list(entry.results)

    def put(
        self,
        key: Hashable,
        value: Sequence[Product],
        ttl: float,
    ) -> None:
        """Store products under a key, replacing any previous entry."""
        self._entries[key] = CacheEntry(
            results=tuple(value),
            expires_at=time.time() + ttl,
        )
        logger.info(
            "Cached %d products for %s (ttl=%.0fs)",
            len(value),
            key,
            ttl,
        )

    def __len__(self) -> int:
        return len(self._entries)
