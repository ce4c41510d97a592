# src/providers/registry.py

"""Build the fixed set of market providers declared in Settings."""

import importlib
import logging
from typing import Any

from src.config.settings import Settings
from src.providers.base_provider import BaseProvider

logger = logging.getLogger("price_compare.registry")


def _load_provider_class(dotted_path: str) -> type[Any]:
    """Dynamically import a provider class from its dotted module path."""
    module_path, class_name = dotted_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    cls: type[Any] = getattr(module, class_name)
    return cls


def build_providers(
    markets: list[dict[str, str]] | None = None,
) -> list[BaseProvider]:
    """Instantiate one provider per declared market, in declared order.

    Raises ``ValueError`` if two providers share a name (names are
    compared case-insensitively).
    """
    declared = Settings.AVAILABLE_MARKETS if markets is None else markets
    providers: list[BaseProvider] = []
    seen: set[str] = set()
    for market in declared:
        provider_cls = _load_provider_class(market["provider"])
        provider: BaseProvider = provider_cls()
        key = provider.name.casefold()
        if key in seen:
            raise ValueError(f"Duplicate market provider: {provider.name}")
        seen.add(key)
        providers.append(provider)
    logger.info(
        "Registered %d market providers: %s",
        len(providers),
        ", ".join(p.name for p in providers),
    )
    return providers
