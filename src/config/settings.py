# src/config/settings.py

"""Central configuration for the price_compare engine."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    """Read a boolean flag from the environment."""
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Central configuration for the price_compare engine."""

    # --- Scraping ---
    REQUEST_TIMEOUT: int = 30           # Seconds before a request times out
    NAVIGATION_TIMEOUT_MS: int = 30_000  # Page navigation / action timeout
    RENDER_SETTLE_MS: int = 3_000       # Wait after navigation for late XHRs
    LAZY_LOAD_WAIT_MS: int = 2_000      # Wait after scrolling for lazy content
    HEADLESS: bool = _env_bool("PRICE_COMPARE_HEADLESS", True)

    # --- Cache ---
    CACHE_TTL: float = float(
        os.getenv("PRICE_COMPARE_CACHE_TTL", "1800")
    )                                   # 30 minutes

    # --- Angeloni (persisted-query API) ---
    ANGELONI_PAGE_SIZE: int = 50

    # --- Minhacooper (storefront) ---
    MINHACOOPER_STORE_ID: str = os.getenv(
        "MINHACOOPER_STORE_ID", "v.nova-bnu"
    )

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    USER_AGENT: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/131.0.0.0 Safari/537.36"
    )
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json",
        "Accept-Language": "pt-BR,pt;q=0.9,en-US;q=0.8",
        "sec-ch-ua": (
            '"Google Chrome";v="131", '
            '"Chromium";v="131", '
            '"Not_A Brand";v="24"'
        ),
        "sec-ch-ua-mobile": "?0",
        "sec-ch-ua-platform": '"Windows"',
    }

    # --- HTTP API ---
    API_HOST: str = os.getenv("PRICE_COMPARE_HOST", "127.0.0.1")
    API_PORT: int = int(os.getenv("PRICE_COMPARE_PORT", "5000"))
    CORS_ORIGINS: list[str] = [
        origin.strip()
        for origin in os.getenv(
            "PRICE_COMPARE_CORS_ORIGINS", "http://localhost:3000"
        ).split(",")
        if origin.strip()
    ]

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    LOGS_DIR: Path = BASE_DIR / "logs"

    # --- Markets (registration order is result order) ---
    AVAILABLE_MARKETS: list[dict[str, str]] = [
        {
            "id": "angeloni",
            "label": "Angeloni",
            "provider": "src.providers.angeloni_provider.AngeloniProvider",
        },
        {
            "id": "minhacooper",
            "label": "Minhacooper",
            "provider": (
                "src.providers.minhacooper_provider.MinhacooperProvider"
            ),
        },
    ]
