# src/providers/minhacooper_provider.py

"""Provider for minhacooper.com.br driven through a headless browser."""

import asyncio
import json
import re
import urllib.parse
from decimal import Decimal, InvalidOperation
from typing import Any

from playwright.async_api import Browser, Page, Playwright, async_playwright

from src.models.product import Product, to_money
from src.providers.base_provider import BaseProvider

# Collects raw offers from both result layouts (grid cards when there
# are many hits, list rows when there are few).  Dedup and price
# parsing happen on the Python side.
_EXTRACT_JS = """
() => {
    const offers = [];
    const nodes = document.querySelectorAll('%s');
    nodes.forEach(node => {
        const nameEl = node.querySelector('.product-variation__name');
        const nome = nameEl ? nameEl.innerText.trim() : '';
        const priceEl = node.querySelector('.product-variation__final-price');
        const preco = priceEl ? priceEl.innerText.trim() : '';
        const imgEl = node.querySelector('.product-variation__image');
        const imagem = imgEl ? (imgEl.getAttribute('src') || '') : '';
        const linkEl = node.querySelector('a[href]');
        const url = linkEl ? linkEl.href : '';
        if (nome && preco && preco.includes('R$')) {
            offers.push({nome: nome, preco: preco, url: url, imagem: imagem});
        }
    });
    return JSON.stringify(offers);
}
"""

_PRICE_RE = re.compile(r"\d[\d.,]*")


class MinhacooperProvider(BaseProvider):
    """Provider for the Minhacooper storefront.

    Search results are rendered client-side, so a Chromium instance is
    launched on first use and kept for the lifetime of the provider.
    Every search opens its own page and closes it on the way out,
    which keeps concurrent searches isolated while paying the browser
    start-up cost only once.
    """

    BASE_URL = "https://minhacooper.com.br"
    SEARCH_URL = BASE_URL + "/loja/{store}/produto/busca?q={query}"
    NO_RESULTS_MARKER = "Desculpe, não encontramos resultado"
    CARD_SELECTOR = ".product-list-item, .product-variation"
    SCROLL_JS = "window.scrollTo(0, document.body.scrollHeight)"

    def __init__(self, store_id: str | None = None) -> None:
        super().__init__("Minhacooper")
        self.store_id = store_id or self.settings.MINHACOOPER_STORE_ID
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Browser lifecycle
    # ------------------------------------------------------------------

    async def _ensure_browser(self) -> Browser:
        """Launch the shared browser once; later calls reuse it."""
        async with self._lock:
            if self._browser is not None:
                return self._browser
            playwright = await async_playwright().start()
            try:
                browser = await playwright.chromium.launch(
                    headless=self.settings.HEADLESS,
                    timeout=self.settings.NAVIGATION_TIMEOUT_MS,
                )
            except Exception:
                await playwright.stop()
                raise
            self._playwright = playwright
            self._browser = browser
            self.logger.info(
                "[%s] Browser launched (headless=%s)",
                self.name,
                self.settings.HEADLESS,
            )
            return browser

    async def close(self) -> None:
        """Close the browser, then stop the Playwright runtime."""
        async with self._lock:
            browser, self._browser = self._browser, None
            playwright, self._playwright = self._playwright, None
        if browser is None and playwright is None:
            return
        try:
            if browser is not None:
                await browser.close()
        finally:
            if playwright is not None:
                await playwright.stop()
            self.logger.info("[%s] Browser closed", self.name)

    # ------------------------------------------------------------------
    # Raw record normalisation
    # ------------------------------------------------------------------

    def build_search_url(self, term: str) -> str:
        """Return the storefront search URL for a term."""
        return self.SEARCH_URL.format(
            store=self.store_id,
            query=urllib.parse.quote_plus(term),
        )

    @staticmethod
    def parse_price(text: str | None) -> Decimal:
        """Parse a Brazilian price label like ``'R$ 12.345,67'``.

        Returns ``Decimal('0')`` when no amount can be read.
        """
        if not text:
            return Decimal("0")
        match = _PRICE_RE.search(text)
        if not match:
            return Decimal("0")
        number = match.group(0).replace(".", "").replace(",", ".")
        try:
            return to_money(number)
        except (ValueError, InvalidOperation):
            return Decimal("0")

    @classmethod
    def absolute_url(cls, url: str) -> str:
        """Resolve protocol- and root-relative URLs against the site."""
        if not url or url.startswith("http"):
            return url
        if url.startswith("//"):
            return "https:" + url
        return urllib.parse.urljoin(cls.BASE_URL + "/", url)

    def parse_records(self, records: list[dict[str, Any]]) -> list[Product]:
        """Turn marshalled page offers into Products.

        Offers repeated in the DOM share the same name and price label
        and are kept once.  Offers whose price reads as zero are
        dropped.
        """
        products: list[Product] = []
        seen: set[tuple[str, str]] = set()
        for record in records:
            name = str(record.get("nome") or "").strip()
            price_text = str(record.get("preco") or "").strip()
            key = (name, price_text)
            if key in seen:
                continue
            seen.add(key)

            price = self.parse_price(price_text)
            if not name or price <= 0:
                self.logger.debug(
                    "[%s] Dropping offer %r (price text %r)",
                    self.name,
                    name,
                    price_text,
                )
                continue
            products.append(
                Product(
                    name=name,
                    price=price,
                    market=self.name,
                    url=self.absolute_url(str(record.get("url") or "")),
                    image=self.absolute_url(
                        str(record.get("imagem") or "")
                    ),
                )
            )
        return products

    # ------------------------------------------------------------------
    # Page interaction
    # ------------------------------------------------------------------

    async def _extract(self, page: Page) -> list[Product]:
        """Run the in-page collector and parse its JSON payload."""
        payload = await page.evaluate(_EXTRACT_JS % self.CARD_SELECTOR)
        records: list[dict[str, Any]] = json.loads(payload or "[]")
        self.logger.debug(
            "[%s] %d offers marshalled from page",
            self.name,
            len(records),
        )
        return self.parse_records(records)

    async def _search_page(self, page: Page, term: str) -> list[Product]:
        page.set_default_timeout(self.settings.NAVIGATION_TIMEOUT_MS)
        url = self.build_search_url(term)
        self.logger.debug("[%s] Navigating to %s", self.name, url)

        response = await page.goto(
            url,
            wait_until="networkidle",
            timeout=self.settings.NAVIGATION_TIMEOUT_MS,
        )
        if response is None or response.status != 200:
            self.logger.warning(
                "[%s] Navigation returned HTTP %s",
                self.name,
                response.status if response is not None else "none",
            )
            return []

        await page.wait_for_timeout(self.settings.RENDER_SETTLE_MS)

        content = await page.content()
        if self.NO_RESULTS_MARKER in content:
            self.logger.info(
                "[%s] No results page for '%s'", self.name, term
            )
            return []

        products = await self._extract(page)
        if products:
            return products

        # Grid may be lazy-loaded below the fold; one more pass only
        await page.evaluate(self.SCROLL_JS)
        await page.wait_for_timeout(self.settings.LAZY_LOAD_WAIT_MS)
        return await self._extract(page)

    # ------------------------------------------------------------------
    # Public search entry-point
    # ------------------------------------------------------------------

    async def _search(self, term: str) -> list[Product]:
        """Search through a fresh page on the shared browser."""
        browser = await self._ensure_browser()
        page = await browser.new_page(user_agent=self.settings.USER_AGENT)
        try:
            return await self._search_page(page, term)
        finally:
            try:
                await page.close()
            except Exception as exc:
                self.logger.warning(
                    "[%s] Failed to close page: %s", self.name, exc
                )
