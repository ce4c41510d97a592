# src/providers/angeloni_provider.py

"""Provider for angeloni.com.br via its persisted-query search API."""

import asyncio
import base64
import json
import urllib.parse
from typing import Any

from curl_cffi import requests as curl_requests

from src.models.product import Product, to_money
from src.providers.base_provider import BaseProvider


class AngeloniProvider(BaseProvider):
    """Provider for Angeloni's VTEX storefront search.

    The storefront exposes a GraphQL gateway that only accepts
    persisted queries: a fixed operation hash plus a base64-encoded
    JSON variables blob, both sent as query-string parameters.  The
    term has to appear in ``query``, ``fullText`` and the ``ft``
    facet for the backend to match anything.

    Stock filtering happens here, after the response arrives; items
    with no available quantity are dropped instead of being surfaced
    as unavailable products.
    """

    GRAPHQL_URL = (
        "https://www.angeloni.com.br/super/_v/segment/graphql/v1"
    )
    PRODUCT_BASE_URL = "https://www.angeloni.com.br/super/"

    OPERATION_NAME = "productSearchV3"
    BINDING_ID = "d44a2c5b-9d10-4104-85cb-7ae32e06f776"
    PERSISTED_QUERY: dict[str, Any] = {
        "version": 1,
        "sha256Hash": (
            "efcfea65b452e9aa01e820e140a5b4a331adfce70470d2290c08bc4912b45212"
        ),
        "sender": "vtex.store-resources@0.x",
        "provider": "vtex.search-graphql@0.x",
    }

    def __init__(self) -> None:
        super().__init__("Angeloni")

    # ------------------------------------------------------------------
    # Request building
    # ------------------------------------------------------------------

    def build_variables(self, term: str) -> dict[str, Any]:
        """Build the persisted-query variables for a search term."""
        return {
            "hideUnavailableItems": False,
            "skusFilter": "FIRST_AVAILABLE",
            "simulationBehavior": "default",
            "installmentCriteria": "MAX_WITHOUT_INTEREST",
            "productOriginVtex": False,
            "map": "ft",
            "query": term,
            "orderBy": "OrderByScoreDESC",
            "from": 0,
            "to": self.settings.ANGELONI_PAGE_SIZE,
            "selectedFacets": [{"key": "ft", "value": term}],
            "fullText": term,
            "facetsBehavior": "Static",
            "categoryTreeBehavior": "default",
            "withFacets": False,
            "variant": "68308769ced074d095f0a8e5-variantTreatment",
            "advertisementOptions": {
                "showSponsored": True,
                "sponsoredCount": 3,
                "advertisementPlacement": "top_search",
                "repeatSponsoredProducts": True,
            },
        }

    def build_search_url(self, term: str) -> str:
        """Return the full GET URL for a search term."""
        variables_json = json.dumps(
            self.build_variables(term), separators=(",", ":")
        )
        variables_b64 = base64.b64encode(
            variables_json.encode("utf-8")
        ).decode("ascii")
        extensions = json.dumps(
            {
                "persistedQuery": self.PERSISTED_QUERY,
                "variables": variables_b64,
            },
            separators=(",", ":"),
        )
        params = {
            "workspace": "master",
            "maxAge": "short",
            "appsEtag": "remove",
            "domain": "store",
            "locale": "pt-BR",
            "__bindingId": self.BINDING_ID,
            "operationName": self.OPERATION_NAME,
            "variables": "{}",
            "extensions": extensions,
        }
        query_string = urllib.parse.urlencode(
            params, quote_via=urllib.parse.quote
        )
        return f"{self.GRAPHQL_URL}?{query_string}"

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _fetch(self, url: str) -> dict[str, Any] | None:
        """Single GET attempt; ``None`` on a non-200 answer."""
        headers: dict[str, str] = {
            **self.settings.DEFAULT_HEADERS,
            "User-Agent": self.settings.USER_AGENT,
            "Referer": self.PRODUCT_BASE_URL,
        }
        with curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        ) as session:
            resp = session.get(
                url,
                headers=headers,
                timeout=self.settings.REQUEST_TIMEOUT,
            )
        if resp.status_code != 200:
            self.logger.warning(
                "[%s] HTTP %d from search API",
                self.name,
                resp.status_code,
            )
            return None
        data: dict[str, Any] = json.loads(resp.text)
        return data

    # ------------------------------------------------------------------
    # Response parsing
    # ------------------------------------------------------------------

    def _product_url(self, link: str) -> str:
        """Resolve a storefront link to an absolute URL."""
        if not link:
            return ""
        if link.startswith("http"):
            return link
        return self.PRODUCT_BASE_URL + link.lstrip("/")

    def parse_product(self, raw: dict[str, Any]) -> Product | None:
        """Convert one search hit into a Product.

        Returns ``None`` for hits that are legitimately unusable (no
        SKU, no seller, out of stock).  Raises ``KeyError``,
        ``TypeError`` or ``ValueError`` when a required field is
        missing or malformed.
        """
        items = raw.get("items") or []
        if not items:
            return None
        item = items[0]

        image = ""
        images = item.get("images") or []
        if images:
            image = str(images[0].get("imageUrl") or "")

        sellers = item.get("sellers") or []
        if not sellers:
            return None
        offer = sellers[0]["commertialOffer"]

        price = to_money(offer["Price"])
        list_price = to_money(offer["ListPrice"])
        if int(offer["AvailableQuantity"]) <= 0:
            return None

        return Product(
            name=str(raw["productName"]).strip(),
            price=price,
            original_price=list_price,
            market=self.name,
            url=self._product_url(str(raw.get("link") or "")),
            image=image,
        )

    def parse_response(self, data: dict[str, Any]) -> list[Product]:
        """Walk ``data.productSearch.products`` item by item."""
        raw_products = (
            ((data.get("data") or {}).get("productSearch") or {})
            .get("products")
        )
        if not isinstance(raw_products, list):
            self.logger.warning(
                "[%s] Response has no productSearch.products list",
                self.name,
            )
            return []

        products: list[Product] = []
        skipped = 0
        for raw in raw_products:
            try:
                product = self.parse_product(raw)
            except (KeyError, TypeError, ValueError, AttributeError) as exc:
                self.logger.warning(
                    "[%s] Skipping malformed product: %r",
                    self.name,
                    exc,
                )
                skipped += 1
                continue
            if product is None:
                skipped += 1
                continue
            products.append(product)

        if skipped:
            self.logger.debug(
                "[%s] Skipped %d of %d hits (malformed or unavailable)",
                self.name,
                skipped,
                len(raw_products),
            )
        return products

    # ------------------------------------------------------------------
    # Public search entry-point
    # ------------------------------------------------------------------

    async def _search(self, term: str) -> list[Product]:
        """Query the search API once; no retry within a search."""
        url = self.build_search_url(term)
        self.logger.debug("[%s] GET %s", self.name, url)
        data = await asyncio.to_thread(self._fetch, url)
        if data is None:
            return []
        return self.parse_response(data)
