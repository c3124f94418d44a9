from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any
from urllib.parse import parse_qs, urlsplit

import httpx

from catalog_sync.core.config import Settings
from catalog_sync.core.errors import ConfigurationError, RemoteCatalogDecodeError, RemoteCatalogError

MAX_PAGE_SIZE = 250
LINK_NEXT_RE = re.compile(r'<([^>]+)>\s*;\s*rel="?next"?', re.IGNORECASE)

logger = logging.getLogger(__name__)


def parse_next_page_info(link_header: str | None) -> str | None:
    """Return the ``page_info`` cursor of the ``rel="next"`` entry of a Link header."""
    if not link_header:
        return None
    for match in LINK_NEXT_RE.finditer(link_header):
        values = parse_qs(urlsplit(match.group(1)).query).get("page_info")
        if values and values[0]:
            return values[0]
    return None


@dataclass(frozen=True)
class ShopifyConfig:
    shop: str | None
    access_token: str | None
    api_version: str = "2025-07"
    timeout_seconds: float = 30.0

    @classmethod
    def from_settings(cls, settings: Settings) -> ShopifyConfig:
        return cls(
            shop=settings.shopify_shop,
            access_token=settings.shopify_access_token,
            api_version=settings.shopify_api_version,
            timeout_seconds=settings.shopify_timeout_seconds,
        )

    @property
    def host(self) -> str:
        shop = (self.shop or "").strip().removeprefix("https://").rstrip("/")
        return shop if "." in shop else f"{shop}.myshopify.com"

    @property
    def products_url(self) -> str:
        return f"https://{self.host}/admin/api/{self.api_version}/products.json"


class ShopifyClient:
    """Reads the product catalog from the Shopify Admin REST API."""

    def __init__(self, config: ShopifyConfig, client: httpx.Client | None = None) -> None:
        missing = [
            name
            for name, value in (("SHOPIFY_SHOP", config.shop), ("SHOPIFY_ACCESS_TOKEN", config.access_token))
            if not (value or "").strip()
        ]
        if missing:
            raise ConfigurationError(
                f"Shopify credentials are required. Please set {' and '.join(missing)} environment variables."
            )

        self.config = config
        self._owns_client = client is None
        self.client = client or httpx.Client(
            timeout=config.timeout_seconds,
            headers={
                "X-Shopify-Access-Token": config.access_token or "",
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
        )
        logger.info("Shopify client initialized for %s (api %s)", config.host, config.api_version)

    def __enter__(self) -> ShopifyClient:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def fetch_products_page(
        self, page_info: str | None = None, limit: int = MAX_PAGE_SIZE
    ) -> tuple[list[dict[str, Any]], str | None]:
        params: dict[str, Any] = {"limit": max(1, min(MAX_PAGE_SIZE, limit))}
        if page_info:
            params["page_info"] = page_info

        url = self.config.products_url
        try:
            response = self.client.get(url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise RemoteCatalogError(
                f"Shopify responded with HTTP {exc.response.status_code} for {url}"
            ) from exc
        except httpx.HTTPError as exc:
            raise RemoteCatalogError(f"Error communicating with Shopify: {exc}") from exc

        products = self._decode_products(response)
        next_page_info = parse_next_page_info(response.headers.get("link"))
        logger.debug("Fetched %d products from %s (next page: %s)", len(products), url, bool(next_page_info))
        return products, next_page_info

    def fetch_all_products(self, limit: int = MAX_PAGE_SIZE) -> list[dict[str, Any]]:
        products: list[dict[str, Any]] = []
        seen_cursors: set[str] = set()
        page_info: str | None = None
        pages = 0
        while True:
            batch, page_info = self.fetch_products_page(page_info=page_info, limit=limit)
            products.extend(batch)
            pages += 1
            if not page_info:
                break
            if page_info in seen_cursors:
                raise RemoteCatalogError(f"Shopify returned page_info {page_info!r} twice; aborting pagination")
            seen_cursors.add(page_info)

        logger.info("Fetched %d products from Shopify in %d page(s)", len(products), pages)
        return products

    def _decode_products(self, response: httpx.Response) -> list[dict[str, Any]]:
        try:
            payload = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.error("Invalid JSON from Shopify (%s): %r", self.config.host, response.text[:200])
            raise RemoteCatalogDecodeError("Invalid JSON returned from Shopify") from exc

        if not isinstance(payload, dict):
            raise RemoteCatalogDecodeError("Invalid JSON returned from Shopify: expected an object")
        products = payload.get("products")
        if not isinstance(products, list):
            raise RemoteCatalogDecodeError("Invalid JSON returned from Shopify: 'products' is not a list")
        return products
