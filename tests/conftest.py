import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from catalog_sync.api.deps import get_shopify_client
from catalog_sync.clients.shopify import ShopifyClient, ShopifyConfig
from catalog_sync.db.base import Base
from catalog_sync.db.session import get_db
from catalog_sync.main import app
from catalog_sync.models import Product  # noqa: F401

TEST_CONFIG = ShopifyConfig(shop="test-shop", access_token="test-access-token", api_version="2025-07")
PRODUCTS_URL = "https://test-shop.myshopify.com/admin/api/2025-07/products.json"


class FakeShopifyCatalog:
    """Serves ``products.json`` pages linked with ``rel="next"`` cursors."""

    def __init__(self) -> None:
        self.pages: list[list[Any]] = [[]]
        self.requests: list[httpx.Request] = []

    def set_pages(self, *pages: list[Any]) -> None:
        self.pages = list(pages) or [[]]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        cursor = request.url.params.get("page_info")
        index = int(cursor.removeprefix("cursor-")) if cursor else 0

        links = []
        if index > 0:
            links.append(f'<{PRODUCTS_URL}?limit=250&page_info=cursor-{index - 1}>; rel="previous"')
        if index + 1 < len(self.pages):
            links.append(f'<{PRODUCTS_URL}?limit=250&page_info=cursor-{index + 1}>; rel="next"')
        headers = {"Link": ", ".join(links)} if links else {}
        return httpx.Response(200, json={"products": self.pages[index]}, headers=headers)

    def client(self) -> ShopifyClient:
        return ShopifyClient(TEST_CONFIG, client=httpx.Client(transport=httpx.MockTransport(self.handler)))


@pytest.fixture()
def session() -> Session:
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture()
def shopify_catalog() -> FakeShopifyCatalog:
    return FakeShopifyCatalog()


@pytest.fixture()
def client(session: Session, shopify_catalog: FakeShopifyCatalog) -> TestClient:
    def _get_db() -> Session:
        return session

    def _get_shopify_client():
        shopify = shopify_catalog.client()
        try:
            yield shopify
        finally:
            shopify.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_shopify_client] = _get_shopify_client
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
