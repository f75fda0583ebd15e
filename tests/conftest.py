"""Shared fixtures: product factory, fake Redis, fake OpenAI client, ASGI test client."""

from __future__ import annotations

import json
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from app.domain.models.product import Product
from app.domain.repositories.catalog_cache_repo import CatalogCache


def _product(**overrides: Any) -> Product:
    data: dict[str, Any] = {
        "id": "p-1",
        "title": "Item",
        "description": "",
        "product_type": "",
        "vendor": "",
        "tags": [],
        "scent_notes": [],
        "price": "10.00",
        "available": True,
    }
    data.update(overrides)
    return Product(**data)


@pytest.fixture
def make_product():
    """Factory building a Product with neutral defaults (no accidental matches)."""
    return _product


@pytest.fixture
def catalog_products() -> list[Product]:
    return [
        _product(
            id="1",
            title="Citrus Bloom",
            product_type="Eau de Parfum",
            vendor="Maison Test",
            tags=["citrus", "fresh", "bestseller"],
            scent_notes=["citrus", "fresh"],
            price="45.00",
        ),
        _product(
            id="2",
            title="Velvet Rose",
            product_type="Eau de Parfum",
            vendor="Maison Test",
            tags=["rose", "floral"],
            scent_notes=["rose", "floral"],
            price="60.00",
        ),
        _product(
            id="3",
            title="Sandalwood Body Lotion",
            product_type="Body Lotion",
            vendor="Maison Test",
            tags=["sandalwood", "woody"],
            scent_notes=["sandalwood", "woody"],
            price="25.50",
        ),
        _product(
            id="4",
            title="Citrus Hand Soap",
            product_type="Soap",
            vendor="Maison Test",
            tags=["citrus"],
            scent_notes=["citrus"],
            price="12.00",
            available=False,
        ),
    ]


class FakeRedis:
    """In-memory stand-in for the redis.asyncio calls the app uses."""

    def __init__(self) -> None:
        self.store: dict[str, str] = {}
        self.expiry: dict[str, int | None] = {}

    async def get(self, key: str):
        return self.store.get(key)

    async def set(self, key: str, value: str, ex: int | None = None):
        self.store[key] = value
        self.expiry[key] = ex
        return True

    async def delete(self, key: str) -> int:
        existed = key in self.store
        self.store.pop(key, None)
        self.expiry.pop(key, None)
        return int(existed)

    async def ping(self) -> bool:
        return True


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


def _llm_reply(content: str | None = None, tool_args: dict | str | None = None, tool_name: str = "recommend_products"):
    tool_calls = None
    if tool_args is not None:
        arguments = tool_args if isinstance(tool_args, str) else json.dumps(tool_args)
        tool_calls = [
            SimpleNamespace(
                id="call_1",
                type="function",
                function=SimpleNamespace(name=tool_name, arguments=arguments),
            )
        ]
    message = SimpleNamespace(role="assistant", content=content, tool_calls=tool_calls)
    return SimpleNamespace(
        choices=[SimpleNamespace(index=0, message=message, finish_reason="stop")],
        usage=SimpleNamespace(prompt_tokens=100, completion_tokens=20, total_tokens=120),
        model="gpt-4-turbo",
    )


@pytest.fixture
def llm_reply():
    """Factory for a chat.completions.create() result (optionally with a tool call)."""
    return _llm_reply


@pytest.fixture
def openai_client():
    """MagicMock shaped like AsyncOpenAI; set .chat.completions.create.return_value per test."""
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=_llm_reply("Hello! What scents do you like?"))
    return client


@pytest.fixture
def catalog_cache(catalog_products) -> CatalogCache:
    async def loader():
        return catalog_products

    return CatalogCache(loader, ttl_seconds=3600)


@pytest.fixture
async def client(catalog_cache, openai_client):
    """ASGI client with app-scoped singletons replaced by test doubles."""
    from app.api import deps
    from app.domain.repositories.shopify_repo import ShopifyClient
    from app.main import app

    shopify = ShopifyClient("", "")
    app.dependency_overrides[deps.catalog_dep] = lambda: catalog_cache
    app.dependency_overrides[deps.openai_dep] = lambda: openai_client
    app.dependency_overrides[deps.shopify_dep] = lambda: shopify

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
    await shopify.aclose()
