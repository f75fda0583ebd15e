"""Tests for Shopify → Product normalization and the catalog snapshot cache."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from app.domain.models.product import Product
from app.domain.repositories.catalog_cache_repo import CatalogCache
from app.domain.repositories.shopify_repo import ShopifyClient, ShopifyError
from app.domain.services.catalog_svc import (
    extract_scent_notes,
    split_tags,
    storefront_domain,
    strip_html,
    sync_shopify_products,
    transform_product,
)

RAW_PRODUCT = {
    "id": 632910392,
    "title": "Citrus Bloom",
    "handle": "citrus-bloom",
    "body_html": "<p>A <strong>bright</strong> citrus splash.</p>",
    "product_type": "Eau de Parfum",
    "vendor": "Maison Test",
    "tags": "citrus, Fresh Bergamot, gift, featured",
    "variants": [{"price": "45.00", "available": True}, {"price": "90.00", "available": False}],
    "images": [{"src": "https://cdn.shopify.com/a.jpg", "alt": "Bottle"}],
}


class TestTransform:
    def test_transform_product(self):
        p = transform_product(RAW_PRODUCT, storefront="maison.com")
        assert p.id == "632910392"
        assert p.handle == "citrus-bloom"
        assert p.description == "A bright citrus splash."
        assert p.tags == ["citrus", "Fresh Bergamot", "gift", "featured"]
        assert p.scent_notes == ["citrus", "Fresh Bergamot"]
        assert p.price == "45.00"
        assert p.available is True
        assert p.image_url == "https://cdn.shopify.com/a.jpg"
        assert p.image_alt == "Bottle"
        assert p.url == "https://maison.com/products/citrus-bloom"

    def test_searchable_text_is_lowercase_concatenation(self):
        p = transform_product(RAW_PRODUCT, storefront="maison.com")
        assert p.searchable_text == p.searchable_text.lower()
        for fragment in ("citrus bloom", "a bright citrus splash.", "eau de parfum", "maison test", "gift", "fresh bergamot"):
            assert fragment in p.searchable_text

    def test_missing_variants_and_images(self):
        raw = {"id": 1, "title": "Sample", "handle": "sample"}
        p = transform_product(raw, storefront="shop.com")
        assert p.price is None
        assert p.available is False
        assert p.image_url is None
        assert p.tags == []
        assert p.scent_notes == []
        assert p.description == ""

    def test_availability_derived_from_inventory(self):
        base = {"id": 1, "title": "T", "handle": "t"}
        tracked_empty = {**base, "variants": [{"price": "1", "inventory_management": "shopify", "inventory_quantity": 0}]}
        tracked_stock = {**base, "variants": [{"price": "1", "inventory_management": "shopify", "inventory_quantity": 3}]}
        backorder = {**base, "variants": [{"price": "1", "inventory_management": "shopify", "inventory_quantity": 0, "inventory_policy": "continue"}]}
        untracked = {**base, "variants": [{"price": "1", "inventory_management": None}]}
        assert transform_product(tracked_empty, storefront="s.com").available is False
        assert transform_product(tracked_stock, storefront="s.com").available is True
        assert transform_product(backorder, storefront="s.com").available is True
        assert transform_product(untracked, storefront="s.com").available is True

    def test_helpers(self):
        assert strip_html("<div>Hi <br/>there</div>") == "Hi there"
        assert strip_html(None) == ""
        assert split_tags("a, b,,  c ") == ["a", "b", "c"]
        assert split_tags("") == []
        assert extract_scent_notes(["Woody", "gift", "rosewater"]) == ["Woody", "rosewater"]
        assert storefront_domain("maison.myshopify.com") == "maison.com"
        assert storefront_domain("maison.myshopify.com", "www.maison.fr") == "www.maison.fr"

    def test_with_updates_rebuilds_searchable_text(self):
        p = transform_product(RAW_PRODUCT, storefront="maison.com")
        updated = p.with_updates(title="Night Jasmine")
        assert "night jasmine" in updated.searchable_text
        assert "citrus bloom" not in updated.searchable_text
        assert "citrus bloom" in p.searchable_text

    def test_product_is_frozen(self):
        p = transform_product(RAW_PRODUCT, storefront="maison.com")
        with pytest.raises(Exception):
            p.title = "Other"


class TestSyncShopifyProducts:
    @pytest.mark.asyncio
    async def test_skips_malformed_products(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"products": [RAW_PRODUCT, {"title": "no id"}]})

        client = ShopifyClient("maison.myshopify.com", "tok", transport=httpx.MockTransport(handler))
        try:
            products = await sync_shopify_products(client)
        finally:
            await client.aclose()

        assert [p.id for p in products] == ["632910392"]
        assert products[0].url == "https://maison.com/products/citrus-bloom"

    @pytest.mark.asyncio
    async def test_upstream_error_propagates(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503, text="maintenance")

        client = ShopifyClient("maison.myshopify.com", "tok", transport=httpx.MockTransport(handler))
        try:
            with pytest.raises(ShopifyError):
                await sync_shopify_products(client)
        finally:
            await client.aclose()


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def _counting_loader(products: list[Product], delay: float = 0.0):
    calls = {"n": 0}

    async def loader():
        calls["n"] += 1
        if delay:
            await asyncio.sleep(delay)
        return products

    return loader, calls


class TestCatalogCache:
    @pytest.mark.asyncio
    async def test_get_loads_once_while_fresh(self, catalog_products):
        loader, calls = _counting_loader(catalog_products)
        cache = CatalogCache(loader, ttl_seconds=60)
        assert await cache.get() == catalog_products
        assert await cache.get() == catalog_products
        assert calls["n"] == 1

    @pytest.mark.asyncio
    async def test_expires_after_ttl(self, catalog_products):
        clock = FakeClock()
        loader, calls = _counting_loader(catalog_products)
        cache = CatalogCache(loader, ttl_seconds=60, clock=clock)
        await cache.get()
        clock.now += 59
        await cache.get()
        assert calls["n"] == 1
        clock.now += 1
        assert cache.is_fresh() is False
        await cache.get()
        assert calls["n"] == 2

    @pytest.mark.asyncio
    async def test_invalidate_forces_refetch(self, catalog_products):
        loader, calls = _counting_loader(catalog_products)
        cache = CatalogCache(loader)
        await cache.get()
        cache.invalidate()
        assert cache.status()["cached"] is False
        await cache.get()
        assert calls["n"] == 2

    @pytest.mark.asyncio
    async def test_refresh_bypasses_freshness(self, catalog_products):
        loader, calls = _counting_loader(catalog_products)
        cache = CatalogCache(loader)
        await cache.get()
        assert await cache.refresh() == catalog_products
        assert calls["n"] == 2

    @pytest.mark.asyncio
    async def test_concurrent_misses_fetch_once(self, catalog_products):
        loader, calls = _counting_loader(catalog_products, delay=0.01)
        cache = CatalogCache(loader)
        results = await asyncio.gather(*(cache.get() for _ in range(5)))
        assert calls["n"] == 1
        assert all(r == catalog_products for r in results)

    @pytest.mark.asyncio
    async def test_failure_without_snapshot_returns_empty(self):
        async def loader():
            raise ShopifyError("Shopify API error: 500", status=500)

        cache = CatalogCache(loader)
        assert await cache.get() == []
        with pytest.raises(ShopifyError):
            await cache.refresh()

    @pytest.mark.asyncio
    async def test_failure_with_stale_snapshot_serves_stale(self, catalog_products):
        clock = FakeClock()
        state = {"fail": False}

        async def loader():
            if state["fail"]:
                raise ShopifyError("down")
            return catalog_products

        cache = CatalogCache(loader, ttl_seconds=10, clock=clock)
        await cache.get()
        state["fail"] = True
        clock.now += 11
        assert await cache.get() == catalog_products

    @pytest.mark.asyncio
    async def test_snapshot_replaced_wholesale(self, catalog_products, make_product):
        batches = [catalog_products, [make_product(id="new")]]

        async def loader():
            return batches.pop(0)

        cache = CatalogCache(loader)
        await cache.get()
        fresh = await cache.refresh()
        assert [p.id for p in fresh] == ["new"]
        assert cache.status()["count"] == 1
