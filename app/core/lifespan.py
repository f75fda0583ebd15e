# app/core/lifespan.py
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from openai import AsyncOpenAI

from app.db import redis as r
from app.core.config import get_settings
from app.domain.repositories.catalog_cache_repo import CatalogCache
from app.domain.repositories.shopify_repo import ShopifyClient
from app.domain.services.catalog_svc import sync_shopify_products

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()

    # --- Startup ---
    await r.connect()  # optional, never raises

    if not (settings.SHOPIFY_DOMAIN and settings.SHOPIFY_ACCESS_TOKEN):
        logger.warning("Shopify credentials missing, catalog will be empty")
    if not settings.OPENAI_API_KEY:
        logger.warning("OPENAI_API_KEY missing, chat requests will fail")

    shopify = ShopifyClient(
        settings.SHOPIFY_DOMAIN,
        settings.SHOPIFY_ACCESS_TOKEN,
        api_version=settings.shopify_api_version,
        timeout=settings.shopify_timeout_s,
    )

    async def load_catalog():
        return await sync_shopify_products(
            shopify,
            storefront=settings.SHOPIFY_STOREFRONT_DOMAIN,
            page_limit=settings.shopify_page_limit,
            max_pages=settings.shopify_max_pages,
        )

    app.state.shopify = shopify
    app.state.catalog = CatalogCache(load_catalog, ttl_seconds=settings.catalog_cache_ttl)
    app.state.openai = AsyncOpenAI(api_key=settings.OPENAI_API_KEY or "missing")
    logger.info(f"{settings.APP_NAME} started env={settings.APP_ENV}")

    # Application runs
    yield

    # --- Shutdown ---
    await shopify.aclose()
    await app.state.openai.close()
    await r.disconnect()
