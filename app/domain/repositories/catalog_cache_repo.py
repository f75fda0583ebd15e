# app/domain/repositories/catalog_cache_repo.py
from __future__ import annotations
from typing import Awaitable, Callable, List, Optional
import asyncio
import logging
import time

from app.domain.models.product import Product

logger = logging.getLogger(__name__)

CatalogLoader = Callable[[], Awaitable[List[Product]]]


class CatalogCache:
    """
    In-process snapshot of the product catalog with a time-based freshness window.
    One instance per app (see lifespan), injected into routes via deps.

    - get(): fresh snapshot, or refresh on miss. Never raises.
    - refresh(): force an upstream fetch. Raises on failure.
    - invalidate(): drop the snapshot; next get() refetches.

    Refreshes are single-flight: concurrent misses wait on one lock and reuse
    the snapshot the first caller fetched (double-check after acquire).
    """
    def __init__(
        self,
        loader: CatalogLoader,
        ttl_seconds: int = 24 * 3600,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._loader = loader
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._products: Optional[List[Product]] = None
        self._fetched_at: Optional[float] = None
        self._lock = asyncio.Lock()

    def is_fresh(self) -> bool:
        if self._products is None or self._fetched_at is None:
            return False
        return (self._clock() - self._fetched_at) < self.ttl_seconds

    async def get(self) -> List[Product]:
        if self.is_fresh():
            logger.debug(f"Using cached products: {len(self._products)} items")
            return self._products

        async with self._lock:
            # another caller may have refreshed while we waited
            if self.is_fresh():
                logger.debug("Catalog refreshed by a concurrent caller, reusing snapshot")
                return self._products

            logger.info("Cache expired or empty, fetching catalog...")
            try:
                return await self._load()
            except Exception as e:
                if self._products is not None:
                    logger.error(f"Catalog refresh failed, serving stale snapshot ({len(self._products)} items): {e}")
                    return self._products
                logger.error(f"Catalog refresh failed, no snapshot available: {e}")
                return []

    async def refresh(self) -> List[Product]:
        async with self._lock:
            logger.info("Forced catalog refresh")
            return await self._load()

    def invalidate(self) -> None:
        logger.info("Catalog cache invalidated")
        self._products = None
        self._fetched_at = None

    def status(self) -> dict:
        age = None if self._fetched_at is None else self._clock() - self._fetched_at
        return {
            "cached": self._products is not None,
            "count": len(self._products) if self._products is not None else 0,
            "age_seconds": round(age, 1) if age is not None else None,
            "ttl_seconds": self.ttl_seconds,
            "fresh": self.is_fresh(),
        }

    async def _load(self) -> List[Product]:
        products = await self._loader()
        # wholesale replacement, never a partial update
        self._products = list(products)
        self._fetched_at = self._clock()
        logger.info(f"Catalog snapshot replaced: {len(self._products)} items")
        return self._products
