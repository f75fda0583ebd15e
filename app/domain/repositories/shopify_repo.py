# app/domain/repositories/shopify_repo.py
from __future__ import annotations
from typing import Any, Dict, List, Optional
import logging

import httpx

logger = logging.getLogger(__name__)

"""
Note:
    - Thin adapter over the Shopify Admin REST API (products + shop endpoints).
    - No business logic here: raw JSON in, raw dicts out. Normalization lives in catalog_svc.
"""


class ShopifyError(Exception):
    """Upstream Shopify failure (non-2xx, unexpected payload, transport error)."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status
        self.message = message


class ShopifyClient:
    """
    Adapter for the Shopify Admin API.
    Owns an httpx.AsyncClient; pass `transport` to stub the network in tests.
    """
    def __init__(
        self,
        domain: str,
        access_token: str,
        *,
        api_version: str = "2023-10",
        timeout: float = 20.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.domain = domain
        self.access_token = access_token
        self.api_version = api_version
        self._http = httpx.AsyncClient(
            headers={
                "X-Shopify-Access-Token": access_token,
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    @property
    def configured(self) -> bool:
        return bool(self.domain and self.access_token)

    async def aclose(self) -> None:
        await self._http.aclose()

    def _url(self, path: str) -> str:
        return f"https://{self.domain}/admin/api/{self.api_version}{path}"

    async def _get(self, url: str, params: Optional[dict] = None) -> httpx.Response:
        if not self.configured:
            raise ShopifyError("Missing Shopify credentials")
        if url.startswith("/"):
            url = self._url(url)
        try:
            resp = await self._http.get(url, params=params)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise ShopifyError(f"Shopify request failed: {e}") from e
        if resp.is_error:
            raise ShopifyError(
                f"Shopify API error: {resp.status_code} {resp.reason_phrase}: {resp.text}",
                status=resp.status_code,
            )
        return resp

    @staticmethod
    def _json(resp: httpx.Response) -> Any:
        try:
            return resp.json()
        except ValueError as e:
            raise ShopifyError(f"Shopify returned a non-JSON body ({resp.status_code}): {e}") from e

    async def fetch_products(self, *, limit: int = 250, max_pages: int = 1) -> List[Dict[str, Any]]:
        """
        Fetch raw product dicts, following the `Link: rel="next"` cursor
        for up to `max_pages` pages.
        """
        products: List[Dict[str, Any]] = []
        url: Optional[str] = "/products.json"
        params: Optional[dict] = {"limit": limit}
        page = 0

        while url and page < max_pages:
            resp = await self._get(url, params=params)
            data = self._json(resp)
            if not isinstance(data, dict) or "products" not in data:
                raise ShopifyError("No products found in Shopify response")
            products.extend(data["products"])
            page += 1
            logger.debug(f"[shopify] page={page} received={len(data['products'])} total={len(products)}")

            # next url already carries limit + page_info
            url = resp.links.get("next", {}).get("url")
            params = None

        if url:
            logger.warning(f"[shopify] stopped after max_pages={max_pages}, catalog may be incomplete")
        return products

    async def fetch_shop(self) -> Dict[str, Any]:
        resp = await self._get("/shop.json")
        data = self._json(resp)
        if not isinstance(data, dict):
            raise ShopifyError("No shop found in Shopify response")
        return data.get("shop") or {}

    async def test_connection(self) -> Dict[str, Any]:
        """
        Connectivity probe used by the /shopify/test endpoint.
        Raises ShopifyError when the shop request fails; caller checks `configured` first.
        A failed products request only reports an empty sample.
        """
        logger.info(f"Testing Shopify connection domain={self.domain}")
        shop = await self.fetch_shop()
        try:
            sample = await self.fetch_products(limit=5, max_pages=1)
        except ShopifyError as e:
            logger.warning(f"Shopify products request failed during connection test: {e.message}")
            sample = []
        return {
            "success": True,
            "shop": {
                "name": shop.get("name"),
                "domain": shop.get("domain"),
                "email": shop.get("email"),
            },
            "products": {
                "count": len(sample),
                "sample": [
                    {"id": p.get("id"), "title": p.get("title"), "handle": p.get("handle")}
                    for p in sample[:2]
                ],
            },
        }
