# app/domain/services/catalog_svc.py

from __future__ import annotations
from typing import Any, Dict, List, Optional
import logging
import re
import time

from app.domain.models.product import Product
from app.domain.repositories.shopify_repo import ShopifyClient
from app.domain.services.constants import SCENT_VOCABULARY

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"<[^>]*>")


def strip_html(html: Optional[str]) -> str:
    return _TAG_RE.sub("", html or "")


def split_tags(raw: Any) -> List[str]:
    """Shopify returns tags as one comma-separated string ("citrus, fresh")."""
    if not raw:
        return []
    if isinstance(raw, (list, tuple)):
        parts = raw
    else:
        parts = str(raw).split(",")
    return [t.strip() for t in parts if t and t.strip()]


def extract_scent_notes(tags: List[str]) -> List[str]:
    """Tags mentioning any scent family of the vocabulary, in tag order."""
    return [t for t in tags if any(s in t.lower() for s in SCENT_VOCABULARY)]


def storefront_domain(shop_domain: str, override: Optional[str] = None) -> str:
    """Public domain used in product urls: my-shop.myshopify.com → my-shop.com."""
    if override:
        return override
    return shop_domain.replace(".myshopify.com", ".com")


def _variant_available(variant: Optional[Dict[str, Any]]) -> bool:
    if not variant:
        return False
    if "available" in variant:
        return bool(variant["available"])
    # Newer Admin API versions dropped `available`; derive it from inventory
    if variant.get("inventory_management") in (None, ""):
        return True
    if variant.get("inventory_policy") == "continue":
        return True
    return (variant.get("inventory_quantity") or 0) > 0


def transform_product(raw: Dict[str, Any], *, storefront: str) -> Product:
    """Normalize one Shopify Admin API product into a catalog Product."""
    variants = raw.get("variants") or []
    images = raw.get("images") or []
    main_variant = variants[0] if variants else None
    main_image = images[0] if images else {}

    tags = split_tags(raw.get("tags"))
    handle = raw.get("handle") or ""

    return Product(
        id=str(raw["id"]),
        title=raw.get("title") or "",
        handle=handle,
        description=strip_html(raw.get("body_html")),
        product_type=raw.get("product_type"),
        vendor=raw.get("vendor"),
        tags=tags,
        price=(main_variant or {}).get("price"),
        available=_variant_available(main_variant),
        image_url=main_image.get("src"),
        image_alt=main_image.get("alt"),
        url=f"https://{storefront}/products/{handle}",
        scent_notes=extract_scent_notes(tags),
    )


async def sync_shopify_products(
    client: ShopifyClient,
    *,
    storefront: Optional[str] = None,
    page_limit: int = 250,
    max_pages: int = 1,
) -> List[Product]:
    """
    Fetch the full catalog from Shopify and normalize it.
    Raises ShopifyError on upstream failure; a single malformed product is skipped.
    """
    start = time.perf_counter()
    logger.info("Starting Shopify product sync...")
    raw_products = await client.fetch_products(limit=page_limit, max_pages=max_pages)

    domain = storefront_domain(client.domain, storefront)
    products: List[Product] = []
    skipped = 0
    for raw in raw_products:
        try:
            products.append(transform_product(raw, storefront=domain))
        except Exception as e:
            skipped += 1
            logger.warning(f"Skipping malformed Shopify product id={raw.get('id')}: {e}")

    elapsed_ms = (time.perf_counter() - start) * 1000.0
    logger.info(f"Synced {len(products)} products from Shopify skipped={skipped} time_ms={elapsed_ms:.1f}")
    return products
