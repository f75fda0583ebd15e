# app/domain/services/recommendation_svc.py

from __future__ import annotations
from typing import List, Sequence
import logging

from app.domain.models.product import Product, ProductSummary, ScoredProduct
from app.domain.services.constants import DEFAULT_MAX_RESULTS
from app.domain.services.formatter_svc import format_product
from app.domain.services.scoring_svc import score_product

logger = logging.getLogger(__name__)


def select_products(
    products: Sequence[Product],
    query: str,
    preferences: Sequence[str] = (),
    max_results: int = DEFAULT_MAX_RESULTS,
) -> List[ScoredProduct]:
    """
    Score the whole catalog, keep available products with a positive score,
    sort by score (stable: catalog order breaks ties) and keep the top `max_results`.
    A blank query selects nothing.

    Never raises. An empty list means either "no match" or "internal failure";
    the two cases are told apart in the logs only.
    """
    if max_results <= 0 or not query or not query.strip():
        return []

    catalog_size = len(products) if hasattr(products, "__len__") else "?"
    try:
        scored = [
            ScoredProduct(product=p, score=score_product(p, query, preferences))
            for p in products
        ]
    except Exception:
        logger.exception(
            "Product scoring failed (internal error, returning empty result) "
            f"query={query!r} catalog_size={catalog_size}"
        )
        return []

    candidates = [s for s in scored if s.score > 0 and s.product.available]
    candidates.sort(key=lambda s: s.score, reverse=True)

    if not candidates:
        logger.info(f"No matching products query={query!r} catalog_size={catalog_size}")
    return candidates[:max_results]


def get_recommendations(
    products: Sequence[Product],
    query: str,
    preferences: Sequence[str] = (),
    max_results: int = DEFAULT_MAX_RESULTS,
) -> List[ProductSummary]:
    """Selector + formatter. Blank query → empty list; never raises."""
    if not query or not query.strip():
        logger.warning("Recommendation requested with an empty query, returning no products")
        return []

    selected = select_products(products, query, preferences or [], max_results)
    try:
        return [format_product(s) for s in selected]
    except Exception:
        logger.exception(f"Formatting recommendations failed query={query!r}")
        return []
