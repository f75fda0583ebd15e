# app/api/v1/routers/products.py

from fastapi import APIRouter, Depends
import time
import logging

from app.api.deps import catalog_dep
from app.domain.models.search import RecommendationRequest, SearchFilters
from app.domain.services.filters import search_advanced
from app.domain.services.recommendation_svc import get_recommendations

logger = logging.getLogger(__name__)

router = APIRouter(tags=["products"])


@router.post("/products/recommendations")
async def recommendations(req: RecommendationRequest, catalog = Depends(catalog_dep)):
    """
    Score the cached catalog for a query + preferences and return the top products.
    Same path the chat tool call uses, without the LLM in front.
    """
    start_time = time.perf_counter()
    products = await catalog.get()
    items = get_recommendations(products, req.query, req.preferences, req.max_results)
    logger.info(
        "Response: recommendations query=%r, count=%s, elapsed_time=%.4fs",
        req.query, len(items), time.perf_counter() - start_time,
    )
    return {"query": req.query, "items": [i.model_dump() for i in items], "count": len(items)}


@router.post("/products/search")
async def search(filters: SearchFilters, catalog = Depends(catalog_dep)):
    """Filter/sort search over the cached catalog (categories, price range, scent families)."""
    products = await catalog.get()
    items = search_advanced(products, filters)
    return {"items": [i.model_dump() for i in items], "count": len(items)}
