# app/api/v1/routers/catalog.py
from fastapi import APIRouter, Depends, HTTPException
import logging

from app.api.deps import catalog_dep

logger = logging.getLogger(__name__)

router = APIRouter(tags=["catalog"])


@router.get("/catalog")
async def catalog_status(catalog = Depends(catalog_dep)):
    return catalog.status()


@router.post("/catalog/refresh")
async def refresh_catalog(catalog = Depends(catalog_dep)):
    """Force an upstream sync, bypassing the freshness window."""
    try:
        products = await catalog.refresh()
    except Exception as e:
        logger.error(f"Catalog refresh failed: {e}")
        raise HTTPException(status_code=502, detail=f"Catalog refresh failed: {e}")
    return {"status": "ok", "count": len(products)}


@router.delete("/catalog/cache")
async def invalidate_catalog(catalog = Depends(catalog_dep)):
    catalog.invalidate()
    return {"status": "ok", "cached": False}
