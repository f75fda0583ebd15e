# app/api/v1/routers/shopify.py
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
import logging

from app.api.deps import shopify_dep
from app.domain.repositories.shopify_repo import ShopifyError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["shopify"])


@router.get("/shopify/test")
async def test_shopify(shopify = Depends(shopify_dep)):
    """
    Connection check against the Shopify Admin API (shop info + 5 products).
    Missing credentials → 500, Shopify error → upstream status code.
    """
    if not shopify.configured:
        return JSONResponse(
            status_code=500,
            content={
                "error": "Missing Shopify credentials",
                "missing": {"domain": not shopify.domain, "token": not shopify.access_token},
            },
        )

    try:
        return await shopify.test_connection()
    except ShopifyError as e:
        logger.error(f"Shopify API Error: {e.status} {e.message}")
        if e.status:
            return JSONResponse(
                status_code=e.status,
                content={"error": "Shopify API Error", "status": e.status, "message": e.message},
            )
        return JSONResponse(status_code=500, content={"error": "Connection failed", "message": e.message})
    except Exception as e:
        logger.exception("Shopify connection test failed")
        return JSONResponse(status_code=500, content={"error": "Connection failed", "message": str(e)})
