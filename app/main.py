from fastapi import FastAPI
from app.core.config import get_settings
from app.core.lifespan import lifespan
from app.api.v1.routers.health import router as health_router
from app.api.v1.routers.chat import router as chat_router
from app.api.v1.routers.products import router as products_router
from app.api.v1.routers.catalog import router as catalog_router
from app.api.v1.routers.shopify import router as shopify_router
from app.core.logging import configure_logging

from fastapi.middleware.cors import CORSMiddleware
import logging, os

settings = get_settings()
configure_logging(level=logging.DEBUG if settings.DEBUG else logging.INFO)

app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# ------- CORS -------
# ALLOWED_ORIGINS is a CSV, e.g. "https://shop.example.com,https://www.shop.example.com"
allowed_origins_env = os.getenv("ALLOWED_ORIGINS", "")
allowed_origins = [o.strip() for o in allowed_origins_env.split(",") if o.strip()]

# allow_credentials=True with "*" is forbidden → listed origins and/or regex only.
allow_origin_regex = r"^https:\/\/.*\.vercel\.app$" if os.getenv("ALLOW_VERCEL_PREVIEWS", "false").lower() == "true" else None

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins if allowed_origins else [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ],
    allow_origin_regex=allow_origin_regex,          # optional, for *.vercel.app
    allow_credentials=False,                        # keeps preflight simple
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    max_age=86400,
)

# ------- Routes -------
app.include_router(health_router)
app.include_router(chat_router, prefix=settings.api_prefix)       # chat
app.include_router(products_router, prefix=settings.api_prefix)   # recommendations + advanced search
app.include_router(catalog_router, prefix=settings.api_prefix)    # catalog cache admin
app.include_router(shopify_router, prefix=settings.api_prefix)    # shopify connection test
