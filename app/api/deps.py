# app/api/deps.py
from fastapi import Depends, Request
from openai import AsyncOpenAI

from app.core.config import Settings, get_settings
from app.db.redis import get_redis
from app.domain.repositories.catalog_cache_repo import CatalogCache
from app.domain.repositories.conversation_repo import ConversationRepo
from app.domain.repositories.shopify_repo import ShopifyClient

# App-scoped singletons are created in lifespan and live on app.state

def catalog_dep(request: Request) -> CatalogCache:
    return request.app.state.catalog

def shopify_dep(request: Request) -> ShopifyClient:
    return request.app.state.shopify

def openai_dep(request: Request) -> AsyncOpenAI:
    return request.app.state.openai

def redis_dep():
    return get_redis()

def conversation_dep(redis = Depends(redis_dep), settings: Settings = Depends(get_settings)) -> ConversationRepo:
    return ConversationRepo(
        redis,
        prefix=settings.conversation_prefix,
        ttl=settings.conversation_ttl,
        max_messages=settings.conversation_max_messages,
    )
