from functools import lru_cache
from typing import Literal, Optional
import os
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["development", "production"]

def _env_file_for(app_env: EnvName) -> str:
    return ".env.development" if app_env == "development" else ".env.production"

class Settings(BaseSettings):

    # Core
    APP_ENV: EnvName = "development"
    APP_NAME: str = "ScentChat"
    DEBUG: bool = False
    GIT_SHA: str = "unknown"

    # Redis (optional, conversation history)
    REDIS_URL: Optional[str] = None
    conversation_ttl: int = 24 * 3600          # 24h
    conversation_prefix: str = "conv"          # redis key namespace
    conversation_max_messages: int = 20        # history kept per conversation

    # OpenAI
    OPENAI_API_KEY: str = ""
    OPENAI_CHAT_MODEL: str = "gpt-4-turbo"
    openai_timeout_s: int = 30  # seconds
    chat_max_tokens: int = 500
    chat_temperature: float = 0.7

    # Shopify
    SHOPIFY_DOMAIN: str = ""                   # e.g. my-store.myshopify.com
    SHOPIFY_ACCESS_TOKEN: str = ""
    SHOPIFY_STOREFRONT_DOMAIN: Optional[str] = None  # public domain for product urls
    shopify_api_version: str = "2023-10"
    shopify_page_limit: int = 250
    shopify_max_pages: int = 10
    shopify_timeout_s: int = 20

    # Catalog cache
    catalog_cache_ttl: int = 24 * 3600         # 24 hours

    # Recommendations
    default_max_results: int = 3

    # API
    api_prefix: str = "/api"

    # pydantic-settings config will be set dynamically in the factory below
    model_config = SettingsConfigDict(env_file=None, case_sensitive=True, extra="ignore")

@lru_cache
def get_settings() -> Settings:
    """
    Factory that chooses the right .env file based on APP_ENV.
    Cache makes it cheap to inject via FastAPI dependencies.
    """
    app_env: EnvName = os.getenv("APP_ENV", "development")  # earliest switch
    env_file = _env_file_for(app_env)
    return Settings(
                _env_file=env_file,  # load .env.development or .env.production
                _env_file_encoding="utf-8"
    )
