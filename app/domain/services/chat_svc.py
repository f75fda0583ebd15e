# app/domain/services/chat_svc.py

from __future__ import annotations
from typing import Any, List, Optional, Sequence
from time import monotonic as _now
import json
import logging
import uuid

from openai import AsyncOpenAI
from pydantic import ValidationError

from app.core.config import Settings
from app.domain.models.chat import ChatMessage, ChatResponse, RecommendArgs
from app.domain.models.product import Product, ProductSummary
from app.domain.repositories.catalog_cache_repo import CatalogCache
from app.domain.repositories.conversation_repo import ConversationRepo
from app.domain.services.constants import DEFAULT_REPLY, TOOL_RECOMMEND_PRODUCTS
from app.domain.services.prompts import RECOMMEND_PRODUCTS_TOOL, system_prompt
from app.domain.services.recommendation_svc import get_recommendations

logger = logging.getLogger(__name__)


def new_conversation_id() -> str:
    return uuid.uuid4().hex


def build_messages(products: Sequence[Product], history: Sequence[ChatMessage], message: str) -> List[dict]:
    return [
        {"role": "system", "content": system_prompt(products)},
        *[m.model_dump() for m in history],
        {"role": "user", "content": message},
    ]


async def _call_llm(client: AsyncOpenAI, messages: List[dict], settings: Settings) -> Any:
    """Chat completion with the recommend_products tool; returns the first choice's message."""
    t0 = _now()
    resp = await client.chat.completions.create(
        model=settings.OPENAI_CHAT_MODEL,
        messages=messages,
        max_tokens=settings.chat_max_tokens,
        temperature=settings.chat_temperature,
        timeout=settings.openai_timeout_s,
        tools=[RECOMMEND_PRODUCTS_TOOL],
        tool_choice="auto",
    )
    dt = _now() - t0
    # Best-effort usage logging
    u = getattr(resp, "usage", None)
    logger.info(
        f"LLM call model={getattr(resp, 'model', settings.OPENAI_CHAT_MODEL)} duration={dt:.3f}s "
        f"tokens(prompt={getattr(u, 'prompt_tokens', None)}, completion={getattr(u, 'completion_tokens', None)})"
    )
    return resp.choices[0].message


def parse_recommend_args(message: Any) -> Optional[RecommendArgs]:
    """
    Arguments of the first `recommend_products` tool call, or None.
    Malformed arguments are logged and ignored so the text reply still goes out.
    """
    for call in getattr(message, "tool_calls", None) or []:
        fn = getattr(call, "function", None)
        if fn is None or fn.name != TOOL_RECOMMEND_PRODUCTS:
            continue
        try:
            return RecommendArgs.model_validate(json.loads(fn.arguments or "{}"))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Ignoring malformed {TOOL_RECOMMEND_PRODUCTS} arguments {fn.arguments!r}: {e}")
            return None
    return None


async def chat_turn(
    *,
    message: str,
    history: Sequence[ChatMessage],
    conversation_id: Optional[str],
    client: AsyncOpenAI,
    catalog: CatalogCache,
    conversations: ConversationRepo,
    settings: Settings,
) -> ChatResponse:
    """
    One chat turn:
      1) Load the catalog snapshot (empty on upstream failure).
      2) Resolve context: client history wins, else stored history for the conversation.
      3) Ask the model; it may call recommend_products.
      4) Run the recommender on tool call, store the turn, reply.
    LLM errors propagate to the router.
    """
    is_new = conversation_id is None
    conversation_id = conversation_id or new_conversation_id()
    products = await catalog.get()

    context = list(history)
    if not context and not is_new:
        context = await conversations.get(conversation_id)
    logger.debug(f"Chat turn conversation_id={conversation_id} history={len(context)} catalog={len(products)}")

    reply = await _call_llm(client, build_messages(products, context, message), settings)

    recommendations: List[ProductSummary] = []
    if args := parse_recommend_args(reply):
        logger.info(
            f"Tool call {TOOL_RECOMMEND_PRODUCTS} query={args.query!r} "
            f"preferences={args.preferences} max_results={args.max_results}"
        )
        recommendations = get_recommendations(products, args.query, args.preferences, args.max_results)

    text = reply.content or DEFAULT_REPLY
    await conversations.append(
        conversation_id,
        [ChatMessage(role="user", content=message), ChatMessage(role="assistant", content=text)],
        base=context,
    )
    return ChatResponse(message=text, products=recommendations, conversation_id=conversation_id)
