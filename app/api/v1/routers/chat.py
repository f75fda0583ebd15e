# app/api/v1/routers/chat.py
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
import time
import logging

from app.api.deps import catalog_dep, conversation_dep, openai_dep
from app.core.config import Settings, get_settings
from app.domain.models.chat import ChatRequest
from app.domain.services.chat_svc import chat_turn
from app.domain.services.constants import ERROR_REPLY

logger = logging.getLogger(__name__)

router = APIRouter(tags=["chat"])


@router.post("/chat")
async def chat(
    req: ChatRequest,
    catalog = Depends(catalog_dep),
    client = Depends(openai_dep),
    conversations = Depends(conversation_dep),
    settings: Settings = Depends(get_settings),
):
    """
    Main chat endpoint.
    Pipeline: catalog cache → system prompt + history → OpenAI (tool: recommend_products)
    → optional scoring of the catalog → reply + products + conversationId.
    """
    logger.info(
        "Request: chat conversation_id=%s, history=%s, message_len=%s",
        req.conversation_id, len(req.conversation_history), len(req.message),
    )
    start_time = time.perf_counter()

    try:
        res = await chat_turn(
            message=req.message,
            history=req.conversation_history,
            conversation_id=req.conversation_id,
            client=client,
            catalog=catalog,
            conversations=conversations,
            settings=settings,
        )
    except Exception:
        logger.exception("Chat API error")
        return JSONResponse(status_code=500, content={"message": ERROR_REPLY})

    elapsed_time = time.perf_counter() - start_time
    logger.info(
        "Response: chat conversation_id=%s, products=%s, elapsed_time=%.4fs",
        res.conversation_id, len(res.products), elapsed_time,
    )
    return res.model_dump(by_alias=True)


@router.delete("/chat/{conversation_id}")
async def clear_conversation(conversation_id: str, conversations = Depends(conversation_dep)):
    """Forget the stored history of a conversation (404 when none is stored)."""
    if not await conversations.clear(conversation_id):
        raise HTTPException(status_code=404, detail="Conversation not found")
    return {"conversationId": conversation_id, "cleared": True}
