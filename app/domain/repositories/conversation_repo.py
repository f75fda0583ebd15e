# app/domain/repositories/conversation_repo.py
from __future__ import annotations
from typing import Iterable, List, Optional
import logging

from redis.asyncio import Redis

from app.domain.models.chat import ChatMessage
from app.utils.cache import cache_delete, cache_get, cache_set

logger = logging.getLogger(__name__)


class ConversationRepo:
    """
    Adapter for per-conversation chat history in Redis.
    Redis is optional: with no client every call is a no-op and the
    history sent by the client is the only context.
    """
    def __init__(self, redis: Optional[Redis], *, prefix: str = "conv", ttl: int = 24 * 3600, max_messages: int = 20):
        self.redis = redis
        self.prefix = prefix
        self.ttl = ttl
        self.max_messages = max_messages

    @property
    def enabled(self) -> bool:
        return self.redis is not None

    def key(self, conversation_id: str) -> str:
        return f"{self.prefix}:{conversation_id}"

    async def get(self, conversation_id: str) -> List[ChatMessage]:
        if not self.enabled:
            return []
        try:
            data = await cache_get(self.redis, self.key(conversation_id))
            return [ChatMessage.model_validate(m) for m in data or []]
        except Exception as e:
            # unreachable Redis or a corrupt entry: continue without stored context
            logger.warning(f"Conversation history read failed id={conversation_id}: {e}")
            return []

    async def append(self, conversation_id: str, messages: Iterable[ChatMessage], *, base: List[ChatMessage]) -> None:
        """
        Store `base` + `messages`, keeping only the last `max_messages` entries.
        The TTL restarts on every write.
        """
        if not self.enabled:
            return
        history = [*base, *messages][-self.max_messages:]
        try:
            await cache_set(
                self.redis,
                self.key(conversation_id),
                [m.model_dump() for m in history],
                ex=self.ttl,
            )
        except Exception as e:
            logger.warning(f"Conversation history write failed id={conversation_id}: {e}")

    async def clear(self, conversation_id: str) -> bool:
        if not self.enabled:
            return False
        try:
            return bool(await cache_delete(self.redis, self.key(conversation_id)))
        except Exception as e:
            logger.warning(f"Conversation history delete failed id={conversation_id}: {e}")
            return False
