import math

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Literal, Optional

from app.domain.models.product import ProductSummary


class ChatMessage(BaseModel):
    # system turns come only from the server-side prompt
    role: Literal["user", "assistant"]
    content: str


class RecommendArgs(BaseModel):
    """Arguments of the `recommend_products` tool call, as emitted by the model."""
    query: str
    preferences: List[str] = Field(default_factory=list)
    max_results: int = 3

    @field_validator("max_results", mode="before")
    @classmethod
    def _truncate_fractional(cls, v):
        # models sometimes emit 2.0 or 2.5 for an integer parameter
        if isinstance(v, float) and math.isfinite(v):
            return int(v)
        return v

    model_config = ConfigDict(extra="ignore")


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1)
    conversation_history: List[ChatMessage] = Field(default_factory=list, alias="conversationHistory")
    conversation_id: Optional[str] = Field(None, alias="conversationId")

    model_config = ConfigDict(populate_by_name=True)


class ChatResponse(BaseModel):
    message: str
    products: List[ProductSummary] = Field(default_factory=list)
    conversation_id: str = Field(..., serialization_alias="conversationId")
