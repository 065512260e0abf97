"""DTOs for the Chat feature."""
from datetime import datetime
from typing import Any, List, Optional

from pydantic import Field

from api.shared.dtos import BaseDTO


class ChatRequest(BaseDTO):
    """Inbound chat message.

    Fields are left untyped so malformed payloads reach the chat validator
    and get the widget-friendly 400 body instead of a schema error.
    """

    message: Any = Field(default=None, description="User message text")
    session_id: Any = Field(default=None, alias="sessionId", description="Client-held session identifier")


class ChatResponse(BaseDTO):
    """Reply for one turn."""

    reply: str = Field(description="Assistant reply or fallback text")
    session_id: str = Field(alias="sessionId", description="Working session identifier")
    error: Optional[str] = Field(default=None, description="Short diagnostic when a fallback was used")


class MessageDTO(BaseDTO):
    """Persisted conversation message."""

    id: str = Field(description="Message identifier")
    conversation_id: str = Field(alias="conversationId", description="Owning conversation")
    sender: str = Field(description="Message sender: user or ai")
    text: str = Field(description="Message text")
    timestamp: datetime = Field(description="Creation time")


class HistoryResponse(BaseDTO):
    """Full history of one session."""

    session_id: str = Field(alias="sessionId", description="Session identifier")
    messages: List[MessageDTO] = Field(description="Messages in chronological order")
