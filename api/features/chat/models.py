"""Domain records for conversations and chat turns."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class Sender(str, Enum):
    USER = "user"
    AI = "ai"


@dataclass(frozen=True)
class Message:
    id: str
    conversation_id: str
    sender: Sender
    text: str
    timestamp: datetime


@dataclass(frozen=True)
class GeneratedReply:
    """Reply text plus a short machine-readable label when a fallback was used."""

    content: str
    error: Optional[str] = None


@dataclass(frozen=True)
class ChatOutcome:
    reply: str
    session_id: str
    error: Optional[str] = None
