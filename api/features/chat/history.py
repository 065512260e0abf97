"""History assembly for prompt construction."""
from __future__ import annotations

from typing import List, Sequence

from api.features.chat.models import Message
from api.features.chat.repository import ConversationStore


class HistoryAssembler:
    """Loads a conversation's messages and cuts them down to a prompt window."""

    def __init__(self, store: ConversationStore):
        self.store = store

    async def load(self, conversation_id: str) -> List[Message]:
        """All messages, oldest first. Store errors propagate to the caller."""
        return await self.store.list_messages(conversation_id)

    @staticmethod
    def bound(history: Sequence[Message], n: int) -> List[Message]:
        """Last `n` entries in their original order."""
        if n <= 0:
            return []
        return list(history[-n:])
