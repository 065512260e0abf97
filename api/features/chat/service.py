"""Session coordination for one chat turn."""
from __future__ import annotations

import uuid
from typing import Any, Optional

import structlog

from api.features.chat.exceptions import ConversationStoreError
from api.features.chat.generator import ReplyGenerator
from api.features.chat.history import HistoryAssembler
from api.features.chat.models import ChatOutcome, Sender
from api.features.chat.repository import ConversationStore
from api.features.chat.validators import ChatMessageValidator

logger = structlog.get_logger("support_chat.chat.service")


class SessionCoordinator:
    """Resolves the conversation for a message and runs the turn.

    Holds no per-conversation state; concurrent turns on one session may
    interleave their writes.
    """

    def __init__(
        self,
        store: ConversationStore,
        history_assembler: HistoryAssembler,
        reply_generator: ReplyGenerator,
        validator: ChatMessageValidator,
        *,
        max_history_messages: int = 10,
        support_email: str = "support@techstore.com",
    ):
        self.store = store
        self.history_assembler = history_assembler
        self.reply_generator = reply_generator
        self.validator = validator
        self.max_history_messages = max_history_messages
        self.apology = (
            "I apologize, but I'm experiencing technical difficulties. Please try again "
            f"or contact our support team at {support_email}."
        )

    async def resolve_conversation(self, client_session_id: Optional[str]) -> str:
        if not client_session_id:
            return await self.store.create_conversation()
        if not await self.store.conversation_exists(client_session_id):
            # Unknown ids are adopted verbatim rather than rejected
            await self.store.create_conversation(client_session_id)
        return client_session_id

    async def handle(self, user_text: Any, client_session_id: Optional[Any] = None) -> ChatOutcome:
        """Run one turn. Raises ChatValidationError before touching the store."""
        text = self.validator.validate(user_text, client_session_id)

        working_id: Optional[str] = None
        try:
            working_id = await self.resolve_conversation(client_session_id)
            history = await self.history_assembler.load(working_id)
            await self.store.append_message(working_id, Sender.USER, text)

            generated = await self.reply_generator.generate(
                self.history_assembler.bound(history, self.max_history_messages), text
            )
            if generated.error:
                logger.warning("llm_error", conversation_id=working_id, error=generated.error)

            await self.store.append_message(working_id, Sender.AI, generated.content)
            await self.store.touch_conversation(working_id)
        except ConversationStoreError as e:
            logger.error(
                "chat_turn_failed",
                conversation_id=working_id,
                operation=e.operation,
                error=e.message,
            )
            return ChatOutcome(
                reply=self.apology,
                session_id=working_id or client_session_id or str(uuid.uuid4()),
                error=f"Conversation store unavailable ({e.operation})",
            )
        except Exception as e:
            logger.exception("chat_turn_crashed", conversation_id=working_id, error=str(e))
            return ChatOutcome(
                reply=self.apology,
                session_id=working_id or client_session_id or str(uuid.uuid4()),
                error="Unknown chat service error",
            )

        logger.info("chat_turn_completed", conversation_id=working_id, history_size=len(history))
        return ChatOutcome(reply=generated.content, session_id=working_id, error=generated.error)
