"""Controller for the Chat feature."""
import logging

from fastapi.responses import JSONResponse

from api.features.chat.dtos import ChatRequest, ChatResponse, HistoryResponse, MessageDTO
from api.features.chat.exceptions import ChatValidationError, ConversationStoreError
from api.features.chat.history import HistoryAssembler
from api.features.chat.service import SessionCoordinator

logger = logging.getLogger("support_chat.chat")

TECHNICAL_DIFFICULTY_REPLY = (
    "I apologize, but I'm experiencing technical difficulties. Please try again."
)


class ChatController:
    """Translates chat outcomes and feature errors into HTTP responses."""

    def __init__(
        self,
        session_coordinator: SessionCoordinator,
        history_assembler: HistoryAssembler,
    ):
        self.session_coordinator = session_coordinator
        self.history_assembler = history_assembler

    async def send_message(self, request: ChatRequest) -> JSONResponse:
        try:
            outcome = await self.session_coordinator.handle(request.message, request.session_id)
        except ChatValidationError as e:
            logger.info(f"Chat message rejected: {e.message}")
            return JSONResponse(
                status_code=400,
                content={"error": e.message, "reply": e.reply, "sessionId": e.session_id},
            )
        except Exception:
            logger.exception("Unexpected error while handling chat message")
            session_id = request.session_id if isinstance(request.session_id, str) else None
            return JSONResponse(
                status_code=500,
                content={
                    "error": "Internal server error",
                    "reply": TECHNICAL_DIFFICULTY_REPLY,
                    "sessionId": session_id,
                },
            )

        response = ChatResponse(
            reply=outcome.reply, session_id=outcome.session_id, error=outcome.error
        )
        return JSONResponse(content=response.model_dump(by_alias=True, exclude_none=True))

    async def get_history(self, session_id: str) -> JSONResponse:
        try:
            messages = await self.history_assembler.load(session_id)
        except ConversationStoreError as e:
            logger.error(f"Error fetching conversation history: {e.message}")
            return JSONResponse(
                status_code=500, content={"error": "Failed to fetch conversation history"}
            )

        response = HistoryResponse(
            session_id=session_id,
            messages=[
                MessageDTO(
                    id=m.id,
                    conversation_id=m.conversation_id,
                    sender=m.sender.value,
                    text=m.text,
                    timestamp=m.timestamp,
                )
                for m in messages
            ],
        )
        return JSONResponse(content=response.model_dump(mode="json", by_alias=True))
