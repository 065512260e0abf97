"""Validators for inbound chat messages."""
import logging
from typing import Any, Optional

from api.features.chat.exceptions import ChatValidationError

logger = logging.getLogger(__name__)


class ChatMessageValidator:
    """Rejects bad input before any store or generator access."""

    def __init__(self, max_length: int = 2000):
        self.max_length = max_length

    def validate(self, message: Any, session_id: Optional[Any] = None) -> str:
        """Return the trimmed message or raise ChatValidationError."""
        if session_id is not None and not isinstance(session_id, str):
            raise ChatValidationError(
                "Invalid session ID format",
                reply="Invalid session ID format.",
            )

        if not message:
            raise ChatValidationError(
                "Message is required",
                reply="Please provide a message to send.",
                session_id=session_id,
            )

        if not isinstance(message, str):
            raise ChatValidationError(
                "Message must be a string",
                reply="Invalid message format.",
                session_id=session_id,
            )

        trimmed = message.strip()
        if not trimmed:
            raise ChatValidationError(
                "Valid message is required",
                reply="Please provide a message to send.",
                session_id=session_id,
            )

        if len(message) > self.max_length:
            logger.warning(f"Rejected message of {len(message)} characters")
            raise ChatValidationError(
                "Message too long",
                reply=f"Please keep your message under {self.max_length} characters.",
                session_id=session_id,
            )

        return trimmed
