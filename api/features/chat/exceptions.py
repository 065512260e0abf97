"""Exceptions for the Chat feature."""
from typing import Any, Dict, Optional

from api.shared.exceptions import DatabaseError, ValidationError


class ChatValidationError(ValidationError):
    """Raised when an inbound chat message is rejected before any state change.

    `reply` is the user-facing text returned alongside the error label.
    """

    def __init__(
        self,
        message: str,
        reply: str,
        session_id: Optional[Any] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.error_code = "CHAT_VALIDATION_ERROR"
        self.reply = reply
        self.session_id = session_id


class ConversationStoreError(DatabaseError):
    """Raised when the conversation store cannot complete an operation."""

    def __init__(self, operation: str, message: str, details: Optional[Dict[str, Any]] = None):
        error_details = {"operation": operation}
        if details:
            error_details.update(details)
        super().__init__(f"Conversation store {operation} failed: {message}", error_details)
        self.error_code = "CONVERSATION_STORE_ERROR"
        self.operation = operation
