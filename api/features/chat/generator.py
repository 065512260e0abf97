"""Reply generation on top of the remote completion client.

`ReplyGenerator.generate` always returns a `GeneratedReply`; remote failures
become fixed, user-facing fallback texts with a short error label.
"""
from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

import structlog

from api.features.chat.models import GeneratedReply, Message, Sender
from api.features.chat.prompts import build_system_prompt
from infra.llm import (
    ChatMessage,
    CompletionClient,
    CompletionFailure,
    CompletionFailureKind,
    CompletionText,
    classify_error,
)

logger = structlog.get_logger("support_chat.chat.generator")

TRUNCATION_MARKER = "... (message truncated)"

EMPTY_MESSAGE_REPLY = "I didn't receive your message. Could you please try again?"


def build_fallbacks(support_email: str) -> Dict[CompletionFailureKind, Tuple[str, str]]:
    """User-facing text and error label for every failure kind."""
    return {
        CompletionFailureKind.QUOTA_EXCEEDED: (
            "I'm temporarily unavailable due to high demand. Please try again in a few "
            f"minutes or contact our support team at {support_email}.",
            "API quota exceeded",
        ),
        CompletionFailureKind.RATE_LIMITED: (
            "I'm receiving a lot of messages right now. Please wait a moment and try again.",
            "Rate limit exceeded",
        ),
        CompletionFailureKind.TIMEOUT: (
            "I'm taking longer than usual to respond. Please try again or contact our "
            "support team.",
            "API timeout",
        ),
        CompletionFailureKind.EMPTY_COMPLETION: (
            "I apologize, but I'm having trouble generating a response right now. Please "
            "try again or contact our support team.",
            "No response from LLM",
        ),
        CompletionFailureKind.UNCLASSIFIED: (
            "I apologize, but I'm experiencing technical difficulties. Please try again or "
            f"contact our support team at {support_email} for immediate assistance.",
            "Unknown LLM error",
        ),
    }


def truncate_user_text(user_text: str, max_chars: int) -> str:
    if len(user_text) <= max_chars:
        return user_text
    return user_text[:max_chars] + TRUNCATION_MARKER


class ReplyGenerator:
    """Builds the prompt for one turn and maps the completion to a reply."""

    def __init__(
        self,
        completion_client: CompletionClient,
        *,
        max_tokens: int = 500,
        temperature: float = 0.7,
        max_prompt_chars: int = 1000,
        support_email: str = "support@techstore.com",
    ):
        self.completion_client = completion_client
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.max_prompt_chars = max_prompt_chars
        self.system_prompt = build_system_prompt(support_email)
        self.fallbacks = build_fallbacks(support_email)

    def build_messages(self, bounded_history: Sequence[Message], user_text: str) -> List[ChatMessage]:
        messages: List[ChatMessage] = [{"role": "system", "content": self.system_prompt}]
        for msg in bounded_history:
            role = "user" if msg.sender == Sender.USER else "assistant"
            messages.append({"role": role, "content": msg.text})
        messages.append(
            {"role": "user", "content": truncate_user_text(user_text, self.max_prompt_chars)}
        )
        return messages

    async def generate(self, bounded_history: Sequence[Message], user_text: str) -> GeneratedReply:
        if not user_text.strip():
            return GeneratedReply(content=EMPTY_MESSAGE_REPLY, error="Empty message")

        try:
            result = await self.completion_client.complete(
                self.build_messages(bounded_history, user_text),
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except Exception as e:
            result = classify_error(e)

        if isinstance(result, CompletionText) and result.text.strip():
            return GeneratedReply(content=result.text.strip())

        failure = (
            result
            if isinstance(result, CompletionFailure)
            else CompletionFailure(CompletionFailureKind.EMPTY_COMPLETION)
        )
        content, label = self.fallbacks[failure.kind]
        logger.warning("reply_fallback", kind=failure.kind.value, detail=failure.detail)
        return GeneratedReply(content=content, error=label)
