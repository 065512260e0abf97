"""Remote text-completion boundary.

`complete()` never raises: OpenAI SDK failures are classified into a closed
set of `CompletionFailureKind` variants so callers can switch on them
instead of inspecting error codes and class names.
"""
from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, Sequence, TypedDict, Union

import openai
import structlog

from infra.resources import OpenAIResource

logger = structlog.get_logger("support_chat.llm")


class ChatMessage(TypedDict):
    role: str
    content: str


class CompletionFailureKind(str, Enum):
    QUOTA_EXCEEDED = "quota_exceeded"
    RATE_LIMITED = "rate_limited"
    TIMEOUT = "timeout"
    EMPTY_COMPLETION = "empty_completion"
    UNCLASSIFIED = "unclassified"


@dataclass(frozen=True)
class CompletionText:
    text: str


@dataclass(frozen=True)
class CompletionFailure:
    kind: CompletionFailureKind
    detail: str = ""


CompletionResult = Union[CompletionText, CompletionFailure]


class CompletionClient(Protocol):
    async def complete(
        self,
        messages: Sequence[ChatMessage],
        max_tokens: int,
        temperature: float,
    ) -> CompletionResult: ...


def classify_error(exc: BaseException) -> CompletionFailure:
    """Map an SDK exception onto a failure variant."""
    if isinstance(exc, openai.APITimeoutError):
        return CompletionFailure(CompletionFailureKind.TIMEOUT, str(exc))
    if isinstance(exc, openai.RateLimitError):
        if getattr(exc, "code", None) == "insufficient_quota":
            return CompletionFailure(CompletionFailureKind.QUOTA_EXCEEDED, str(exc))
        return CompletionFailure(CompletionFailureKind.RATE_LIMITED, str(exc))
    return CompletionFailure(CompletionFailureKind.UNCLASSIFIED, str(exc) or type(exc).__name__)


class OpenAICompletionClient:
    """Chat-completions call against the configured OpenAI model."""

    def __init__(self, openai_resource: OpenAIResource, model: str):
        self.openai_resource = openai_resource
        self.model = model

    async def complete(
        self,
        messages: Sequence[ChatMessage],
        max_tokens: int,
        temperature: float,
    ) -> CompletionResult:
        start = time.time()
        try:
            resp = await self.openai_resource.get_client().chat.completions.create(
                model=self.model,
                messages=list(messages),
                max_tokens=max_tokens,
                temperature=temperature,
            )
            content = resp.choices[0].message.content if resp.choices else None
            total_tokens = getattr(resp.usage, "total_tokens", None)
        except Exception as e:
            failure = classify_error(e)
            logger.error(
                "completion_failed",
                model=self.model,
                kind=failure.kind.value,
                error=str(e),
                latency_ms=int((time.time() - start) * 1000),
            )
            return failure

        logger.info(
            "completion_ok",
            model=self.model,
            latency_ms=int((time.time() - start) * 1000),
            total_tokens=total_tokens,
        )
        if not content or not content.strip():
            return CompletionFailure(CompletionFailureKind.EMPTY_COMPLETION, "empty content")
        return CompletionText(content)
