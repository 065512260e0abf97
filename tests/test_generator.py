from datetime import datetime, timezone

import pytest

from api.features.chat.generator import (
    EMPTY_MESSAGE_REPLY,
    TRUNCATION_MARKER,
    ReplyGenerator,
    build_fallbacks,
    truncate_user_text,
)
from api.features.chat.models import Message, Sender
from infra.llm import CompletionFailure, CompletionFailureKind, CompletionText
from tests.fakes import FakeCompletionClient


def _msg(sender, text):
    return Message(
        id=text,
        conversation_id="c1",
        sender=sender,
        text=text,
        timestamp=datetime(2025, 1, 1, tzinfo=timezone.utc),
    )


def test_truncate_user_text():
    assert truncate_user_text("short", 1000) == "short"
    assert truncate_user_text("x" * 1000, 1000) == "x" * 1000
    assert truncate_user_text("x" * 1001, 1000) == "x" * 1000 + TRUNCATION_MARKER


def test_build_messages_puts_system_first_and_maps_roles():
    gen = ReplyGenerator(FakeCompletionClient(), support_email="help@example.com")
    history = [_msg(Sender.USER, "where is my order?"), _msg(Sender.AI, "Let me check.")]

    messages = gen.build_messages(history, "thanks")

    assert messages[0]["role"] == "system"
    assert "help@example.com" in messages[0]["content"]
    assert messages[1:] == [
        {"role": "user", "content": "where is my order?"},
        {"role": "assistant", "content": "Let me check."},
        {"role": "user", "content": "thanks"},
    ]


def test_build_messages_truncates_only_the_new_turn():
    gen = ReplyGenerator(FakeCompletionClient(), max_prompt_chars=10)
    long_history = _msg(Sender.USER, "y" * 50)

    messages = gen.build_messages([long_history], "z" * 20)

    assert messages[1]["content"] == "y" * 50
    assert messages[-1]["content"] == "z" * 10 + TRUNCATION_MARKER


async def test_generate_returns_trimmed_completion():
    llm = FakeCompletionClient(CompletionText("  Free shipping over $50.\n"))
    gen = ReplyGenerator(llm, max_tokens=500, temperature=0.7)

    reply = await gen.generate([], "Do you ship for free?")

    assert reply.content == "Free shipping over $50."
    assert reply.error is None
    assert llm.calls[0]["max_tokens"] == 500
    assert llm.calls[0]["temperature"] == 0.7


async def test_generate_empty_text_skips_remote_call():
    llm = FakeCompletionClient()
    reply = await ReplyGenerator(llm).generate([], "   ")

    assert reply.content == EMPTY_MESSAGE_REPLY
    assert reply.error == "Empty message"
    assert llm.calls == []


@pytest.mark.parametrize(
    "kind,label",
    [
        (CompletionFailureKind.QUOTA_EXCEEDED, "API quota exceeded"),
        (CompletionFailureKind.RATE_LIMITED, "Rate limit exceeded"),
        (CompletionFailureKind.TIMEOUT, "API timeout"),
        (CompletionFailureKind.EMPTY_COMPLETION, "No response from LLM"),
        (CompletionFailureKind.UNCLASSIFIED, "Unknown LLM error"),
    ],
)
async def test_generate_maps_failures_to_fallbacks(kind, label):
    llm = FakeCompletionClient(CompletionFailure(kind, "boom"))
    gen = ReplyGenerator(llm, support_email="help@example.com")

    reply = await gen.generate([], "hello")

    assert reply.error == label
    assert reply.content == build_fallbacks("help@example.com")[kind][0]
    assert reply.content


async def test_generate_blank_completion_text_is_empty_completion():
    llm = FakeCompletionClient(CompletionText("   "))
    reply = await ReplyGenerator(llm).generate([], "hello")
    assert reply.error == "No response from LLM"


def test_fallbacks_cover_every_failure_kind():
    fallbacks = build_fallbacks("help@example.com")
    assert set(fallbacks) == set(CompletionFailureKind)
    assert "help@example.com" in fallbacks[CompletionFailureKind.QUOTA_EXCEEDED][0]
    assert "help@example.com" in fallbacks[CompletionFailureKind.UNCLASSIFIED][0]


class _RaisingClient:
    async def complete(self, messages, max_tokens, temperature):
        raise AttributeError("'NoneType' object has no attribute 'message'")


async def test_generate_contains_client_exceptions():
    gen = ReplyGenerator(_RaisingClient(), support_email="help@example.com")

    reply = await gen.generate([], "hello")

    assert reply.error == "Unknown LLM error"
    assert reply.content == build_fallbacks("help@example.com")[CompletionFailureKind.UNCLASSIFIED][0]
