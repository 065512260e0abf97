from types import SimpleNamespace

import httpx
import openai

from infra.llm import (
    CompletionFailure,
    CompletionFailureKind,
    CompletionText,
    OpenAICompletionClient,
    classify_error,
)

REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def _rate_limit(body):
    return openai.RateLimitError(
        "Too many requests", response=httpx.Response(429, request=REQUEST), body=body
    )


def test_classify_quota_exhaustion():
    failure = classify_error(_rate_limit({"code": "insufficient_quota"}))
    assert failure.kind == CompletionFailureKind.QUOTA_EXCEEDED


def test_classify_plain_rate_limit():
    failure = classify_error(_rate_limit({"code": "rate_limit_exceeded"}))
    assert failure.kind == CompletionFailureKind.RATE_LIMITED


def test_classify_timeout():
    assert classify_error(openai.APITimeoutError(request=REQUEST)).kind == CompletionFailureKind.TIMEOUT


def test_classify_anything_else():
    failure = classify_error(ValueError("bad payload"))
    assert failure.kind == CompletionFailureKind.UNCLASSIFIED
    assert failure.detail == "bad payload"


class _FakeOpenAIResource:
    def __init__(self, create):
        self.client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))

    def get_client(self):
        return self.client


def _response(content):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        usage=SimpleNamespace(total_tokens=42),
    )


async def test_complete_returns_text():
    seen = {}

    async def create(**kwargs):
        seen.update(kwargs)
        return _response("We ship worldwide.")

    client = OpenAICompletionClient(_FakeOpenAIResource(create), model="gpt-4o-mini")
    result = await client.complete([{"role": "user", "content": "hi"}], max_tokens=500, temperature=0.7)

    assert result == CompletionText("We ship worldwide.")
    assert seen["model"] == "gpt-4o-mini"
    assert seen["max_tokens"] == 500
    assert seen["temperature"] == 0.7


async def test_complete_blank_content_is_empty_completion():
    async def create(**kwargs):
        return _response(None)

    client = OpenAICompletionClient(_FakeOpenAIResource(create), model="gpt-4o-mini")
    result = await client.complete([], max_tokens=10, temperature=0.0)

    assert isinstance(result, CompletionFailure)
    assert result.kind == CompletionFailureKind.EMPTY_COMPLETION


async def test_complete_never_raises():
    async def create(**kwargs):
        raise openai.APITimeoutError(request=REQUEST)

    client = OpenAICompletionClient(_FakeOpenAIResource(create), model="gpt-4o-mini")
    result = await client.complete([], max_tokens=10, temperature=0.0)

    assert result.kind == CompletionFailureKind.TIMEOUT


async def test_complete_malformed_response_is_unclassified():
    async def create(**kwargs):
        return SimpleNamespace(choices=[SimpleNamespace(message=None)], usage=None)

    client = OpenAICompletionClient(_FakeOpenAIResource(create), model="gpt-4o-mini")
    result = await client.complete([], max_tokens=10, temperature=0.0)

    assert isinstance(result, CompletionFailure)
    assert result.kind == CompletionFailureKind.UNCLASSIFIED
