"""
Tests for the OpenRouter generation client against a mocked transport
"""

import asyncio
import json

import httpx
import pytest

from fridge.errors import ConfigurationError, RateLimitError, TransportError
from fridge.llm import GenerationClient, is_usable_api_key


def client_for(handler, api_key="sk-test"):
    return GenerationClient(
        api_key=api_key,
        model="test/model",
        base_url="https://llm.test/chat/completions",
        transport=httpx.MockTransport(handler)
    )


def completion(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


@pytest.mark.parametrize("key,usable", [
    ("", False),
    (None, False),
    ("YOUR_API_KEY", False),
    ("  your-api-key-here ", False),
    ("sk-or-v1-abc", True),
])
def test_placeholder_keys_are_unconfigured(key, usable):
    assert is_usable_api_key(key) is usable
    assert GenerationClient(api_key=key).configured is usable


def test_generate_sends_prompt_and_returns_content():
    seen = {}

    def handler(request):
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=completion("[]"))

    text = asyncio.run(client_for(handler).generate("What can I cook?"))
    assert text == "[]"
    assert seen["auth"] == "Bearer sk-test"
    assert seen["body"]["model"] == "test/model"
    assert seen["body"]["messages"] == [{"role": "user", "content": "What can I cook?"}]


@pytest.mark.parametrize("payload", [
    {"choices": []},
    completion(""),
    completion(None),
    {"unexpected": True},
])
def test_generate_without_content_returns_none(payload):
    handler = lambda request: httpx.Response(200, json=payload)
    assert asyncio.run(client_for(handler).generate("hi")) is None


def test_generate_makes_exactly_one_call_on_error():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(500, json={"error": {"message": "upstream exploded"}})

    with pytest.raises(TransportError, match="upstream exploded"):
        asyncio.run(client_for(handler).generate("hi"))
    assert len(calls) == 1


def test_generate_rate_limited():
    handler = lambda request: httpx.Response(429, headers={"Retry-After": "7"})
    with pytest.raises(RateLimitError, match="7 seconds"):
        asyncio.run(client_for(handler).generate("hi"))


def test_generate_network_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TransportError, match="Network error"):
        asyncio.run(client_for(handler).generate("hi"))


def test_generate_unconfigured_raises_before_request():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json=completion("x"))

    with pytest.raises(ConfigurationError):
        asyncio.run(client_for(handler, api_key="YOUR_API_KEY").generate("hi"))
    assert calls == []
