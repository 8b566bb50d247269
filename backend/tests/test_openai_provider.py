import asyncio
import json

import httpx
import pytest

from knowledge_hub.clients import OpenAIProvider, ProviderHTTPError


def make_provider(handler, default_headers=None):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return OpenAIProvider(
        api_key="test-key",
        base_url="https://llm.test/api/v1",
        default_model="meta-llama/llama-3.2-3b-instruct:free",
        default_headers=default_headers,
        http_client=http_client
    )


def completion_body(content="Hello!", model="meta-llama/llama-3.2-3b-instruct:free"):
    return {
        "id": "chatcmpl-1",
        "object": "chat.completion",
        "created": 1700000000,
        "model": model,
        "choices": [{
            "index": 0,
            "message": {"role": "assistant", "content": content},
            "finish_reason": "stop",
        }],
        "usage": {"prompt_tokens": 10, "completion_tokens": 3, "total_tokens": 13},
    }


def test_chat_completion_request_and_response():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["headers"] = request.headers
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=completion_body())

    provider = make_provider(handler, default_headers={"HTTP-Referer": "http://localhost:3000", "X-Title": "AI Knowledge Hub"})
    messages = [{"role": "user", "content": "Hi"}]

    result = asyncio.run(provider.chat_completion(messages, temperature=0.7, max_tokens=1000))

    assert result.content == "Hello!"
    assert result.usage["total_tokens"] == 13
    assert result.model == "meta-llama/llama-3.2-3b-instruct:free"
    assert seen["url"] == "https://llm.test/api/v1/chat/completions"
    assert seen["headers"]["authorization"] == "Bearer test-key"
    assert seen["headers"]["http-referer"] == "http://localhost:3000"
    assert seen["headers"]["x-title"] == "AI Knowledge Hub"
    assert seen["body"]["model"] == "meta-llama/llama-3.2-3b-instruct:free"
    assert seen["body"]["messages"] == messages
    assert seen["body"]["max_tokens"] == 1000


def test_rate_limit_is_not_retried_by_the_sdk():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(429, headers={"Retry-After": "2"}, json={"error": {"message": "slow down"}})

    provider = make_provider(handler)

    with pytest.raises(ProviderHTTPError) as exc_info:
        asyncio.run(provider.chat_completion([{"role": "user", "content": "Hi"}]))

    assert exc_info.value.status_code == 429
    assert exc_info.value.retry_after == "2"
    assert "slow down" in exc_info.value.body
    assert len(calls) == 1


def test_server_error_is_reported():
    def handler(request):
        return httpx.Response(502, text="bad gateway")

    provider = make_provider(handler)

    with pytest.raises(ProviderHTTPError) as exc_info:
        asyncio.run(provider.chat_completion([{"role": "user", "content": "Hi"}]))

    assert exc_info.value.status_code == 502
    assert exc_info.value.retry_after is None


def test_missing_choices_yield_no_content():
    def handler(request):
        body = completion_body()
        body["choices"] = []
        return httpx.Response(200, json=body)

    provider = make_provider(handler)
    result = asyncio.run(provider.chat_completion([{"role": "user", "content": "Hi"}]))

    assert result.content is None
