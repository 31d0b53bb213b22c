"""Unit tests for the Gemini client"""

import json
import httpx
import pytest
from tax_gateway.domain.chat import build_chat_history
from tax_gateway.domain.exceptions import ChatNotConfiguredError, ChatServiceError
from tax_gateway.infrastructure.clients.gemini import GeminiClient

BASE_URL = "https://gemini.test/v1beta"


def gemini_reply(text: str) -> dict:
    return {"candidates": [{"content": {"role": "model", "parts": [{"text": text}]}}]}


def make_client(handler) -> GeminiClient:
    return GeminiClient(
        api_key="test-key",
        model="gemini-2.5-flash",
        base_url=BASE_URL,
        transport=httpx.MockTransport(handler),
    )


async def test_send_message_returns_reply_text():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["api_key"] = request.headers["x-goog-api-key"]
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json=gemini_reply("PAYE is withheld monthly."))

    reply = await make_client(handler).send_message(build_chat_history(None), "What is PAYE?")

    assert reply == "PAYE is withheld monthly."
    assert captured["url"] == f"{BASE_URL}/models/gemini-2.5-flash:generateContent"
    assert captured["api_key"] == "test-key"

    body = captured["body"]
    assert [turn["role"] for turn in body["contents"]] == ["user", "model", "user"]
    assert body["contents"][-1]["parts"][0]["text"] == "What is PAYE?"
    assert body["generationConfig"] == {"maxOutputTokens": 500, "temperature": 0.7}
    assert body["safetySettings"] == [{"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_NONE"}]


async def test_http_error_raises_chat_service_error():
    client = make_client(lambda request: httpx.Response(500, json={"error": "boom"}))
    with pytest.raises(ChatServiceError):
        await client.send_message(build_chat_history(None), "Hi")


async def test_timeout_raises_chat_service_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(ChatServiceError):
        await make_client(handler).send_message(build_chat_history(None), "Hi")


@pytest.mark.parametrize("payload", [{}, {"candidates": []}, gemini_reply("")])
async def test_unusable_reply_raises_chat_service_error(payload):
    client = make_client(lambda request: httpx.Response(200, json=payload))
    with pytest.raises(ChatServiceError):
        await client.send_message(build_chat_history(None), "Hi")


async def test_missing_model_is_not_configured():
    client = GeminiClient(api_key="test-key", model="", base_url=BASE_URL)
    with pytest.raises(ChatNotConfiguredError):
        await client.send_message(build_chat_history(None), "Hi")
