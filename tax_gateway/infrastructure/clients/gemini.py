"""Gemini HTTP client for the tax assistant chat"""

import httpx
from typing import Any, Dict, List
from tax_gateway.domain.chat import ChatTurn
from tax_gateway.domain.exceptions import ChatServiceError, ChatNotConfiguredError
from tax_gateway.config import settings
from tax_gateway.infrastructure.observability.metrics import llm_latency_histogram


class GeminiClient:
    """Client for the Gemini generateContent REST endpoint"""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = settings.gemini_api_key if api_key is None else api_key
        self.model = settings.gemini_model if model is None else model
        self.base_url = base_url or settings.gemini_api_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.max_output_tokens = settings.chat_max_output_tokens
        self.temperature = settings.chat_temperature
        self.transport = transport

    def build_payload(self, history: List[ChatTurn], prompt: str) -> Dict[str, Any]:
        contents = [{"role": turn.role, "parts": [{"text": turn.text}]} for turn in history]
        contents.append({"role": "user", "parts": [{"text": prompt}]})
        return {
            "contents": contents,
            "generationConfig": {
                "maxOutputTokens": self.max_output_tokens,
                "temperature": self.temperature,
            },
            "safetySettings": [
                {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_NONE"},
            ],
        }

    async def send_message(self, history: List[ChatTurn], prompt: str) -> str:
        """
        Send the conversation plus the new prompt and return the model's reply.

        Raises:
            ChatNotConfiguredError: No model or API key configured
            ChatServiceError: On timeout, HTTP errors, or a reply without text
        """
        if not self.model:
            raise ChatNotConfiguredError("No Gemini model configured")
        if not self.api_key:
            raise ChatNotConfiguredError("No Gemini API key configured")

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                with llm_latency_histogram.time():
                    response = await client.post(
                        f"{self.base_url}/models/{self.model}:generateContent",
                        headers={"x-goog-api-key": self.api_key},
                        json=self.build_payload(history, prompt),
                    )
                response.raise_for_status()
                data = response.json()

                parts = data["candidates"][0]["content"]["parts"]
                text = "".join(part.get("text", "") for part in parts)

            except httpx.TimeoutException as e:
                raise ChatServiceError(f"Gemini API timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise ChatServiceError(f"Gemini API error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise ChatServiceError(f"Gemini API unreachable: {e}") from e
            except (KeyError, IndexError, ValueError, TypeError) as e:
                raise ChatServiceError(f"Invalid response from Gemini: {e}") from e

        if not text:
            raise ChatServiceError("Gemini returned an empty response")
        return text
