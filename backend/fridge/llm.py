"""
LLM Integration
Text generation for recipe recommendations via the OpenRouter API
"""

import logging
from typing import Optional

import httpx

from config import (
    OPENROUTER_API_KEY,
    OPENROUTER_BASE_URL,
    LLM_MODEL,
    LLM_TEMPERATURE,
    LLM_MAX_TOKENS,
    LLM_TIMEOUT,
    PLACEHOLDER_API_KEYS
)
from fridge.errors import ConfigurationError, RateLimitError, TransportError

logger = logging.getLogger(__name__)


def is_usable_api_key(api_key: Optional[str]) -> bool:
    return bool(api_key) and api_key.strip() not in PLACEHOLDER_API_KEYS


class GenerationClient:
    """Calls the configured chat model once per prompt and returns its text.

    There is no retry: each recommendation workflow issues exactly one call and
    reports the failure instead. A response without content yields None.
    """

    def __init__(
        self,
        api_key: Optional[str] = OPENROUTER_API_KEY,
        model: str = LLM_MODEL,
        base_url: str = OPENROUTER_BASE_URL,
        temperature: float = LLM_TEMPERATURE,
        max_tokens: int = LLM_MAX_TOKENS,
        timeout: float = LLM_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self._transport = transport

    @property
    def configured(self) -> bool:
        return is_usable_api_key(self.api_key)

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": "https://fridgechef.app",
            "X-Title": "FridgeChef"
        }

    async def generate(self, prompt: str) -> Optional[str]:
        if not self.configured:
            raise ConfigurationError()

        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    self.base_url,
                    headers=self._headers(),
                    json=payload
                )
        except httpx.TimeoutException:
            raise TransportError(f"Request timed out after {self.timeout:g} seconds")
        except httpx.RequestError as e:
            raise TransportError(f"Network error: {e}")

        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            hint = f" Please try again in {retry_after} seconds." if retry_after else ""
            raise RateLimitError(f"Rate limited by OpenRouter.{hint}")

        if response.status_code != 200:
            error_detail = response.text
            try:
                error_json = response.json()
                error_detail = error_json.get("error", {}).get("message", error_detail)
            except (ValueError, AttributeError):
                pass
            raise TransportError(f"API error ({response.status_code}): {error_detail}")

        try:
            data = response.json()
        except ValueError:
            raise TransportError("Invalid API response: body is not JSON")

        choices = data.get("choices") if isinstance(data, dict) else None
        if not choices:
            logger.warning("Generation response had no choices")
            return None

        first = choices[0] if isinstance(choices[0], dict) else {}
        content = (first.get("message") or {}).get("content")
        if not isinstance(content, str) or not content.strip():
            logger.warning("Generation response had no text content")
            return None
        return content
