"""OpenAI-compatible chat-completion client (Cerebras, Groq, ...).

One client instance is bound to one provider/key/model combination; the
rotation logic lives in the services layer.
"""

from __future__ import annotations

import logging

import httpx

from models.domain import Combination, ProviderResult
from utils.text import strip_thinking

logger = logging.getLogger(__name__)


class ProviderClientError(Exception):
    """Raised when a provider call fails."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class LLMClientError(ProviderClientError):
    """Raised when the LLM API call fails."""


class TruncatedOutputError(LLMClientError):
    """The response ended inside a chain-of-thought block."""


class LLMClient:
    """Calls ``{endpoint}chat/completions`` for a single combination."""

    def __init__(
        self,
        combination: Combination,
        *,
        timeout: float = 60,
        max_tokens: int = 500,
        temperature: float = 0.3,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.combination = combination
        self._url = combination.endpoint.rstrip("/") + "/chat/completions"
        self._timeout = timeout
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._transport = transport

    @property
    def label(self) -> str:
        return self.combination.label

    async def complete(self, system_prompt: str, user_message: str) -> ProviderResult:
        """Send one chat request and return the cleaned answer."""
        payload = {
            "model": self.combination.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_message},
            ],
            "max_tokens": self._max_tokens,
            "temperature": self._temperature,
        }
        headers = {}
        if self.combination.api_key and self.combination.api_key.strip():
            headers["Authorization"] = f"Bearer {self.combination.api_key.strip()}"

        logger.debug("Calling %s", self.label)
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            resp = await client.post(self._url, json=payload, headers=headers)

        if resp.status_code != 200:
            raise LLMClientError(
                f"{self.combination.provider_name} returned {resp.status_code}: {resp.text[:500]}",
                status_code=resp.status_code,
            )

        try:
            raw = resp.json()["choices"][0]["message"]["content"] or ""
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise LLMClientError(f"Malformed response from {self.label}: {exc}") from exc

        if not raw.strip():
            raise LLMClientError(f"Empty response from {self.label}")

        text = strip_thinking(raw)
        if not text:
            raise TruncatedOutputError(
                f"Response from {self.label} truncated inside <think> block (increase max_tokens)"
            )

        return ProviderResult.ok(
            text, provider=self.combination.provider_name, model=self.combination.model
        )
