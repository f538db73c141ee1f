"""Dedicated machine-translation clients (Azure, DeepL, Google) and an
LLM-backed translator used as the general-purpose fallback.

Every translator is bound to a single credential and exposes
``translate(text, target, source=None) -> ProviderResult``.
"""

from __future__ import annotations

import logging
from typing import Protocol

import httpx

from clients.llm_client import LLMClient, ProviderClientError
from models.domain import ProviderResult

logger = logging.getLogger(__name__)

_LANGUAGE_NAMES = {"cs": "Czech", "de": "German", "en": "English"}

TRANSLATION_SYSTEM_PROMPT = (
    "You are a professional translator. Translate the user's text into {language}. "
    "Keep Markdown formatting, code, identifiers and URLs unchanged. "
    "Reply with the translation only, without any preamble. Do NOT use <think> tags."
)


class TranslatorError(ProviderClientError):
    """Raised when a translation API call fails."""


class Translator(Protocol):
    name: str

    @property
    def label(self) -> str: ...

    async def translate(
        self, text: str, target: str, source: str | None = None
    ) -> ProviderResult: ...


class _HttpTranslator:
    name = "translator"

    def __init__(
        self,
        *,
        timeout: float = 30,
        key_index: int = 0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = timeout
        self._key_index = key_index
        self._transport = transport

    @property
    def label(self) -> str:
        return f"{self.name}[{self._key_index}]"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._timeout, transport=self._transport)

    def _check(self, resp: httpx.Response) -> None:
        if resp.status_code != 200:
            raise TranslatorError(
                f"{self.label} returned {resp.status_code}: {resp.text[:300]}",
                status_code=resp.status_code,
            )

    def _result(self, text: str | None) -> ProviderResult:
        if not text or not text.strip():
            raise TranslatorError(f"Empty translation from {self.label}")
        return ProviderResult.ok(text.strip(), provider=self.name)


class AzureTranslator(_HttpTranslator):
    name = "Azure"

    def __init__(self, api_key: str, region: str, endpoint: str, **kwargs) -> None:
        super().__init__(**kwargs)
        self._api_key = api_key
        self._region = region
        self._url = endpoint.rstrip("/") + "/translate"

    async def translate(self, text: str, target: str, source: str | None = None) -> ProviderResult:
        params = {"api-version": "3.0", "to": target}
        if source:
            params["from"] = source
        headers = {
            "Ocp-Apim-Subscription-Key": self._api_key,
            "Ocp-Apim-Subscription-Region": self._region,
        }
        async with self._client() as client:
            resp = await client.post(self._url, params=params, headers=headers, json=[{"Text": text}])
        self._check(resp)
        try:
            translated = resp.json()[0]["translations"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise TranslatorError(f"Malformed response from {self.label}: {exc}") from exc
        return self._result(translated)


class DeepLTranslator(_HttpTranslator):
    name = "DeepL"

    def __init__(self, api_key: str, endpoint: str, **kwargs) -> None:
        super().__init__(**kwargs)
        self._api_key = api_key
        self._url = endpoint.rstrip("/") + "/translate"

    @staticmethod
    def _deepl_language(tag: str) -> str:
        # DeepL uses uppercase codes and requires a variant for English targets
        code = tag.upper()
        return "EN-US" if code == "EN" else code

    async def translate(self, text: str, target: str, source: str | None = None) -> ProviderResult:
        data = {"text": text, "target_lang": self._deepl_language(target)}
        if source:
            data["source_lang"] = source.upper()
        headers = {"Authorization": f"DeepL-Auth-Key {self._api_key}"}
        async with self._client() as client:
            resp = await client.post(self._url, data=data, headers=headers)
        self._check(resp)
        try:
            translated = resp.json()["translations"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise TranslatorError(f"Malformed response from {self.label}: {exc}") from exc
        return self._result(translated)


class GoogleFreeTranslator(_HttpTranslator):
    """Unofficial Google Translate endpoint; needs no key."""

    name = "Google"
    URL = "https://translate.googleapis.com/translate_a/single"

    async def translate(self, text: str, target: str, source: str | None = None) -> ProviderResult:
        params = {"client": "gtx", "sl": source or "auto", "tl": target, "dt": "t", "q": text}
        async with self._client() as client:
            resp = await client.get(self.URL, params=params)
        self._check(resp)
        try:
            segments = resp.json()[0]
            translated = "".join(seg[0] for seg in segments if seg and seg[0])
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise TranslatorError(f"Malformed response from {self.label}: {exc}") from exc
        return self._result(translated)


class LLMTranslator:
    """Translation through an OpenAI-compatible chat model."""

    def __init__(self, client: LLMClient) -> None:
        self._client = client
        self.name = client.combination.provider_name

    @property
    def label(self) -> str:
        return self._client.label

    async def translate(self, text: str, target: str, source: str | None = None) -> ProviderResult:
        language = _LANGUAGE_NAMES.get(target, target)
        prompt = TRANSLATION_SYSTEM_PROMPT.format(language=language)
        return await self._client.complete(prompt, text)
