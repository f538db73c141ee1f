"""AI summarization with provider → key → model rotation."""

from __future__ import annotations

import logging
from collections.abc import Callable

from clients.llm_client import LLMClient
from config import Settings
from models.domain import Combination, ContentKind, ProviderResult
from services.rotation import RotationCursor, RotationPool, build_combinations

logger = logging.getLogger(__name__)

LIST_SUMMARY_PROMPT = (
    "You are a helpful assistant that summarizes GitHub issues concisely. "
    "Provide a 2-3 sentence summary in English that captures the key points. "
    "Start directly with the summary content - do NOT prefix with 'Summary:' or any "
    "similar label. Do NOT use <think> tags."
)

DETAIL_SUMMARY_PROMPT = (
    "You are a senior software engineer reviewing a GitHub issue. Write a detailed "
    "English summary: the problem, the expected behaviour, any proposed solution and "
    "open questions. Use short paragraphs or bullet points. Start directly with the "
    "content - do NOT prefix it with a label. Do NOT use <think> tags."
)

_PROMPTS = {
    ContentKind.LIST_SUMMARY: LIST_SUMMARY_PROMPT,
    ContentKind.DETAIL_SUMMARY: DETAIL_SUMMARY_PROMPT,
}

ClientFactory = Callable[[Combination], LLMClient]


def summary_combinations(settings: Settings) -> list[Combination]:
    return build_combinations(
        [
            ("Cerebras", settings.cerebras_endpoint, settings.cerebras_api_keys, settings.cerebras_models),
            ("Groq", settings.groq_endpoint, settings.groq_api_keys, settings.groq_models),
        ]
    )


class AiSummarizationService:
    """Summarizes issue bodies, rotating across every configured combination."""

    def __init__(
        self,
        combinations: list[Combination],
        client_factory: ClientFactory,
        cursor: RotationCursor | None = None,
    ) -> None:
        self._pool: RotationPool[Combination] = RotationPool(
            combinations, cursor, name="summarization", label=lambda c: c.label
        )
        self._client_factory = client_factory

    @classmethod
    def from_settings(cls, settings: Settings, cursor: RotationCursor | None = None) -> AiSummarizationService:
        def factory(combination: Combination) -> LLMClient:
            return LLMClient(
                combination,
                timeout=settings.llm_timeout,
                max_tokens=settings.summary_max_tokens,
                temperature=settings.summary_temperature,
            )

        return cls(summary_combinations(settings), factory, cursor)

    async def summarize(
        self, body: str, kind: ContentKind = ContentKind.LIST_SUMMARY
    ) -> ProviderResult:
        if not body or not body.strip():
            logger.warning("Empty body provided - cannot generate summary")
            return ProviderResult.fail("Body is empty or whitespace")

        prompt = _PROMPTS.get(kind, LIST_SUMMARY_PROMPT)
        user_message = f"Summarize this GitHub issue:\n\n{body}"

        async def attempt(combination: Combination) -> ProviderResult:
            return await self._client_factory(combination).complete(prompt, user_message)

        return await self._pool.run(attempt)
