"""Cascading fallback across heterogeneous translation providers.

A provider-level cursor picks which group starts each call.  The starting
group gets a single attempt with the key chosen by its own cursor; every
group after it in the cascade tries all of its keys before the chain moves
on.  Attempts are strictly sequential.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from clients.translators import Translator
from models.domain import ProviderResult
from services.rotation import RotationCursor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderGroup:
    """All credentials configured for one logical provider."""

    name: str
    translators: tuple[Translator, ...]
    cursor: RotationCursor = field(default_factory=RotationCursor, compare=False)

    def __post_init__(self) -> None:
        if not self.translators:
            raise ValueError(f"Provider group {self.name!r} has no translators")

    def rotation_order(self) -> list[Translator]:
        start = self.cursor.claim(len(self.translators))
        count = len(self.translators)
        return [self.translators[(start + i) % count] for i in range(count)]


class FallbackChain:
    def __init__(
        self,
        groups: Sequence[ProviderGroup],
        cursor: RotationCursor | None = None,
    ) -> None:
        self._groups = tuple(groups)
        self._cursor = cursor or RotationCursor()
        logger.info(
            "Fallback chain: %s",
            " → ".join(f"{g.name}({len(g.translators)})" for g in self._groups) or "<empty>",
        )

    def _attempt_plan(self) -> list[Translator]:
        count = len(self._groups)
        start = self._cursor.claim(count)
        ordered = [self._groups[(start + i) % count] for i in range(count)]

        # Exactly one credential of the starting group is tried
        plan = [ordered[0].rotation_order()[0]]
        for group in ordered[1:]:
            plan.extend(group.rotation_order())
        return plan

    async def translate(
        self, text: str, target: str, source: str | None = None
    ) -> ProviderResult:
        if not text or not text.strip():
            return ProviderResult.fail("Empty text", provider="FallbackChain")
        if not self._groups:
            logger.warning("No translators configured")
            return ProviderResult.fail("No providers configured", provider="FallbackChain")

        attempted: list[str] = []
        for translator in self._attempt_plan():
            label = translator.label
            attempted.append(label)
            try:
                result = await translator.translate(text, target, source)
            except Exception as exc:
                logger.warning("Translator %s raised %s: %s. Trying next...", label, type(exc).__name__, exc)
                continue

            if result.success and result.text and result.text.strip():
                logger.info("Translation succeeded via %s", label)
                return result

            logger.warning("Translator %s failed: %s. Trying next...", label, result.error)

        message = f"All providers failed. Attempted: {', '.join(attempted)}"
        logger.error(message)
        return ProviderResult.fail(message, provider="FallbackChain")
