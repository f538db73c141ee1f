"""Test doubles shared across the suite."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from models.domain import ContentKind, ProviderResult

T0 = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, start: datetime = T0) -> None:
        self.current = start

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current


@dataclass
class Notification:
    issue_id: int
    content: str
    provider: str
    language: str
    event: str = "summary"


@dataclass
class RecordingNotifier:
    sent: list[Notification] = field(default_factory=list)

    async def notify(
        self, issue_id: int, content: str, provider: str, language: str, event: str = "summary"
    ) -> None:
        self.sent.append(Notification(issue_id, content, provider, language, event))


class ScriptedTranslator:
    """Translator double returning a fixed outcome and counting calls."""

    def __init__(self, name: str, key_index: int = 0, text: str | None = None, error: Exception | None = None):
        self.name = name
        self._key_index = key_index
        self._text = text
        self._error = error
        self.calls = 0

    @property
    def label(self) -> str:
        return f"{self.name}[{self._key_index}]"

    async def translate(self, text: str, target: str, source: str | None = None) -> ProviderResult:
        self.calls += 1
        if self._error is not None:
            raise self._error
        if self._text is None:
            return ProviderResult.fail(f"{self.label} unavailable", provider=self.name)
        return ProviderResult.ok(self._text, provider=self.name)


class ScriptedSummarizer:
    def __init__(self, result: ProviderResult) -> None:
        self._result = result
        self.calls: list[tuple[str, ContentKind]] = []

    async def summarize(self, body: str, kind: ContentKind = ContentKind.LIST_SUMMARY) -> ProviderResult:
        self.calls.append((body, kind))
        return self._result

