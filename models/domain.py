"""Domain types shared by the provider, cache and orchestration layers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum, IntEnum


class LanguageCode(IntEnum):
    """Language ids stored in the cache (Windows LCID values)."""

    CS_CZ = 1029
    DE_DE = 1031
    EN_US = 1033

    @classmethod
    def from_tag(cls, tag: str) -> LanguageCode:
        try:
            return _TAG_TO_CODE[tag.lower()[:2]]
        except KeyError:
            raise ValueError(f"Unsupported language tag: {tag!r}") from None

    @property
    def tag(self) -> str:
        return _CODE_TO_TAG[self]


_TAG_TO_CODE = {
    "cs": LanguageCode.CS_CZ,
    "de": LanguageCode.DE_DE,
    "en": LanguageCode.EN_US,
}
_CODE_TO_TAG = {code: tag for tag, code in _TAG_TO_CODE.items()}


class ContentKind(IntEnum):
    """Category of a cached artifact."""

    TITLE = 1
    LIST_SUMMARY = 2
    DETAIL_SUMMARY = 3


class LanguageMode(str, Enum):
    SOURCE_ONLY = "source"
    TARGET_ONLY = "target"
    BOTH = "both"

    @classmethod
    def parse(cls, value: str, source_tag: str = "en", target_tag: str = "cs") -> LanguageMode:
        """Accept ``both``, ``source``/``target`` or the language tags themselves."""
        normalized = value.strip().lower()
        if normalized == cls.BOTH.value:
            return cls.BOTH
        if normalized in (cls.SOURCE_ONLY.value, source_tag.lower()):
            return cls.SOURCE_ONLY
        if normalized in (cls.TARGET_ONLY.value, target_tag.lower()):
            return cls.TARGET_ONLY
        raise ValueError(f"Unsupported language mode: {value!r}")

    @property
    def notifies_source(self) -> bool:
        return self is not LanguageMode.TARGET_ONLY

    @property
    def wants_target(self) -> bool:
        return self is not LanguageMode.SOURCE_ONLY


@dataclass(frozen=True)
class Combination:
    """One (provider, credential, model) triple eligible for an attempt."""

    provider_name: str
    endpoint: str
    api_key: str
    model: str

    @property
    def label(self) -> str:
        return f"{self.provider_name}/{self.model}"

    def __repr__(self) -> str:
        # Keep credentials out of logs and tracebacks
        return f"Combination({self.label!r})"


@dataclass(frozen=True)
class ProviderResult:
    """Outcome of a single provider call or of a whole rotation."""

    success: bool
    text: str | None = None
    provider: str | None = None
    model: str | None = None
    error: str | None = None

    @classmethod
    def ok(cls, text: str, provider: str, model: str | None = None) -> ProviderResult:
        return cls(success=True, text=text, provider=provider, model=model)

    @classmethod
    def fail(cls, error: str, provider: str | None = None) -> ProviderResult:
        return cls(success=False, error=error, provider=provider)

    @property
    def label(self) -> str:
        if self.provider and self.model:
            return f"{self.provider}/{self.model}"
        return self.provider or "unknown"


@dataclass(frozen=True)
class IssueSnapshot:
    """Read-only view of an issue used for text and freshness comparison."""

    id: int
    title: str
    body: str | None
    updated_at: datetime
    repository_full_name: str = ""
    number: int = 0


@dataclass(frozen=True)
class CachedText:
    issue_id: int
    language_id: int
    kind: int
    content: str
    cached_at: datetime


@dataclass(frozen=True)
class CacheStatistics:
    total: int
    by_language: dict[str, int]
    by_kind: dict[str, int]


class SaveOutcome(str, Enum):
    INSERTED = "inserted"
    ALREADY_EXISTS = "already_exists"
