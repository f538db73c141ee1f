"""Freshness-validated cache for generated issue texts.

An entry is fresh while it was written no earlier than the issue's last
GitHub update.  There is no time-to-live: a stale entry is deleted on read
and reported as a miss.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Protocol

from models.domain import CacheStatistics, ContentKind, SaveOutcome
from repositories.cached_texts import CachedTextRepository, as_utc

logger = logging.getLogger(__name__)


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class CachedTextService:
    def __init__(self, repository: CachedTextRepository, clock: Clock | None = None) -> None:
        self._repository = repository
        self._clock = clock or SystemClock()

    async def get_if_fresh(
        self,
        issue_id: int,
        language_id: int,
        kind: ContentKind,
        issue_updated_at: datetime,
    ) -> str | None:
        cached = await asyncio.to_thread(self._repository.get, issue_id, language_id, int(kind))
        if cached is None:
            logger.debug("Cache MISS for issue %s, language %s, kind %s", issue_id, language_id, kind.name)
            return None

        if cached.cached_at < as_utc(issue_updated_at):
            logger.debug(
                "Cache STALE for issue %s, language %s, kind %s - issue updated %s, cached %s; deleting",
                issue_id, language_id, kind.name, issue_updated_at, cached.cached_at,
            )
            await asyncio.to_thread(self._repository.delete, issue_id, language_id, int(kind))
            return None

        logger.debug("Cache HIT for issue %s, language %s, kind %s", issue_id, language_id, kind.name)
        return cached.content

    async def save(
        self, issue_id: int, language_id: int, kind: ContentKind, content: str
    ) -> SaveOutcome:
        outcome = await asyncio.to_thread(
            self._repository.replace, issue_id, language_id, int(kind), content, self._clock.now()
        )
        logger.debug("Saved issue %s, language %s, kind %s: %s", issue_id, language_id, kind.name, outcome.value)
        return outcome

    async def invalidate_issue(self, issue_id: int) -> int:
        return await asyncio.to_thread(self._repository.invalidate_by_issue, issue_id)

    async def invalidate_issue_kind(self, issue_id: int, kind: ContentKind) -> int:
        return await asyncio.to_thread(self._repository.invalidate_by_issue_and_kind, issue_id, int(kind))

    async def invalidate_repository(self, repository_full_name: str) -> int:
        return await asyncio.to_thread(self._repository.invalidate_by_repository, repository_full_name)

    async def invalidate_all(self) -> int:
        return await asyncio.to_thread(self._repository.invalidate_all)

    async def statistics(self) -> CacheStatistics:
        return await asyncio.to_thread(self._repository.statistics)
