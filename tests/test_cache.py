from __future__ import annotations

from datetime import timedelta

import pytest
from sqlalchemy import event, insert
from sqlalchemy.exc import IntegrityError

from models.db import CachedTextORM
from models.domain import ContentKind, LanguageCode, SaveOutcome
from tests.fakes import T0

EN = int(LanguageCode.EN_US)
CS = int(LanguageCode.CS_CZ)


async def test_entry_older_than_issue_update_is_deleted(cache_service, cache_repository, clock):
    await cache_service.save(1, EN, ContentKind.LIST_SUMMARY, "old summary")
    issue_updated = T0 + timedelta(hours=1)

    assert await cache_service.get_if_fresh(1, EN, ContentKind.LIST_SUMMARY, issue_updated) is None
    assert cache_repository.get(1, EN, int(ContentKind.LIST_SUMMARY)) is None

    clock.advance(hours=2)
    await cache_service.save(1, EN, ContentKind.LIST_SUMMARY, "new summary")
    assert await cache_service.get_if_fresh(1, EN, ContentKind.LIST_SUMMARY, issue_updated) == "new summary"


async def test_entry_written_at_or_after_update_is_fresh(cache_service):
    await cache_service.save(1, CS, ContentKind.LIST_SUMMARY, "shrnutí")

    assert await cache_service.get_if_fresh(1, CS, ContentKind.LIST_SUMMARY, T0) == "shrnutí"
    assert await cache_service.get_if_fresh(1, CS, ContentKind.LIST_SUMMARY, T0 - timedelta(days=3)) == "shrnutí"


async def test_naive_issue_timestamp_is_treated_as_utc(cache_service):
    await cache_service.save(1, EN, ContentKind.TITLE, "title")
    naive_later = (T0 + timedelta(minutes=5)).replace(tzinfo=None)

    assert await cache_service.get_if_fresh(1, EN, ContentKind.TITLE, naive_later) is None


async def test_keys_are_independent(cache_service):
    await cache_service.save(1, EN, ContentKind.LIST_SUMMARY, "list")
    await cache_service.save(1, EN, ContentKind.DETAIL_SUMMARY, "detail")

    assert await cache_service.get_if_fresh(1, EN, ContentKind.LIST_SUMMARY, T0) == "list"
    assert await cache_service.get_if_fresh(1, EN, ContentKind.DETAIL_SUMMARY, T0) == "detail"
    assert await cache_service.get_if_fresh(1, CS, ContentKind.LIST_SUMMARY, T0) is None
    assert await cache_service.get_if_fresh(2, EN, ContentKind.LIST_SUMMARY, T0) is None


async def test_save_replaces_existing_entry(cache_service, cache_repository, clock):
    assert await cache_service.save(1, EN, ContentKind.TITLE, "first") is SaveOutcome.INSERTED
    clock.advance(minutes=1)
    assert await cache_service.save(1, EN, ContentKind.TITLE, "second") is SaveOutcome.INSERTED

    row = cache_repository.get(1, EN, int(ContentKind.TITLE))
    assert row.content == "second"
    assert row.cached_at == clock.now()


async def test_invalidation_and_statistics(cache_service, seeded_issue):
    await cache_service.save(seeded_issue.id, EN, ContentKind.LIST_SUMMARY, "a")
    await cache_service.save(seeded_issue.id, CS, ContentKind.LIST_SUMMARY, "b")
    await cache_service.save(seeded_issue.id, CS, ContentKind.TITLE, "c")
    await cache_service.save(99, EN, ContentKind.LIST_SUMMARY, "d")

    stats = await cache_service.statistics()
    assert stats.total == 4
    assert stats.by_language == {"en": 2, "cs": 2}
    assert stats.by_kind == {"title": 1, "list_summary": 3}

    assert await cache_service.invalidate_issue_kind(seeded_issue.id, ContentKind.TITLE) == 1
    assert await cache_service.invalidate_repository("octo/widgets") == 2
    assert await cache_service.invalidate_issue(99) == 1
    assert await cache_service.invalidate_all() == 0
    assert (await cache_service.statistics()).total == 0


def _insert_conflicting_row_on_flush(session_factory, content: str) -> None:
    """Write a row for the same key just before the repository's insert is flushed."""
    injected = []

    @event.listens_for(session_factory, "before_flush")
    def insert_first(session, flush_context, instances):
        for obj in session.new:
            if isinstance(obj, CachedTextORM) and not injected:
                injected.append(obj)
                session.connection().execute(
                    insert(CachedTextORM.__table__).values(
                        issue_id=obj.issue_id,
                        language_id=obj.language_id,
                        text_type_id=obj.text_type_id,
                        content=content,
                        cached_at=obj.cached_at,
                    )
                )


def test_concurrent_insert_is_reported_as_already_exists(session_factory, cache_repository):
    _insert_conflicting_row_on_flush(session_factory, "written by another worker")

    outcome = cache_repository.replace(1, EN, int(ContentKind.TITLE), "mine", T0)

    assert outcome is SaveOutcome.ALREADY_EXISTS
    assert cache_repository.replace(1, EN, int(ContentKind.TITLE), "mine", T0) is SaveOutcome.INSERTED
    assert cache_repository.get(1, EN, int(ContentKind.TITLE)).content == "mine"


def test_other_integrity_errors_propagate(cache_repository):
    with pytest.raises(IntegrityError):
        cache_repository.replace(1, EN, int(ContentKind.TITLE), None, T0)
