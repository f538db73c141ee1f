from __future__ import annotations

import os
from datetime import timedelta

import pytest

from repositories.cached_texts import CachedTextRepository
from repositories.issues import IssueRepository
from services.cache import CachedTextService
from services.issues import IssueSource
from tests.fakes import T0, FakeClock, RecordingNotifier
from utils.db import create_schema, get_engine, get_session_factory

# The app lifespan opens the configured database; keep it in memory for tests
os.environ["DATABASE_URL"] = "sqlite://"


@pytest.fixture
def session_factory():
    engine = get_engine("sqlite://")
    create_schema(engine)
    yield get_session_factory(engine)
    engine.dispose()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def issue_repository(session_factory) -> IssueRepository:
    return IssueRepository(session_factory)


@pytest.fixture
def cache_repository(session_factory) -> CachedTextRepository:
    return CachedTextRepository(session_factory)


@pytest.fixture
def cache_service(cache_repository, clock) -> CachedTextService:
    return CachedTextService(cache_repository, clock)


@pytest.fixture
def issue_source(issue_repository) -> IssueSource:
    return IssueSource(issue_repository)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def seeded_issue(issue_repository):
    issue_repository.upsert(
        42,
        title="Crash when opening settings",
        body="Opening the settings page throws a NullReferenceException.",
        updated_at=T0 - timedelta(hours=1),
        repository_full_name="octo/widgets",
        number=7,
    )
    return issue_repository.get_by_id(42)
