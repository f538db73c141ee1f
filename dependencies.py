"""FastAPI dependencies.

Long-lived services are built once per process here; route handlers only
receive them through ``Depends``.  Rotation cursors live inside these
singletons, so rotation continues across requests.
"""

from __future__ import annotations

from functools import lru_cache

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from clients.github_client import GitHubClient
from config import Settings, get_settings
from repositories.cached_texts import CachedTextRepository
from repositories.issues import IssueRepository
from services.cache import CachedTextService
from services.fallback import FallbackChain
from services.issues import IssueSource
from services.notifications import NotificationHub
from services.orchestrator import IssueSummaryOrchestrator
from services.summarization import AiSummarizationService
from services.title_translation import TitleTranslationService
from services.translation import build_fallback_chain
from utils.db import get_engine, get_session_factory


@lru_cache(maxsize=1)
def get_app_settings() -> Settings:
    return get_settings()


@lru_cache(maxsize=1)
def get_db_engine() -> Engine:
    return get_engine(get_app_settings().database_url)


@lru_cache(maxsize=1)
def get_session_maker() -> sessionmaker[Session]:
    return get_session_factory(get_db_engine())


@lru_cache(maxsize=1)
def get_issue_repository() -> IssueRepository:
    return IssueRepository(get_session_maker())


@lru_cache(maxsize=1)
def get_issue_source() -> IssueSource:
    return IssueSource(get_issue_repository(), GitHubClient(get_app_settings()))


@lru_cache(maxsize=1)
def get_cache_service() -> CachedTextService:
    return CachedTextService(CachedTextRepository(get_session_maker()))


@lru_cache(maxsize=1)
def get_notification_hub() -> NotificationHub:
    return NotificationHub()


@lru_cache(maxsize=1)
def get_summarization_service() -> AiSummarizationService:
    return AiSummarizationService.from_settings(get_app_settings())


@lru_cache(maxsize=1)
def get_fallback_chain() -> FallbackChain:
    return build_fallback_chain(get_app_settings())


@lru_cache(maxsize=1)
def get_orchestrator() -> IssueSummaryOrchestrator:
    settings = get_app_settings()
    return IssueSummaryOrchestrator(
        issues=get_issue_source(),
        cache=get_cache_service(),
        summarizer=get_summarization_service(),
        translator=get_fallback_chain(),
        notifier=get_notification_hub(),
        source_language=settings.source_language,
        target_language=settings.target_language,
    )


@lru_cache(maxsize=1)
def get_title_service() -> TitleTranslationService:
    return TitleTranslationService(
        issues=get_issue_source(),
        cache=get_cache_service(),
        translator=get_fallback_chain(),
        notifier=get_notification_hub(),
        source_language=get_app_settings().source_language,
    )
