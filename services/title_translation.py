"""Cached translation of issue titles."""

from __future__ import annotations

import logging

from models.domain import ContentKind, LanguageCode
from services.cache import CachedTextService
from services.issues import IssueSource
from services.notifications import Notifier
from services.orchestrator import CACHE_PROVIDER, TextTranslator
from utils.text import looks_like

logger = logging.getLogger(__name__)

TITLE_EVENT = "title"


class TitleTranslationService:
    def __init__(
        self,
        issues: IssueSource,
        cache: CachedTextService,
        translator: TextTranslator,
        notifier: Notifier,
        source_language: str = "en",
    ) -> None:
        self._issues = issues
        self._cache = cache
        self._translator = translator
        self._notifier = notifier
        self.source_language = source_language

    async def translate_title(self, issue_id: int, target: str) -> None:
        target = target.strip().lower()
        if target == self.source_language:
            logger.debug("Title of issue %s already in %s; nothing to translate", issue_id, target)
            return

        issue = await self._issues.get_by_id(issue_id)
        if issue is None:
            logger.warning("Issue %s not found", issue_id)
            return
        if not issue.title or not issue.title.strip():
            logger.warning("Issue %s has no title", issue_id)
            return

        language_id = int(LanguageCode.from_tag(target))
        cached = await self._cache.get_if_fresh(issue_id, language_id, ContentKind.TITLE, issue.updated_at)
        if cached is not None:
            await self._notifier.notify(issue_id, cached, CACHE_PROVIDER, target, TITLE_EVENT)
            return

        if looks_like(issue.title, target):
            logger.info("Title of issue %s already looks like %s", issue_id, target)
            await self._cache.save(issue_id, language_id, ContentKind.TITLE, issue.title)
            await self._notifier.notify(issue_id, issue.title, "original", target, TITLE_EVENT)
            return

        result = await self._translator.translate(issue.title, target, self.source_language)
        if result.success and result.text and result.text.strip():
            await self._cache.save(issue_id, language_id, ContentKind.TITLE, result.text)
            await self._notifier.notify(issue_id, result.text, result.label, target, TITLE_EVENT)
            return

        logger.warning("Title translation failed for issue %s: %s", issue_id, result.error)
        await self._notifier.notify(
            issue_id, issue.title, "original (translation unavailable)", target, TITLE_EVENT
        )
