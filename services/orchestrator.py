"""Two-stage summary pipeline: summarize in the source language, translate
to the target language, caching and notifying each stage.

Generation failures end the run silently (nothing cached, nothing sent).
Translation failures degrade to the source-language text.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime
from typing import Protocol

from models.domain import ContentKind, IssueSnapshot, LanguageCode, LanguageMode, ProviderResult
from services.cache import CachedTextService
from services.issues import IssueSource
from services.notifications import Notifier

logger = logging.getLogger(__name__)

CACHE_PROVIDER = "cache"


class Summarizer(Protocol):
    async def summarize(self, body: str, kind: ContentKind = ...) -> ProviderResult: ...


class TextTranslator(Protocol):
    async def translate(self, text: str, target: str, source: str | None = None) -> ProviderResult: ...


class IssueSummaryOrchestrator:
    def __init__(
        self,
        issues: IssueSource,
        cache: CachedTextService,
        summarizer: Summarizer,
        translator: TextTranslator,
        notifier: Notifier,
        source_language: str = "en",
        target_language: str = "cs",
    ) -> None:
        self._issues = issues
        self._cache = cache
        self._summarizer = summarizer
        self._translator = translator
        self._notifier = notifier
        self.source_language = source_language
        self.target_language = target_language
        self._source_id = int(LanguageCode.from_tag(source_language))
        self._target_id = int(LanguageCode.from_tag(target_language))

    async def generate(
        self,
        issue_id: int,
        mode: LanguageMode,
        kind: ContentKind = ContentKind.LIST_SUMMARY,
    ) -> None:
        """Fire-and-forget entry point; results arrive through the notifier."""
        logger.info("START summary for issue %s, mode=%s, kind=%s", issue_id, mode.value, kind.name)

        issue = await self._issues.get_by_id(issue_id)
        if issue is None:
            logger.warning("Issue %s not found", issue_id)
            return

        await self.generate_from_issue(issue, mode, kind)

    async def generate_from_body(
        self,
        issue_id: int,
        body: str,
        updated_at: datetime,
        mode: LanguageMode,
        kind: ContentKind = ContentKind.LIST_SUMMARY,
    ) -> None:
        """Run the pipeline for a body the caller already holds (skips the lookup)."""
        issue = IssueSnapshot(id=issue_id, title="", body=body, updated_at=updated_at)
        await self.generate_from_issue(issue, mode, kind)

    async def generate_from_issue(
        self,
        issue: IssueSnapshot,
        mode: LanguageMode,
        kind: ContentKind = ContentKind.LIST_SUMMARY,
    ) -> None:
        issue_id = issue.id
        notify_source = mode.notifies_source
        want_target = mode.wants_target and self._target_id != self._source_id
        if mode is LanguageMode.TARGET_ONLY and not want_target:
            # Target equals source: the source text is the requested result
            notify_source = True

        cached_target = None
        if want_target:
            cached_target = await self._cache.get_if_fresh(issue_id, self._target_id, kind, issue.updated_at)
            if cached_target is not None and not notify_source:
                logger.info("Cache HIT (%s) for issue %s", self.target_language, issue_id)
                await self._notify(issue_id, cached_target, CACHE_PROVIDER, self.target_language)
                return

        cached_source = await self._cache.get_if_fresh(issue_id, self._source_id, kind, issue.updated_at)

        if cached_source is not None and (not want_target or cached_target is not None):
            logger.info("Cache HIT - serving issue %s from cache", issue_id)
            if notify_source:
                await self._notify(issue_id, cached_source, CACHE_PROVIDER, self.source_language)
            if want_target:
                await self._notify(issue_id, cached_target, CACHE_PROVIDER, self.target_language)
            return

        if cached_source is not None:
            source_text, source_provider = cached_source, CACHE_PROVIDER
        else:
            body = await self._issues.resolve_body(issue)
            if not body or not body.strip():
                logger.warning("No body available for issue %s - cannot generate summary", issue_id)
                return

            result = await self._summarizer.summarize(body, kind)
            if not result.success or not result.text or not result.text.strip():
                logger.warning("AI summarization failed for issue %s: %s", issue_id, result.error)
                return

            source_text, source_provider = result.text, result.label
            logger.info("AI summarization succeeded via %s", source_provider)
            await self._cache.save(issue_id, self._source_id, kind, source_text)

        if notify_source:
            await self._notify(issue_id, source_text, source_provider, self.source_language)

        if not want_target:
            logger.info("COMPLETE (%s only) for issue %s", self.source_language, issue_id)
            return

        if cached_target is not None:
            await self._notify(issue_id, cached_target, CACHE_PROVIDER, self.target_language)
            logger.info("COMPLETE (%s from cache) for issue %s", self.target_language, issue_id)
            return

        translation = await self._translator.translate(
            source_text, self.target_language, self.source_language
        )
        if translation.success and translation.text and translation.text.strip():
            logger.info("Translation succeeded via %s", translation.label)
            await self._cache.save(issue_id, self._target_id, kind, translation.text)
            await self._notify(issue_id, translation.text, translation.label, self.target_language)
            logger.info("COMPLETE for issue %s", issue_id)
            return

        logger.warning(
            "Translation failed for issue %s: %s. Using %s fallback.",
            issue_id, translation.error, self.source_language,
        )
        if mode is LanguageMode.BOTH:
            await self._notify(
                issue_id, source_text, f"{source_provider} (translation unavailable)", self.target_language
            )
        elif mode is LanguageMode.TARGET_ONLY:
            await self._notify(
                issue_id, source_text, f"{source_provider} ({self.source_language} fallback)", self.source_language
            )
        logger.info("COMPLETE (%s fallback) for issue %s", self.source_language, issue_id)

    async def generate_many(
        self,
        issue_ids: Iterable[int],
        mode: LanguageMode = LanguageMode.SOURCE_ONLY,
        kind: ContentKind = ContentKind.LIST_SUMMARY,
    ) -> None:
        """Summarize issues one after another to avoid overloading providers."""
        ids = list(issue_ids)
        logger.info("Triggering summarization for %d issues", len(ids))
        for issue_id in ids:
            try:
                await self.generate(issue_id, mode, kind)
            except Exception:
                logger.exception("Failed to generate summary for issue %s; continuing", issue_id)
        logger.info("COMPLETE for %d issues", len(ids))

    async def _notify(self, issue_id: int, content: str, provider: str, language: str) -> None:
        await self._notifier.notify(issue_id, content, provider, language)
