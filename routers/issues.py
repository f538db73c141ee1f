"""Generation triggers: issue summaries and title translations.

Both endpoints answer 202 immediately; the texts are delivered later over
the issue's websocket.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status

from config import Settings
from dependencies import (
    get_app_settings,
    get_issue_source,
    get_orchestrator,
    get_title_service,
)
from models.domain import ContentKind, LanguageCode, LanguageMode
from models.schemas import GenerationAccepted
from services.issues import IssueSource
from services.orchestrator import IssueSummaryOrchestrator
from services.title_translation import TitleTranslationService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/issues", tags=["issues"])

_KINDS = {
    "list": ContentKind.LIST_SUMMARY,
    "detail": ContentKind.DETAIL_SUMMARY,
}


async def _require_issue(issue_id: int, issues: IssueSource) -> None:
    if await issues.get_by_id(issue_id) is None:
        raise HTTPException(status_code=404, detail=f"Issue {issue_id} not found")


@router.post(
    "/{issue_id}/summary",
    response_model=GenerationAccepted,
    status_code=status.HTTP_202_ACCEPTED,
)
async def request_summary(
    issue_id: int,
    background_tasks: BackgroundTasks,
    language: str = Query("both"),
    kind: str = Query("list"),
    settings: Settings = Depends(get_app_settings),
    issues: IssueSource = Depends(get_issue_source),
    orchestrator: IssueSummaryOrchestrator = Depends(get_orchestrator),
) -> GenerationAccepted:
    try:
        mode = LanguageMode.parse(language, settings.source_language, settings.target_language)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    content_kind = _KINDS.get(kind.strip().lower())
    if content_kind is None:
        raise HTTPException(status_code=400, detail=f"Unsupported summary kind: {kind!r}")

    await _require_issue(issue_id, issues)
    background_tasks.add_task(orchestrator.generate, issue_id, mode, content_kind)
    logger.info("Accepted summary request for issue %s (%s, %s)", issue_id, mode.value, content_kind.name)
    return GenerationAccepted(issue_id=issue_id, language=mode.value)


@router.post(
    "/{issue_id}/title-translation",
    response_model=GenerationAccepted,
    status_code=status.HTTP_202_ACCEPTED,
)
async def request_title_translation(
    issue_id: int,
    background_tasks: BackgroundTasks,
    language: str = Query("cs"),
    issues: IssueSource = Depends(get_issue_source),
    service: TitleTranslationService = Depends(get_title_service),
) -> GenerationAccepted:
    try:
        target = LanguageCode.from_tag(language).tag
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    await _require_issue(issue_id, issues)
    background_tasks.add_task(service.translate_title, issue_id, target)
    return GenerationAccepted(issue_id=issue_id, language=target)
