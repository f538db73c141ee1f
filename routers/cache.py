"""Administrative cache endpoints: statistics and invalidation."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from dependencies import get_cache_service
from models.domain import ContentKind
from models.schemas import CacheStatisticsResponse, InvalidationResponse
from services.cache import CachedTextService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/cache", tags=["cache"])

_KINDS = {
    "title": ContentKind.TITLE,
    "list": ContentKind.LIST_SUMMARY,
    "detail": ContentKind.DETAIL_SUMMARY,
}


@router.get("/stats", response_model=CacheStatisticsResponse)
async def cache_statistics(
    cache: CachedTextService = Depends(get_cache_service),
) -> CacheStatisticsResponse:
    stats = await cache.statistics()
    return CacheStatisticsResponse(
        total=stats.total, by_language=stats.by_language, by_kind=stats.by_kind
    )


@router.delete("", response_model=InvalidationResponse)
async def invalidate_cache(
    repository: str | None = Query(None, description="owner/repo to limit invalidation to"),
    cache: CachedTextService = Depends(get_cache_service),
) -> InvalidationResponse:
    if repository:
        deleted = await cache.invalidate_repository(repository)
    else:
        deleted = await cache.invalidate_all()
    logger.info("Invalidated %d cached text(s) (repository=%s)", deleted, repository or "*")
    return InvalidationResponse(deleted=deleted)


@router.delete("/issues/{issue_id}", response_model=InvalidationResponse)
async def invalidate_issue(
    issue_id: int,
    cache: CachedTextService = Depends(get_cache_service),
) -> InvalidationResponse:
    deleted = await cache.invalidate_issue(issue_id)
    logger.info("Invalidated %d cached text(s) for issue %s", deleted, issue_id)
    return InvalidationResponse(deleted=deleted)


@router.delete("/issues/{issue_id}/{kind}", response_model=InvalidationResponse)
async def invalidate_issue_kind(
    issue_id: int,
    kind: str,
    cache: CachedTextService = Depends(get_cache_service),
) -> InvalidationResponse:
    content_kind = _KINDS.get(kind.lower())
    if content_kind is None:
        raise HTTPException(status_code=400, detail=f"Unsupported content kind: {kind!r}")
    deleted = await cache.invalidate_issue_kind(issue_id, content_kind)
    logger.info("Invalidated %d %s text(s) for issue %s", deleted, content_kind.name, issue_id)
    return InvalidationResponse(deleted=deleted)
