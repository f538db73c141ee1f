from __future__ import annotations

from pydantic import BaseModel, Field


class GenerationAccepted(BaseModel):
    issue_id: int
    language: str
    status: str = "accepted"


class SummaryNotification(BaseModel):
    """Payload pushed to subscribers when a generated text is ready."""

    issue_id: int
    content: str
    provider: str
    language: str
    event: str = Field(default="summary", examples=["summary", "title"])


class InvalidationResponse(BaseModel):
    deleted: int


class CacheStatisticsResponse(BaseModel):
    total: int
    by_language: dict[str, int]
    by_kind: dict[str, int]
