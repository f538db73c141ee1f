"""SQL access for the generated-text cache."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from models.db import CachedTextORM, IssueORM
from models.domain import CachedText, CacheStatistics, ContentKind, LanguageCode, SaveOutcome
from utils.db import session_scope

logger = logging.getLogger(__name__)


def as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; everything stored here is UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class CachedTextRepository:
    """Rows keyed by (issue_id, language_id, text_type_id)."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def get(self, issue_id: int, language_id: int, kind: int) -> CachedText | None:
        with session_scope(self._session_factory) as session:
            row = session.get(CachedTextORM, (issue_id, language_id, kind))
            if row is None:
                return None
            return CachedText(
                issue_id=row.issue_id,
                language_id=row.language_id,
                kind=row.text_type_id,
                content=row.content,
                cached_at=as_utc(row.cached_at),
            )

    def delete(self, issue_id: int, language_id: int, kind: int) -> int:
        stmt = delete(CachedTextORM).where(
            CachedTextORM.issue_id == issue_id,
            CachedTextORM.language_id == language_id,
            CachedTextORM.text_type_id == kind,
        )
        with session_scope(self._session_factory) as session:
            return session.execute(stmt).rowcount or 0

    def replace(
        self, issue_id: int, language_id: int, kind: int, content: str, cached_at: datetime
    ) -> SaveOutcome:
        """Delete any prior row for the key and insert a fresh one.

        A duplicate-key failure means a concurrent writer inserted an
        equivalent row first; that is reported, not raised.
        """
        try:
            with session_scope(self._session_factory) as session:
                session.execute(
                    delete(CachedTextORM).where(
                        CachedTextORM.issue_id == issue_id,
                        CachedTextORM.language_id == language_id,
                        CachedTextORM.text_type_id == kind,
                    )
                )
                session.add(
                    CachedTextORM(
                        issue_id=issue_id,
                        language_id=language_id,
                        text_type_id=kind,
                        content=content,
                        cached_at=cached_at,
                    )
                )
        except IntegrityError as exc:
            if not _is_duplicate_key(exc):
                raise
            logger.debug(
                "Concurrent cache insert for issue %s, language %s, kind %s: %s",
                issue_id, language_id, kind, exc.orig,
            )
            return SaveOutcome.ALREADY_EXISTS
        return SaveOutcome.INSERTED

    def invalidate_by_issue(self, issue_id: int) -> int:
        stmt = delete(CachedTextORM).where(CachedTextORM.issue_id == issue_id)
        with session_scope(self._session_factory) as session:
            return session.execute(stmt).rowcount or 0

    def invalidate_by_issue_and_kind(self, issue_id: int, kind: int) -> int:
        stmt = delete(CachedTextORM).where(
            CachedTextORM.issue_id == issue_id, CachedTextORM.text_type_id == kind
        )
        with session_scope(self._session_factory) as session:
            return session.execute(stmt).rowcount or 0

    def invalidate_by_repository(self, repository_full_name: str) -> int:
        issue_ids = select(IssueORM.id).where(
            IssueORM.repository_full_name == repository_full_name
        )
        stmt = delete(CachedTextORM).where(CachedTextORM.issue_id.in_(issue_ids)).execution_options(
            synchronize_session=False
        )
        with session_scope(self._session_factory) as session:
            return session.execute(stmt).rowcount or 0

    def invalidate_all(self) -> int:
        with session_scope(self._session_factory) as session:
            return session.execute(delete(CachedTextORM)).rowcount or 0

    def statistics(self) -> CacheStatistics:
        with session_scope(self._session_factory) as session:
            total = session.scalar(select(func.count()).select_from(CachedTextORM)) or 0
            by_language_rows = session.execute(
                select(CachedTextORM.language_id, func.count()).group_by(CachedTextORM.language_id)
            ).all()
            by_kind_rows = session.execute(
                select(CachedTextORM.text_type_id, func.count()).group_by(CachedTextORM.text_type_id)
            ).all()

        return CacheStatistics(
            total=total,
            by_language={_language_name(lid): count for lid, count in by_language_rows},
            by_kind={_kind_name(kid): count for kid, count in by_kind_rows},
        )


# SQLite reports "UNIQUE constraint failed", PostgreSQL "duplicate key value",
# MySQL "Duplicate entry"
_DUPLICATE_KEY_MARKERS = ("unique constraint", "duplicate key", "duplicate entry")


def _is_duplicate_key(exc: IntegrityError) -> bool:
    message = str(exc.orig).lower()
    return any(marker in message for marker in _DUPLICATE_KEY_MARKERS)


def _language_name(language_id: int) -> str:
    try:
        return LanguageCode(language_id).tag
    except ValueError:
        return str(language_id)


def _kind_name(kind: int) -> str:
    try:
        return ContentKind(kind).name.lower()
    except ValueError:
        return str(kind)
