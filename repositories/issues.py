"""SQL access for issue snapshots (the source entities of generated texts)."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Session, sessionmaker

from models.db import IssueORM
from models.domain import IssueSnapshot
from repositories.cached_texts import as_utc
from utils.db import session_scope


class IssueRepository:
    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def get_by_id(self, issue_id: int) -> IssueSnapshot | None:
        with session_scope(self._session_factory) as session:
            row = session.get(IssueORM, issue_id)
            if row is None:
                return None
            return IssueSnapshot(
                id=row.id,
                title=row.title,
                body=row.body,
                updated_at=as_utc(row.github_updated_at),
                repository_full_name=row.repository_full_name,
                number=row.number,
            )

    def upsert(
        self,
        issue_id: int,
        title: str,
        body: str | None,
        updated_at: datetime,
        repository_full_name: str = "",
        number: int = 0,
    ) -> None:
        with session_scope(self._session_factory) as session:
            row = session.get(IssueORM, issue_id)
            if row is None:
                row = IssueORM(id=issue_id)
                session.add(row)
            row.title = title
            row.body = body
            row.github_updated_at = updated_at
            row.repository_full_name = repository_full_name
            row.number = number
