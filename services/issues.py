"""Source-entity lookup: stored issue snapshots, with the body fetched from
GitHub when the local copy has none."""

from __future__ import annotations

import asyncio
import logging

from clients.github_client import GitHubClient, GitHubClientError
from models.domain import IssueSnapshot
from repositories.issues import IssueRepository

logger = logging.getLogger(__name__)


class IssueSource:
    def __init__(self, repository: IssueRepository, github: GitHubClient | None = None) -> None:
        self._repository = repository
        self._github = github

    async def get_by_id(self, issue_id: int) -> IssueSnapshot | None:
        return await asyncio.to_thread(self._repository.get_by_id, issue_id)

    async def resolve_body(self, issue: IssueSnapshot) -> str | None:
        if issue.body and issue.body.strip():
            return issue.body
        if self._github is None or not issue.repository_full_name:
            return None
        try:
            return await self._github.fetch_issue_body(issue.repository_full_name, issue.number)
        except GitHubClientError as exc:
            logger.warning("Could not fetch body for issue %s: %s", issue.id, exc)
            return None
