"""Async GitHub REST API client for fetching issue bodies on demand."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from config import Settings

logger = logging.getLogger(__name__)


class GitHubClientError(Exception):
    """Raised when a GitHub API call fails."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class GitHubClient:
    """Reads issue content via the GitHub REST API."""

    def __init__(
        self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None
    ) -> None:
        self._base = settings.github_api_base.rstrip("/")
        self._timeout = settings.github_timeout
        self._transport = transport
        headers: dict[str, str] = {"Accept": "application/vnd.github.v3+json"}
        if settings.github_token:
            headers["Authorization"] = f"Bearer {settings.github_token}"
        self._headers = headers

    async def fetch_issue_body(self, repository_full_name: str, number: int) -> str | None:
        """Return the Markdown body of ``owner/repo#number`` (None when empty)."""
        owner, _, repo = repository_full_name.partition("/")
        if not owner or not repo or number <= 0:
            raise GitHubClientError(
                f"Invalid issue reference {repository_full_name!r}#{number}"
            )

        url = f"{self._base}/repos/{owner}/{repo}/issues/{number}"
        async with httpx.AsyncClient(
            headers=self._headers, timeout=self._timeout, transport=self._transport
        ) as client:
            resp = await client.get(url)

        if resp.status_code == 404:
            raise GitHubClientError(
                f"Issue {owner}/{repo}#{number} not found or is private", status_code=404
            )
        if resp.status_code == 403:
            raise GitHubClientError(
                "GitHub API rate limit exceeded. Set GITHUB_TOKEN to increase limits.",
                status_code=403,
            )
        if resp.status_code != 200:
            raise GitHubClientError(
                f"GitHub API error: {resp.status_code}", status_code=resp.status_code
            )

        data: dict[str, Any] = resp.json()
        body = data.get("body")
        logger.info(
            "Fetched body for %s/%s#%d (%d chars)", owner, repo, number, len(body or "")
        )
        return body or None
