"""GitHub contents API client for course day content.

Uses httpx for async HTTP requests.
"""

from __future__ import annotations

import httpx

from academy.core.logging import get_logger

logger = get_logger(__name__)

GITHUB_API = "https://api.github.com"


class GitHubContentClient:
    """Reads raw markdown files from the course content repository."""

    def __init__(self, token: str, owner: str, repo: str, branch: str = "main"):
        self.token = token
        self.owner = owner
        self.repo = repo
        self.branch = branch
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github.v3.raw",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    async def fetch_file(self, path: str) -> str | None:
        """Return the raw file text, or None if it is missing or unreachable."""
        url = f"{GITHUB_API}/repos/{self.owner}/{self.repo}/contents/{path}"
        try:
            async with httpx.AsyncClient(timeout=15) as client:
                resp = await client.get(url, headers=self._headers, params={"ref": self.branch})
        except httpx.HTTPError as e:
            logger.warning(f"GitHub content request failed for {path}: {e}")
            return None

        if resp.status_code != 200:
            logger.debug(f"GitHub content {path} returned {resp.status_code}")
            return None
        return resp.text
