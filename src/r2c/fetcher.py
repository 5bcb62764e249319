"""HTTP fetching of the upstream tag list and changelog.

Design notes:
- Uses httpx for async HTTP requests; the pipeline awaits one request
  at a time
- Uses a Protocol so the pipeline doesn't depend on the concrete
  implementation (tests run against MockFetcher)
- Any transport error or non-2xx status becomes NetworkFailure

GitHub API docs: https://docs.github.com/en/rest/repos/repos#list-repository-tags
"""

from __future__ import annotations

from typing import Protocol

import httpx

from r2c.errors import NetworkFailure
from r2c.logging_config import get_logger

logger = get_logger(__name__)

# ---------------------------------------------------------------------------
# Protocol (Interface)
# ---------------------------------------------------------------------------


class FetcherProtocol(Protocol):
    """Interface for retrieving a remote document as text."""

    async def fetch(self, url: str) -> str:
        """GET ``url`` and return the whole response body.

        Raises:
            NetworkFailure: On any transport or status failure
        """
        ...


# ---------------------------------------------------------------------------
# Concrete Implementation
# ---------------------------------------------------------------------------


class HttpFetcher:
    """Fetcher backed by httpx.

    Usage:
        fetcher = HttpFetcher(token="ghp_...")
        body = await fetcher.fetch("https://api.github.com/repos/facebook/jest/tags")
    """

    def __init__(
        self,
        token: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            token: GitHub token sent as a bearer token. Anonymous if empty.
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (tests pass a MockTransport)
        """
        self._timeout = timeout
        self._transport = transport
        self._headers: dict[str, str] = {
            "Accept": "application/vnd.github.v3+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            self._headers["Authorization"] = f"Bearer {token}"

    async def fetch(self, url: str) -> str:
        """GET ``url`` and return the decoded body.

        Args:
            url: Absolute URL to fetch

        Returns:
            The response body as text

        Raises:
            NetworkFailure: If the request fails or the status is not 2xx
        """
        logger.info("fetch_started", url=url)
        async with httpx.AsyncClient(
            headers=self._headers,
            timeout=self._timeout,
            transport=self._transport,
            follow_redirects=True,
        ) as client:
            try:
                resp = await client.get(url)
                resp.raise_for_status()
            except httpx.HTTPStatusError as exc:
                raise NetworkFailure(
                    url,
                    f"HTTP {exc.response.status_code}",
                    status_code=exc.response.status_code,
                ) from exc
            except httpx.HTTPError as exc:
                raise NetworkFailure(url, str(exc) or type(exc).__name__) from exc

        logger.info(
            "fetch_complete", url=url, status=resp.status_code, bytes=len(resp.content)
        )
        return resp.text


# ---------------------------------------------------------------------------
# Mock Implementation (for testing)
# ---------------------------------------------------------------------------


class MockFetcher:
    """Fetcher that serves canned bodies from a dict.

    Usage:
        fetcher = MockFetcher({TAGS_URL: "[...]", CHANGELOG_URL: "## jest 24.0.0"})
        body = await fetcher.fetch(TAGS_URL)
    """

    def __init__(self, responses: dict[str, str] | None = None) -> None:
        """Initialize with URL -> body mappings."""
        self._responses = responses or {}
        self.requested: list[str] = []

    async def fetch(self, url: str) -> str:
        """Return the canned body for ``url``.

        Raises:
            NetworkFailure: If no body is registered for ``url``
        """
        self.requested.append(url)
        if url not in self._responses:
            raise NetworkFailure(url, "HTTP 404", status_code=404)
        return self._responses[url]
