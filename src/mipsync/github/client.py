"""
GitHub GraphQL client for the repository pull request feed.

Pull requests are the discussion records synchronized next to the proposals.
No retries happen here: a failed request raises PaginationError and the
caller decides what to keep.
"""

from typing import Any

import httpx

from mipsync.core.models import DiscussionBatch
from mipsync.errors import PaginationError
from mipsync.github.base import DiscussionAPI
from mipsync.github.queries import (
    PULL_REQUESTS,
    PULL_REQUESTS_AFTER,
    PULL_REQUESTS_COUNT,
    PULL_REQUESTS_LAST,
)
from mipsync.logging import get_logger

logger = get_logger("github")

GRAPHQL_URL = "https://api.github.com/graphql"


def parse_batch(connection: dict[str, Any]) -> DiscussionBatch:
    """Build a DiscussionBatch from a `pullRequests` connection object."""
    page_info = connection.get("pageInfo") or {}
    return DiscussionBatch(
        edges=list(connection.get("edges") or []),
        end_cursor=page_info.get("endCursor"),
        has_next_page=bool(page_info.get("hasNextPage")),
        total_count=connection.get("totalCount"),
    )


class GitHubDiscussionAPI(DiscussionAPI):
    """
    DiscussionAPI over the GitHub GraphQL endpoint.

    Args:
        owner: Repository owner, e.g. "makerdao"
        name: Repository name, e.g. "mips"
        token: Bearer token sent in the Authorization header
        url: GraphQL endpoint
        page_size: Records per page (GitHub caps this at 100)
        timeout: Request timeout in seconds
        client: Preconfigured httpx client, mainly for tests
    """

    def __init__(
        self,
        owner: str,
        name: str,
        token: str | None = None,
        url: str = GRAPHQL_URL,
        page_size: int = 100,
        timeout: float = 30.0,
        client: httpx.Client | None = None,
    ) -> None:
        self.owner = owner
        self.name = name
        self.url = url
        self.page_size = page_size
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self.client = client or httpx.Client(timeout=timeout, headers=headers)

    def _query(self, query: str, **variables: Any) -> dict[str, Any]:
        payload = {"query": query, "variables": {"owner": self.owner, "name": self.name, **variables}}
        try:
            response = self.client.post(self.url, json=payload)
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise PaginationError(f"GraphQL request failed: {e}") from e

        if body.get("errors"):
            messages = "; ".join(str(err.get("message", err)) for err in body["errors"])
            raise PaginationError(f"GraphQL errors: {messages}")
        try:
            return body["data"]["repository"]["pullRequests"]
        except (KeyError, TypeError) as e:
            raise PaginationError(f"Unexpected GraphQL response shape: {e}") from e

    def count(self) -> int:
        return int(self._query(PULL_REQUESTS_COUNT).get("totalCount") or 0)

    def fetch_page(self, cursor: str | None = None) -> DiscussionBatch:
        if cursor is None:
            return parse_batch(self._query(PULL_REQUESTS, first=self.page_size))
        logger.debug("Fetching pull requests after %s", cursor)
        return parse_batch(self._query(PULL_REQUESTS_AFTER, first=self.page_size, after=cursor))

    def fetch_last(self, n: int) -> DiscussionBatch:
        """Fetch the newest n records, oldest first, walking backwards page_size at a time."""
        edges: list[dict[str, Any]] = []
        total = None
        before = None
        while len(edges) < n:
            variables = {"last": min(self.page_size, n - len(edges))}
            if before is not None:
                logger.debug("Fetching pull requests before %s", before)
                variables["before"] = before
            connection = self._query(PULL_REQUESTS_LAST, **variables)
            page = list(connection.get("edges") or [])
            edges = page + edges
            if total is None:
                total = connection.get("totalCount")
            page_info = connection.get("pageInfo") or {}
            before = page_info.get("startCursor")
            if not page or not page_info.get("hasPreviousPage") or before is None:
                break
        return DiscussionBatch(edges=edges, total_count=total)

    def close(self) -> None:
        self.client.close()
