"""Pull requests resource client."""

from datetime import datetime
from typing import TYPE_CHECKING, Any

from huborg.pagination import PageIterator
from huborg.types.pulls import PullRequest

if TYPE_CHECKING:
    from huborg.transport import HTTPTransport


def parse_pull_request(data: dict[str, Any]) -> PullRequest:
    """Parse pull request data from API response."""
    user = data.get("user") or {}
    return PullRequest(
        number=data["number"],
        title=data["title"],
        state=data.get("state", "open"),
        html_url=data.get("html_url", ""),
        head=data["head"]["ref"],
        base=data["base"]["ref"],
        author=user.get("login"),
        created_at=datetime.fromisoformat(data["created_at"].rstrip("Z")),
    )


class PullsClient:
    """Client for pull request operations."""

    PER_PAGE = 100

    def __init__(self, transport: "HTTPTransport") -> None:
        """
        Initialize the pulls client.

        Args:
            transport: HTTP transport for making requests
        """
        self.transport = transport

    def create(
        self,
        full_name: str,
        head: str,
        base: str,
        title: str,
        body: str | None = None,
    ) -> PullRequest:
        """
        Create a pull request.

        Args:
            full_name: Repository name in "org/name" form
            head: Branch containing changes
            base: Branch to merge into
            title: Pull request title
            body: Optional pull request description

        Returns:
            The created PullRequest

        Raises:
            ValidationError: If the branches are invalid or a PR already exists
            NotFoundError: If repository not found
        """
        payload: dict[str, Any] = {"title": title, "head": head, "base": base}
        if body is not None:
            payload["body"] = body

        data = self.transport.request(
            "POST", f"/repos/{full_name}/pulls", body=payload
        )
        return parse_pull_request(data)

    def pages(
        self, full_name: str, query: dict[str, Any] | None = None
    ) -> PageIterator[PullRequest]:
        """
        Lazily page through a repository's pull requests.

        Args:
            full_name: Repository name in "org/name" form
            query: List filters, e.g. {"state": "open"}
        """
        params: dict[str, Any] = {"per_page": self.PER_PAGE}
        params.update(query or {"state": "open"})
        return PageIterator(
            self.transport,
            f"/repos/{full_name}/pulls",
            parse=parse_pull_request,
            params=params,
        )

    def list(
        self, full_name: str, query: dict[str, Any] | None = None
    ) -> list[PullRequest]:
        """List pull requests across all pages (default: open ones)."""
        return self.pages(full_name, query).collect()
