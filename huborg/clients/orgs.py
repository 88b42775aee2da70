"""Organizations resource client."""

from typing import TYPE_CHECKING

from huborg.clients.repos import parse_repository
from huborg.pagination import PageIterator
from huborg.types.repos import Repository

if TYPE_CHECKING:
    from huborg.transport import HTTPTransport


class OrgsClient:
    """Client for organization-level listings."""

    PER_PAGE = 100

    def __init__(self, transport: "HTTPTransport") -> None:
        """
        Initialize the orgs client.

        Args:
            transport: HTTP transport for making requests
        """
        self.transport = transport

    def repository_pages(self, org: str) -> PageIterator[Repository]:
        """
        Lazily page through an organization's repositories.

        Args:
            org: Organization login

        Returns:
            PageIterator yielding one list of Repository per API page
        """
        return PageIterator(
            self.transport,
            f"/orgs/{org}/repos",
            parse=parse_repository,
            params={"per_page": self.PER_PAGE},
        )

    def list_repositories(self, org: str) -> list[Repository]:
        """
        List every repository of an organization, across all pages.

        Raises:
            NotFoundError: If the organization does not exist
        """
        return self.repository_pages(org).collect()
