"""
Huborg GitHub API client.

Provides the primary interface for interacting with the GitHub REST API.
"""

import os
from typing import Any

import httpx

from huborg.clients import OrgsClient, PullsClient, ReposClient
from huborg.exceptions import ConfigurationError
from huborg.transport import HTTPTransport, RetryConfig

TOKEN_HELP_URL = "https://docs.github.com/en/authentication/keeping-your-account-and-data-secure/managing-your-personal-access-tokens"


class GitHubClient:
    """
    Client for the parts of the GitHub API that Huborg relies on.

    Aggregates the resource clients and handles authentication.

    Example:
        ```python
        from huborg import GitHubClient

        client = GitHubClient(token="ghp_...")

        # Or create from environment variables
        client = GitHubClient.from_env()

        repos = client.orgs.list_repositories("samvera")
        ```
    """

    DEFAULT_BASE_URL = "https://api.github.com"
    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
        http_transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize the GitHub client.

        Args:
            token: Access token with permission to read and write repositories
            base_url: Base URL for API requests (default: https://api.github.com)
            timeout: Request timeout in seconds (default: 30.0)
            retry_config: Configuration for retry behavior (optional)
            http_transport: Optional httpx transport, mainly for tests

        Raises:
            ConfigurationError: If the token is empty
        """
        if not token:
            raise ConfigurationError(
                f"You need to provide a GitHub access token.\nSee: {TOKEN_HELP_URL}"
            )

        self.base_url = base_url
        self.timeout = timeout

        self._transport = HTTPTransport(
            base_url=base_url,
            token=token,
            timeout=timeout,
            retry_config=retry_config,
            http_transport=http_transport,
        )

        self.orgs = OrgsClient(self._transport)
        self.repos = ReposClient(self._transport)
        self.pulls = PullsClient(self._transport)

    @classmethod
    def from_env(
        cls,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
    ) -> "GitHubClient":
        """
        Create a client from environment variables.

        Environment variables:
            GITHUB_ACCESS_TOKEN: Access token (required)
            GITHUB_API_URL: Base URL for API (optional, default: https://api.github.com)

        Raises:
            ConfigurationError: If required environment variables are missing
        """
        token = os.environ.get("GITHUB_ACCESS_TOKEN")
        base_url = os.environ.get("GITHUB_API_URL", cls.DEFAULT_BASE_URL)

        if not token:
            raise ConfigurationError(
                "GITHUB_ACCESS_TOKEN environment variable not set.\n"
                f"See: {TOKEN_HELP_URL}"
            )

        return cls(
            token=token,
            base_url=base_url,
            timeout=timeout,
            retry_config=retry_config,
        )

    @property
    def transport(self) -> HTTPTransport:
        """Get the underlying HTTP transport (for advanced use cases)."""
        return self._transport

    def close(self) -> None:
        """Close the client and release resources."""
        self._transport.close()

    def __enter__(self) -> "GitHubClient":
        """Context manager entry."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit - closes the client."""
        self.close()
