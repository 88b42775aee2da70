"""Huborg testing utilities.

Provides mock clients and fixtures for testing code built on Huborg.
"""

from huborg.testing.fixtures import (
    create_mock_pull_request,
    create_mock_repository,
)
from huborg.testing.mock import MockCall, MockGitHelper, MockGitHubClient, MockResponse

__all__ = [
    # Mocks
    "MockGitHubClient",
    "MockGitHelper",
    "MockCall",
    "MockResponse",
    # Helper functions
    "create_mock_repository",
    "create_mock_pull_request",
]
