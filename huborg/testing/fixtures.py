"""
Pytest fixtures for Huborg testing.

Provides common fixtures and factories for tests that drive Huborg against
MockGitHubClient and MockGitHelper.
"""

from datetime import datetime
from typing import Any, Generator

import pytest

from huborg.testing.mock import MockGitHelper, MockGitHubClient
from huborg.types.pulls import PullRequest
from huborg.types.repos import License, Repository


# ============================================================================
# Factories
# ============================================================================


def create_mock_repository(full_name: str = "acme/widget", **kwargs: Any) -> Repository:
    """
    Create a Repository with customizable fields.

    Args:
        full_name: Repository name in "org/name" form
        **kwargs: Additional fields to override

    Returns:
        Repository object
    """
    owner, name = full_name.split("/", 1)
    defaults: dict[str, Any] = {
        "name": name,
        "owner": owner,
        "default_branch": "main",
        "clone_url": f"https://github.com/{full_name}.git",
        "html_url": f"https://github.com/{full_name}",
    }
    defaults.update(kwargs)
    return Repository(full_name=full_name, **defaults)


def create_mock_pull_request(number: int = 1, **kwargs: Any) -> PullRequest:
    """
    Create a PullRequest with customizable fields.

    Args:
        number: Pull request number
        **kwargs: Additional fields to override

    Returns:
        PullRequest object
    """
    defaults: dict[str, Any] = {
        "title": "Adding/updating LICENSE",
        "state": "open",
        "html_url": f"https://github.com/acme/widget/pull/{number}",
        "head": "autoupdate-20240115103000",
        "base": "main",
        "author": "octocat",
        "created_at": datetime(2024, 1, 15, 10, 30, 0),
    }
    defaults.update(kwargs)
    return PullRequest(number=number, **defaults)


# ============================================================================
# Mock Fixtures
# ============================================================================


@pytest.fixture
def mock_client() -> Generator[MockGitHubClient, None, None]:
    """
    Provide a MockGitHubClient for testing.

    Example:
        ```python
        def test_push(mock_client):
            mock_client.add_repository(create_mock_repository("acme/a"))
            Huborg(mock_client, "acme").push_template("LICENSE", "LICENSE")
            assert mock_client.was_called("pulls.create")
        ```
    """
    client = MockGitHubClient()
    yield client
    client.reset()


@pytest.fixture
def mock_git() -> MockGitHelper:
    """Provide a MockGitHelper for local sync tests."""
    return MockGitHelper()


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def sample_repository() -> Repository:
    """Provide a sample Repository object."""
    return create_mock_repository(
        "acme/widget",
        license=License(key="apache-2.0", name="Apache License 2.0", spdx_id="Apache-2.0"),
    )


@pytest.fixture
def archived_repository() -> Repository:
    """Provide a sample archived Repository object."""
    return create_mock_repository("acme/legacy", archived=True)


@pytest.fixture
def sample_pull_request() -> PullRequest:
    """Provide a sample PullRequest object."""
    return create_mock_pull_request()


@pytest.fixture
def template_file(tmp_path: Any) -> Any:
    """Provide a small template file on disk."""
    path = tmp_path / "template.txt"
    path.write_text("Copyright Acme\n", encoding="utf-8")
    return path
