"""
Pytest plugin for Huborg testing fixtures.

This module re-exports all fixtures from fixtures.py so they can be
automatically discovered by pytest when this package is installed.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["huborg.testing.conftest"]

Or import the fixtures directly:

    from huborg.testing.fixtures import mock_client, sample_repository
"""

# Re-export all fixtures for pytest auto-discovery
from huborg.testing.fixtures import (
    archived_repository,
    mock_client,
    mock_git,
    sample_pull_request,
    sample_repository,
    template_file,
)

__all__ = [
    "mock_client",
    "mock_git",
    "sample_repository",
    "archived_repository",
    "sample_pull_request",
    "template_file",
]
