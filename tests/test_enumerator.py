"""
Tests for repository enumeration and filtering.

Feature: repository enumeration
"""

import re

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from huborg.enumerator import RepositoryEnumerator
from huborg.exceptions import AuthenticationError
from huborg.filters import AcceptAll, PatternFilter, PredicateFilter, RepositoryFilter
from huborg.logging import null_logger
from huborg.testing import MockGitHubClient, create_mock_repository

repo_names = st.lists(
    st.text(alphabet="abcdefghijklmnopqrstuvwxyz-", min_size=1, max_size=12),
    unique=True,
    max_size=12,
)


def build_client(names_by_org: dict[str, list[str]]) -> MockGitHubClient:
    client = MockGitHubClient()
    for org, names in names_by_org.items():
        for name in names:
            client.add_repository(create_mock_repository(f"{org}/{name}"))
    return client


def test_organization_and_api_order_preserved() -> None:
    client = build_client({"acme": ["b", "a"], "labs": ["z", "c"]})
    enumerator = RepositoryEnumerator(client, logger=null_logger())

    repos = enumerator.enumerate(["labs", "acme"])

    assert [repo.full_name for repo in repos] == ["labs/z", "labs/c", "acme/b", "acme/a"]


def test_default_filter_accepts_all() -> None:
    client = build_client({"acme": ["a", "b", "c"]})

    repos = RepositoryEnumerator(client, logger=null_logger()).enumerate(["acme"])

    assert len(repos) == 3


def test_pattern_filter_matches_full_name() -> None:
    client = build_client({"acme": ["hyrax", "Hyrax-docs", "valkyrie"]})
    enumerator = RepositoryEnumerator(client, logger=null_logger())

    repos = enumerator.enumerate(["acme"], PatternFilter(re.compile("hyrax", re.IGNORECASE)))

    assert [repo.name for repo in repos] == ["hyrax", "Hyrax-docs"]


def test_filter_receives_client_as_context() -> None:
    client = build_client({"acme": ["a"]})
    seen = []

    class Recording(RepositoryFilter):
        def matches(self, context, repository):
            seen.append(context)
            return True

    RepositoryEnumerator(client, logger=null_logger()).enumerate(["acme"], Recording())

    assert seen == [client]


def test_filter_runs_after_every_organization_is_listed() -> None:
    client = build_client({"acme": ["a"], "labs": ["b"]})

    def check(context, repository):
        # Both listings are complete before the first repository is filtered
        assert context.call_count("orgs.list_repositories") == 2
        return True

    repos = RepositoryEnumerator(client, logger=null_logger()).enumerate(
        ["acme", "labs"], PredicateFilter(check)
    )

    assert len(repos) == 2


def test_enumeration_failure_aborts_run() -> None:
    client = build_client({"acme": ["a"], "labs": ["b"]})
    client.orgs.configure_list_repositories(
        error=AuthenticationError("UNAUTHORIZED", "Bad credentials"), org="labs"
    )

    with pytest.raises(AuthenticationError):
        RepositoryEnumerator(client, logger=null_logger()).enumerate(["acme", "labs"])


@given(names=repo_names, needle=st.sampled_from(["a", "e", "-", "zz"]))
@settings(max_examples=50)
def test_filter_purity(names: list[str], needle: str) -> None:
    """
    Enumerating with a filter equals enumerating everything and applying the
    filter afterwards; the listing itself is unchanged.
    """
    client = build_client({"acme": names})
    enumerator = RepositoryEnumerator(client, logger=null_logger())
    predicate = PredicateFilter(lambda context, repo: needle in repo.name)

    everything = enumerator.enumerate(["acme"], AcceptAll())
    filtered = enumerator.enumerate(["acme"], predicate)

    assert filtered == [repo for repo in everything if predicate.matches(client, repo)]
    assert client.call_count("orgs.list_repositories") == 2
