"""Enumeration of the repositories that make up a run's working set."""

import logging
from collections.abc import Sequence
from typing import Any

from huborg.filters import AcceptAll, RepositoryFilter
from huborg.logging import get_logger
from huborg.types.repos import Repository


class RepositoryEnumerator:
    """
    Fetch and filter the repositories of one or more organizations.

    Every organization is paged through completely before the filter sees a
    single repository, so a filter always works against a consistent list.
    Errors are not caught here: a failed page aborts the whole enumeration.
    """

    def __init__(self, client: Any, logger: logging.Logger | None = None) -> None:
        """
        Args:
            client: GitHubClient (or a compatible mock) exposing ``orgs``
            logger: Logger for progress messages (default: huborg.enumerate)
        """
        self.client = client
        self.logger = logger or get_logger("enumerate")

    def enumerate(
        self,
        org_names: Sequence[str],
        repository_filter: RepositoryFilter | None = None,
    ) -> list[Repository]:
        """
        Return the filtered repositories of every organization.

        Args:
            org_names: Organizations, in the order their repositories are returned
            repository_filter: Working set predicate (default: AcceptAll)

        Returns:
            Repositories in organization order, then API order

        Raises:
            HuborgError: If any organization cannot be listed
        """
        repository_filter = repository_filter or AcceptAll()

        repositories: list[Repository] = []
        for org_name in org_names:
            self.logger.info("Fetching repositories for '%s'", org_name)
            fetched = self.client.orgs.list_repositories(org_name)
            self.logger.info(
                "Finished fetching %d repositories for '%s'", len(fetched), org_name
            )
            repositories.extend(fetched)

        selected = [
            repo for repo in repositories
            if repository_filter.matches(self.client, repo)
        ]
        self.logger.info(
            "Selected %d of %d repositories with %r",
            len(selected),
            len(repositories),
            repository_filter,
        )
        return selected
