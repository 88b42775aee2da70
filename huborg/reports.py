"""Read-only reporting passes over an enumerated working set."""

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any

from huborg.logging import get_logger
from huborg.types.pulls import PullRequest
from huborg.types.repos import Repository

ALL = ":all"


@dataclass
class LicenseFinding:
    """License status of one repository."""

    repository: Repository
    status: str  # "allowed", "disallowed" or "missing"
    license_key: str | None = None


class LicenseAuditor:
    """
    Flag repositories without a license, or with one outside an allow list.

    License keys are GitHub's (see https://api.github.com/licenses), e.g.
    "apache-2.0" or "mit".
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or get_logger("report")

    def audit(
        self,
        repositories: Iterable[Repository],
        skip_private: bool = True,
        skip_archived: bool = True,
        allowed_licenses: str | Iterable[str] = ALL,
    ) -> Iterator[LicenseFinding]:
        if allowed_licenses == ALL:
            allowed = None
        elif isinstance(allowed_licenses, str):
            allowed = {allowed_licenses}
        else:
            allowed = set(allowed_licenses)

        for repo in repositories:
            if skip_private and repo.private:
                continue
            if skip_archived and repo.archived:
                continue

            if repo.license is None:
                self.logger.error("%s is missing a license", repo.full_name)
                yield LicenseFinding(repo, "missing")
                continue

            key = repo.license.key
            self.logger.info('%s has "%s"', repo.full_name, key)
            if allowed is None or key in allowed:
                yield LicenseFinding(repo, "allowed", key)
            else:
                self.logger.error(
                    '%s has "%s" which is not in %s', repo.full_name, key, sorted(allowed)
                )
                yield LicenseFinding(repo, "disallowed", key)


class PullRequestCollector:
    """Yield the pull requests of every repository in the working set."""

    def __init__(self, client: Any, logger: logging.Logger | None = None) -> None:
        self.client = client
        self.logger = logger or get_logger("report")

    def collect(
        self,
        repositories: Iterable[Repository],
        skip_archived: bool = True,
        query: dict[str, Any] | None = None,
    ) -> Iterator[tuple[PullRequest, Repository]]:
        """
        Args:
            repositories: The enumerated working set
            skip_archived: Ignore archived repositories
            query: Pull request list filters (default: {"state": "open"})

        Yields:
            (pull request, repository) pairs
        """
        query = query or {"state": "open"}
        for repo in repositories:
            if skip_archived and repo.archived:
                continue
            self.logger.info("Fetching pull requests for '%s' with query %s", repo.full_name, query)
            for pull in self.client.pulls.list(repo.full_name, query):
                yield pull, repo
