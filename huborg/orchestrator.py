"""
Organization-wide operations.

``Huborg`` enumerates the repositories of the configured organizations and
hands each one to the component that does the work:

* push_template - push a file to all repositories
* synchronize_mailmap - ensure all git .mailmap files are synchronized
* clone_and_rebase - download all repositories for the organizations
* audit_license - check the licenses of the organizations
* each_pull_request_with_repo - list pull requests across repositories

Per-repository failures are logged and returned as results; only
configuration and enumeration failures are raised.
"""

import logging
import os
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path
from typing import Any

from huborg.batch import CancellationToken, run_each
from huborg.client import GitHubClient
from huborg.deployer import DeployResult, RemoteTemplateDeployer
from huborg.enumerator import RepositoryEnumerator
from huborg.exceptions import ConfigurationError
from huborg.filters import AcceptAll, PatternFilter, RepositoryFilter
from huborg.git import GitHelper
from huborg.local_sync import LocalSyncEngine, SyncResult
from huborg.logging import get_logger
from huborg.mailmap import MailmapSynchronizer, MailmapSyncResult
from huborg.reports import ALL, LicenseAuditor, LicenseFinding, PullRequestCollector
from huborg.types.pulls import PullRequest
from huborg.types.repos import Repository


class Huborg:
    """
    Bulk operations across every repository of one or more organizations.

    Example:
        ```python
        from huborg import GitHubClient, Huborg, PatternFilter

        client = GitHubClient.from_env()
        huborg = Huborg(
            client,
            org_names=["samvera", "samvera-labs"],
            repository_filter=PatternFilter(r"hyrax"),
        )
        huborg.push_template(template="templates/CODE_OF_CONDUCT.md",
                             filename="CODE_OF_CONDUCT.md")
        ```
    """

    def __init__(
        self,
        client: Any,
        org_names: str | Sequence[str],
        repository_filter: RepositoryFilter | None = None,
        logger: logging.Logger | None = None,
        git: GitHelper | None = None,
    ) -> None:
        """
        Args:
            client: GitHubClient (or MockGitHubClient in tests)
            org_names: Organization login(s) whose repositories are operated on
            repository_filter: Limits the working set (default: AcceptAll)
            logger: Logger shared by every component (default: the huborg logger)
            git: Local git binding used by clone_and_rebase
        """
        self.client = client
        self.org_names = [org_names] if isinstance(org_names, str) else list(org_names)
        if not self.org_names:
            raise ConfigurationError("At least one organization name is required")
        self.repository_filter = repository_filter or AcceptAll()
        self.logger = logger or get_logger()

        self.enumerator = RepositoryEnumerator(client, logger=self.logger)
        self.deployer = RemoteTemplateDeployer(client, logger=self.logger)
        self.mailmap = MailmapSynchronizer(client, deployer=self.deployer, logger=self.logger)
        self.local_sync = LocalSyncEngine(git=git, logger=self.logger)
        self.license_auditor = LicenseAuditor(logger=self.logger)
        self.pull_requests = PullRequestCollector(client, logger=self.logger)

    @classmethod
    def from_env(cls, logger: logging.Logger | None = None) -> "Huborg":
        """
        Build from environment variables.

        Environment variables:
            GITHUB_ACCESS_TOKEN: Access token (required)
            GITHUB_ORG_NAME: Organization name(s), comma separated (required)
            GITHUB_API_URL: Base URL for API (optional)
            HUBORG_REPOSITORY_PATTERN: Regular expression on "org/name" (optional)

        Raises:
            ConfigurationError: If required environment variables are missing
        """
        org_names = [
            name.strip()
            for name in os.environ.get("GITHUB_ORG_NAME", "").split(",")
            if name.strip()
        ]
        if not org_names:
            raise ConfigurationError("GITHUB_ORG_NAME environment variable not set")

        pattern = os.environ.get("HUBORG_REPOSITORY_PATTERN")
        repository_filter = PatternFilter(pattern) if pattern else None
        return cls(
            GitHubClient.from_env(),
            org_names=org_names,
            repository_filter=repository_filter,
            logger=logger,
        )

    def repositories(self) -> list[Repository]:
        """Enumerate the working set; raises on any listing failure."""
        return self.enumerator.enumerate(self.org_names, self.repository_filter)

    def push_template(
        self,
        template: str | Path,
        filename: str,
        overwrite: bool = False,
        max_workers: int = 1,
        cancel: CancellationToken | None = None,
    ) -> list[DeployResult]:
        """
        Push a local file to every non-archived repository via pull requests.

        Args:
            template: Path of the file on this machine
            filename: Relative path of the file in each repository
            overwrite: Replace the file where it exists (yes for a .mailmap,
                no for a LICENSE)
            max_workers: Repositories processed concurrently
            cancel: Optional token checked between repositories

        Raises:
            FileNotFoundError: If the template does not exist
        """
        if not Path(template).is_file():
            raise FileNotFoundError(f"Template not found: {template}")

        repositories = self.repositories()
        results = run_each(
            repositories,
            lambda repo: self.deployer.deploy(repo, template, filename, overwrite=overwrite),
            max_workers=max_workers,
            cancel=cancel,
            logger=self.logger,
        )
        self._summarize("push_template", results)
        return results

    def synchronize_mailmap(
        self,
        template: str | Path,
        consolidated_template: str | Path | None = None,
        max_workers: int = 1,
        cancel: CancellationToken | None = None,
    ) -> MailmapSyncResult:
        """
        Merge every repository's .mailmap into the template and push the result.

        Args:
            template: Seed mailmap; pass an empty file when there is none yet
            consolidated_template: Where the merged file is written (default: template)
        """
        repositories = self.repositories()
        result = self.mailmap.synchronize(
            template,
            repositories,
            consolidated_template=consolidated_template,
            max_workers=max_workers,
            cancel=cancel,
        )
        self._summarize("synchronize_mailmap", result.deployments)
        return result

    def clone_and_rebase(
        self,
        directory: str | Path,
        skip_forked: bool = False,
        skip_archived: bool = False,
        skip_dirty: bool = True,
        force: bool = False,
        shallow: bool = False,
        max_workers: int = 1,
        cancel: CancellationToken | None = None,
    ) -> list[SyncResult]:
        """
        Clone missing repositories under ``directory`` and update existing ones.

        Args:
            directory: Root for the working copies
            skip_forked: Ignore repositories that are forks
            skip_archived: Ignore archived repositories
            skip_dirty: Leave working copies with local changes alone
            force: Discard local changes before pulling
            shallow: Clone into ``directory/name`` instead of ``directory/org/name``
        """
        repositories = [
            repo for repo in self.repositories()
            if not (skip_archived and repo.archived) and not (skip_forked and repo.fork)
        ]
        results = run_each(
            repositories,
            lambda repo: self.local_sync.sync(
                repo, directory, skip_dirty=skip_dirty, force=force, shallow=shallow
            ),
            max_workers=max_workers,
            cancel=cancel,
            logger=self.logger,
        )
        self._summarize("clone_and_rebase", results)
        return results

    def audit_license(
        self,
        skip_private: bool = True,
        skip_archived: bool = True,
        allowed_licenses: str | Iterable[str] = ALL,
    ) -> list[LicenseFinding]:
        """Log (as errors) repositories with a missing or disallowed license."""
        return list(
            self.license_auditor.audit(
                self.repositories(),
                skip_private=skip_private,
                skip_archived=skip_archived,
                allowed_licenses=allowed_licenses,
            )
        )

    def each_pull_request_with_repo(
        self,
        skip_archived: bool = True,
        query: dict[str, Any] | None = None,
    ) -> Iterator[tuple[PullRequest, Repository]]:
        """
        Yield each pull request with its repository.

        Example:
            ```python
            with open("pull-requests.tsv", "w") as out:
                out.write("REPO_FULL_NAME\\tPR_CREATED_AT\\tPR_URL\\tPR_TITLE\\n")
                for pull, repo in huborg.each_pull_request_with_repo():
                    out.write(f"{repo.full_name}\\t{pull.created_at}\\t{pull.html_url}\\t{pull.title}\\n")
            ```
        """
        yield from self.pull_requests.collect(
            self.repositories(), skip_archived=skip_archived, query=query
        )

    def _summarize(self, operation: str, results: Sequence[DeployResult | SyncResult]) -> None:
        counts: dict[str, int] = {}
        for result in results:
            counts[result.status] = counts.get(result.status, 0) + 1
        summary = ", ".join(f"{status}={count}" for status, count in sorted(counts.items()))
        self.logger.info("%s finished for %d repositories (%s)", operation, len(results), summary or "none")
