"""
Idempotent delivery of a file to a repository through a pull request.

For one repository the deployer resolves the default branch, checks whether
the destination already exists, creates a fresh branch, writes the file on
that branch and opens a pull request back to the default branch.
"""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from huborg.exceptions import HuborgError, NotFoundError
from huborg.logging import get_logger
from huborg.types.pulls import PullRequest
from huborg.types.repos import ContentFile, Repository

COMMIT_MESSAGE_TEMPLATE = "Adding/updating {path}\n\nThis was uploaded via automation."


def commit_message(path: str) -> str:
    """Build the commit message used for both the commit and the pull request."""
    return COMMIT_MESSAGE_TEMPLATE.format(path=path)


@dataclass
class DeployResult:
    """Outcome of deploying a file to one repository."""

    repository: Repository
    status: str  # "success", "skipped" or "failure"
    reason: str | None = None
    branch: str | None = None
    pull_request: PullRequest | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.status != "failure"


class BranchNamer:
    """
    Hand out branch names of the form ``<prefix>-<UTC YYYYMMDDHHMMSS>``.

    Timestamps only have second resolution, so a second name requested for the
    same repository within the same second gets a ``-<n>`` suffix instead of
    colliding with the first.
    """

    def __init__(
        self,
        prefix: str = "autoupdate",
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.prefix = prefix
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        # Names handed out during the current second, counted per repository
        self._second: str | None = None
        self._issued: dict[str, int] = {}
        self._lock = threading.Lock()

    def next_name(self, full_name: str) -> str:
        second = self._clock().strftime("%Y%m%d%H%M%S")
        base = f"{self.prefix}-{second}"
        with self._lock:
            if second != self._second:
                self._second = second
                self._issued.clear()
            count = self._issued.get(full_name, 0)
            self._issued[full_name] = count + 1
        return f"{base}-{count}" if count else base


class RemoteTemplateDeployer:
    """
    Push a local file into repositories, one pull request per repository.

    Archived repositories are never touched. When the destination already
    exists and ``overwrite`` is false nothing is created, which makes repeated
    runs no-ops once the file has landed.

    Example:
        ```python
        deployer = RemoteTemplateDeployer(client)
        result = deployer.deploy(repo, "templates/LICENSE", "LICENSE")
        if result.status == "success":
            print(result.pull_request.html_url)
        ```
    """

    def __init__(
        self,
        client: Any,
        logger: logging.Logger | None = None,
        branch_namer: BranchNamer | None = None,
    ) -> None:
        """
        Args:
            client: GitHubClient (or a compatible mock) exposing ``repos`` and ``pulls``
            logger: Logger for progress and failures (default: huborg.deploy)
            branch_namer: Source of new branch names
        """
        self.client = client
        self.logger = logger or get_logger("deploy")
        self.branch_namer = branch_namer or BranchNamer()

    def deploy(
        self,
        repository: Repository,
        template: str | Path,
        destination: str,
        overwrite: bool = False,
    ) -> DeployResult:
        """
        Deploy ``template`` to ``destination`` in one repository.

        Args:
            repository: Target repository
            template: Local file whose bytes are written
            destination: Path relative to the repository root
            overwrite: Replace the file when it already exists

        Returns:
            DeployResult; remote failures are reported here, never raised

        Raises:
            FileNotFoundError: If the template does not exist
        """
        if repository.archived:
            self.logger.info("Skipping %s as it is archived", repository.full_name)
            return DeployResult(repository, "skipped", reason="archived")

        content = Path(template).read_bytes()
        full_name = repository.full_name
        branch_name: str | None = None

        try:
            # Reads use "heads/<branch>", creation needs "refs/heads/<branch>"
            base = self.client.repos.get_ref(
                full_name, f"heads/{repository.default_branch}"
            )
            existing = self._read_existing(repository, destination)

            if existing is not None and not overwrite:
                self.logger.info(
                    "Skipping %s as %s already exists", full_name, destination
                )
                return DeployResult(repository, "skipped", reason="exists")

            message = commit_message(destination)
            branch_name = self.branch_namer.next_name(full_name)
            self.logger.info(
                "Creating pull request for %s on %s", destination, full_name
            )
            self.client.repos.create_ref(full_name, f"refs/heads/{branch_name}", base.sha)

            if existing is None:
                self.client.repos.create_contents(
                    full_name, destination, message, content, branch=branch_name
                )
            else:
                self.client.repos.update_contents(
                    full_name,
                    destination,
                    message,
                    content,
                    sha=existing.sha,
                    branch=branch_name,
                )

            pull_request = self.client.pulls.create(
                full_name,
                head=branch_name,
                base=repository.default_branch,
                title=message.split("\n", 1)[0],
                body=message,
            )
        except HuborgError as e:
            self.logger.error(
                "Failed to push %s to %s: %s", destination, full_name, e
            )
            return DeployResult(
                repository, "failure", reason=e.code, branch=branch_name, error=e
            )

        self.logger.info(
            "Opened pull request #%s on %s", pull_request.number, full_name
        )
        return DeployResult(
            repository, "success", branch=branch_name, pull_request=pull_request
        )

    def _read_existing(
        self, repository: Repository, destination: str
    ) -> ContentFile | None:
        try:
            return self.client.repos.get_contents(
                repository.full_name, destination, ref=repository.default_branch
            )
        except NotFoundError:
            return None
