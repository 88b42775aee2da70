"""
Keeping local clones in step with their remote default branch.

For each repository: clone it when there is no local copy yet, otherwise
deal with local changes (discard, skip or stash) and pull the default branch.

With ``directory="/Iceflow"`` and an organization "penguin" owning
"paradigm" and "raft", the default layout is::

    /Iceflow
    └── penguin
        ├── paradigm
        └── raft

and with ``shallow=True``::

    /Iceflow
    ├── paradigm
    └── raft
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from huborg.exceptions import GitCommandError
from huborg.git import GitHelper
from huborg.logging import get_logger
from huborg.types.repos import Repository

STASH_MESSAGE = "Stashing via huborg clone_and_rebase"


@dataclass
class SyncResult:
    """Outcome of synchronizing one local clone."""

    repository: Repository
    path: Path
    status: str  # "cloned", "updated", "skipped" or "failure"
    reason: str | None = None
    stashed: bool = False
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.status != "failure"


def local_path_for(repository: Repository, directory: str | Path, shallow: bool = False) -> Path:
    """Map a repository to its working copy location under ``directory``."""
    if shallow:
        return Path(directory) / repository.name
    return Path(directory) / repository.owner / repository.name


class LocalSyncEngine:
    """Clone or update the local working copy of a repository."""

    def __init__(
        self,
        git: GitHelper | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.logger = logger or get_logger("sync")
        self.git = git or GitHelper()

    def sync(
        self,
        repository: Repository,
        directory: str | Path,
        skip_dirty: bool = True,
        force: bool = False,
        shallow: bool = False,
    ) -> SyncResult:
        """
        Bring one working copy up to date.

        Args:
            repository: Repository to synchronize
            directory: Root under which working copies live
            skip_dirty: Leave working copies with uncommitted changes alone
                (when false, those changes are stashed instead)
            force: Discard all local changes, untracked files included; takes
                precedence over ``skip_dirty``
            shallow: Use ``directory/name`` instead of ``directory/org/name``

        Returns:
            SyncResult; git and filesystem failures are reported here, never raised
        """
        path = local_path_for(repository, directory, shallow)
        try:
            if not path.is_dir():
                return self._clone(repository, path)
            return self._update(repository, path, skip_dirty, force)
        except GitCommandError as e:
            self.logger.error("Failed to synchronize %s at %s: %s", repository.full_name, path, e)
            return SyncResult(repository, path, "failure", reason=e.code, error=e)
        except OSError as e:
            self.logger.error("Failed to prepare %s at %s: %s", repository.full_name, path, e)
            return SyncResult(repository, path, "failure", reason="FILESYSTEM_ERROR", error=e)

    def _clone(self, repository: Repository, path: Path) -> SyncResult:
        parent = path.parent
        self.logger.info("Creating %s", parent)
        parent.mkdir(parents=True, exist_ok=True)
        self.logger.info("Cloning %s into %s", repository.name, parent)
        self.git.clone(repository.clone_url, path)
        self.logger.info("Finished cloning %s into %s", repository.name, parent)
        return SyncResult(repository, path, "cloned")

    def _update(
        self, repository: Repository, path: Path, skip_dirty: bool, force: bool
    ) -> SyncResult:
        stashed = False
        if force:
            self.logger.info("Forcing and resetting to a clean %s", path)
            self.git.clean(path, force=True, directories=True)
            self.git.reset(path, hard=True)
        elif self.git.status(path).dirty:
            if skip_dirty:
                self.logger.info(
                    "Skipping %s as it has a dirty git index", repository.full_name
                )
                return SyncResult(repository, path, "skipped", reason="dirty")
            self.logger.info("Stashing changes on %s", path)
            self.git.add_all(path)
            self.git.stash(path, STASH_MESSAGE)
            stashed = True

        branch = repository.default_branch
        self.git.checkout(path, branch)
        self.logger.info("Pulling down %s branch from origin for %s", branch, path)
        self.git.pull(path, "origin", branch)
        return SyncResult(repository, path, "updated", stashed=stashed)
