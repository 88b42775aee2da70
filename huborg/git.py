"""
Git helper utilities for Huborg.

Thin subprocess binding of the local ``git`` executable: clone, status,
clean, reset, stash, checkout and pull.
"""

import logging
import os
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

from huborg.exceptions import GitCommandError
from huborg.logging import get_logger, mask_sensitive_data


@dataclass
class WorkingTreeStatus:
    """Paths reported by ``git status``, grouped by kind of change."""

    modified: list[str] = field(default_factory=list)
    added: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    untracked: list[str] = field(default_factory=list)

    @property
    def dirty(self) -> bool:
        """True when tracked content was modified, added or deleted."""
        return bool(self.modified or self.added or self.deleted)


def parse_porcelain_status(output: str) -> WorkingTreeStatus:
    """
    Parse ``git status --porcelain`` (v1) output.

    Args:
        output: Raw command output

    Returns:
        WorkingTreeStatus
    """
    status = WorkingTreeStatus()
    for line in output.splitlines():
        if len(line) < 4:
            continue
        code, path = line[:2], line[3:]
        if " -> " in path:
            path = path.split(" -> ", 1)[1]

        if code == "??":
            status.untracked.append(path)
        elif "D" in code:
            status.deleted.append(path)
        elif code[0] == "A":
            status.added.append(path)
        else:
            status.modified.append(path)
    return status


class GitHelper:
    """
    Run git commands against local working copies.

    Every command runs non-interactively (no credential prompts) and raises
    GitCommandError when git exits with a non-zero status.

    Example:
        ```python
        git = GitHelper()
        git.clone("https://github.com/samvera/hyrax.git", "/src/samvera/hyrax")
        if not git.status("/src/samvera/hyrax").dirty:
            git.pull("/src/samvera/hyrax", "origin", "main")
        ```
    """

    def __init__(
        self,
        executable: str = "git",
        timeout: float | None = 600.0,
        logger: logging.Logger | None = None,
    ) -> None:
        """
        Args:
            executable: Name or path of the git binary
            timeout: Seconds before a single git command is abandoned
            logger: Logger for command tracing (default: huborg.git)
        """
        self.executable = executable
        self.timeout = timeout
        self.logger = logger or get_logger("git")

    def clone(self, clone_url: str, local_path: str | Path) -> None:
        """
        Clone a repository to a local path.

        Raises:
            GitCommandError: If git clone fails
        """
        self._run(["clone", clone_url, str(local_path)])

    def is_repository(self, local_path: str | Path) -> bool:
        """Return True when ``local_path`` is inside a git working tree."""
        try:
            self._run(["rev-parse", "--is-inside-work-tree"], cwd=local_path)
        except GitCommandError:
            return False
        return True

    def status(self, local_path: str | Path) -> WorkingTreeStatus:
        """Inspect the working tree for uncommitted changes."""
        output = self._run(["status", "--porcelain"], cwd=local_path)
        return parse_porcelain_status(output)

    def clean(
        self, local_path: str | Path, force: bool = True, directories: bool = True
    ) -> None:
        """Remove untracked files (and directories) from the working tree."""
        args = ["clean"]
        if force:
            args.append("-f")
        if directories:
            args.append("-d")
        self._run(args, cwd=local_path)

    def reset(self, local_path: str | Path, hard: bool = True) -> None:
        """Reset the index (and working tree, when hard) to HEAD."""
        self._run(["reset", "--hard"] if hard else ["reset"], cwd=local_path)

    def add_all(self, local_path: str | Path) -> None:
        """Stage every change, untracked files included."""
        self._run(["add", "--all", "."], cwd=local_path)

    def stash(self, local_path: str | Path, message: str) -> None:
        """Save staged and unstaged changes to a named stash entry."""
        self._run(["stash", "push", "--include-untracked", "-m", message], cwd=local_path)

    def checkout(self, local_path: str | Path, branch: str) -> None:
        self._run(["checkout", branch], cwd=local_path)

    def pull(self, local_path: str | Path, remote: str, branch: str) -> None:
        self._run(["pull", remote, branch], cwd=local_path)

    def _run(self, args: list[str], cwd: str | Path | None = None) -> str:
        cmd = [self.executable, *args]
        self.logger.debug("Running %s in %s", mask_sensitive_data(" ".join(cmd)), cwd or ".")
        try:
            result = subprocess.run(
                cmd,
                cwd=cwd,
                capture_output=True,
                text=True,
                env=self._get_git_env(),
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise GitCommandError(cmd, -1, f"timed out after {e.timeout} seconds") from e
        except OSError as e:
            raise GitCommandError(cmd, -1, str(e)) from e

        if result.returncode != 0:
            raise GitCommandError(cmd, result.returncode, mask_sensitive_data(result.stderr))
        return result.stdout

    def _get_git_env(self) -> dict[str, str]:
        env = os.environ.copy()
        env["GIT_TERMINAL_PROMPT"] = "0"
        return env
