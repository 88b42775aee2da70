"""
Consolidation of git ``.mailmap`` files across an organization.

Synchronizing is a two-phase process. The gather phase unions the lines of a
seed template with every repository's ``.mailmap`` (archived repositories
included). The sorted union is written to disk, and only then is it pushed
to every non-archived repository as a pull request that overwrites the
existing file.

See https://git-scm.com/docs/gitmailmap for the file format.
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from huborg.batch import CancellationToken, run_each
from huborg.deployer import DeployResult, RemoteTemplateDeployer
from huborg.exceptions import NotFoundError
from huborg.logging import get_logger
from huborg.types.repos import Repository

MAILMAP_PATH = ".mailmap"


def mailmap_lines(text: str) -> list[str]:
    """Split mailmap text into lines, dropping blank ones."""
    return [line for line in text.splitlines() if line.strip()]


def render_mailmap(lines: Iterable[str]) -> str:
    """Render lines sorted and newline-terminated."""
    return "".join(f"{line}\n" for line in sorted(set(lines)))


@dataclass
class MailmapSyncResult:
    """Canonical mailmap and the outcome of pushing it out."""

    lines: list[str]
    path: Path
    deployments: list[DeployResult] = field(default_factory=list)


class MailmapSynchronizer:
    """Merge and redistribute ``.mailmap`` files."""

    def __init__(
        self,
        client: Any,
        deployer: RemoteTemplateDeployer | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.client = client
        self.logger = logger or get_logger("mailmap")
        self.deployer = deployer or RemoteTemplateDeployer(client)

    def gather(self, template: str | Path, repositories: Sequence[Repository]) -> set[str]:
        """
        Union the seed template's lines with every repository's ``.mailmap``.

        Raises:
            HuborgError: On any failure other than a missing ``.mailmap``
        """
        lines = set(mailmap_lines(Path(template).read_text(encoding="utf-8")))
        self.logger.info("Read %d line(s) from %s", len(lines), template)

        for repo in repositories:
            try:
                mailmap = self.client.repos.get_contents(
                    repo.full_name, MAILMAP_PATH, ref=repo.default_branch
                )
            except NotFoundError:
                self.logger.debug("%s has no %s", repo.full_name, MAILMAP_PATH)
                continue
            found = mailmap_lines(mailmap.content.decode("utf-8"))
            self.logger.info(
                "Merging %d line(s) from %s/%s", len(found), repo.full_name, MAILMAP_PATH
            )
            lines.update(found)

        return lines

    def write(self, lines: Iterable[str], path: str | Path) -> list[str]:
        """Persist the canonical mailmap and return its lines in file order."""
        rendered = render_mailmap(lines)
        Path(path).write_text(rendered, encoding="utf-8")
        self.logger.info("Wrote consolidated mailmap to %s", path)
        return rendered.splitlines()

    def redistribute(
        self,
        path: str | Path,
        repositories: Sequence[Repository],
        max_workers: int = 1,
        cancel: CancellationToken | None = None,
    ) -> list[DeployResult]:
        """Open an overwriting pull request in every non-archived repository."""
        targets = [repo for repo in repositories if not repo.archived]
        return run_each(
            targets,
            lambda repo: self.deployer.deploy(repo, path, MAILMAP_PATH, overwrite=True),
            max_workers=max_workers,
            cancel=cancel,
            logger=self.logger,
        )

    def synchronize(
        self,
        template: str | Path,
        repositories: Sequence[Repository],
        consolidated_template: str | Path | None = None,
        max_workers: int = 1,
        cancel: CancellationToken | None = None,
    ) -> MailmapSyncResult:
        """
        Gather, persist, then redistribute.

        Args:
            template: Seed mailmap; pass an empty file when there is none yet
            repositories: The enumerated working set
            consolidated_template: Where to write the merged file (default: template)
            max_workers: Parallelism for the redistribution phase
            cancel: Optional cancellation token for the redistribution phase

        Returns:
            MailmapSyncResult with the canonical lines and per-repository results
        """
        output = Path(consolidated_template or template)
        # The whole gather must succeed before anything is written or pushed
        lines = self.gather(template, repositories)
        written = self.write(lines, output)
        deployments = self.redistribute(output, repositories, max_workers, cancel)
        return MailmapSyncResult(lines=written, path=output, deployments=deployments)
