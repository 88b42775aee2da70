"""Repository-related data models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class License:
    """License detected by GitHub for a repository."""

    key: str  # e.g. "apache-2.0", see https://api.github.com/licenses
    name: str
    spdx_id: str | None = None


@dataclass(frozen=True)
class Repository:
    """Snapshot of a repository as listed for an organization."""

    full_name: str  # "org/name"
    name: str
    owner: str
    default_branch: str
    clone_url: str
    archived: bool = False
    fork: bool = False
    private: bool = False
    license: License | None = None
    html_url: str | None = None


@dataclass
class GitRef:
    """A named reference and the commit it points to."""

    ref: str  # "refs/heads/main"
    sha: str


@dataclass
class ContentFile:
    """A file read through the contents API."""

    path: str
    sha: str
    content: bytes
