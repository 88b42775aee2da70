"""Repositories resource client: refs and file contents."""

import base64
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from huborg.exceptions import ValidationError
from huborg.types.repos import ContentFile, GitRef, License, Repository

if TYPE_CHECKING:
    from huborg.transport import HTTPTransport


def parse_repository(data: dict[str, Any]) -> Repository:
    """Parse a repository object from the GitHub API."""
    license_data = data.get("license")
    license_ = None
    if license_data:
        license_ = License(
            key=license_data["key"],
            name=license_data.get("name", license_data["key"]),
            spdx_id=license_data.get("spdx_id"),
        )
    owner = data.get("owner") or {}
    return Repository(
        full_name=data["full_name"],
        name=data["name"],
        owner=owner.get("login", data["full_name"].split("/", 1)[0]),
        default_branch=data.get("default_branch", "main"),
        clone_url=data.get("clone_url", ""),
        archived=data.get("archived", False),
        fork=data.get("fork", False),
        private=data.get("private", False),
        license=license_,
        html_url=data.get("html_url"),
    )


def _contents_path(full_name: str, path: str) -> str:
    return f"/repos/{full_name}/contents/{quote(path.lstrip('/'))}"


class ReposClient:
    """Client for repository refs and contents."""

    def __init__(self, transport: "HTTPTransport") -> None:
        """
        Initialize the repos client.

        Args:
            transport: HTTP transport for making requests
        """
        self.transport = transport

    def get_ref(self, full_name: str, ref: str) -> GitRef:
        """
        Resolve a reference to its commit.

        Args:
            full_name: Repository name in "org/name" form
            ref: Reference without the "refs/" prefix, e.g. "heads/main"

        Returns:
            GitRef with the sha the reference points to

        Raises:
            NotFoundError: If the reference does not exist
        """
        data = self.transport.request("GET", f"/repos/{full_name}/git/ref/{ref}")
        return GitRef(ref=data["ref"], sha=data["object"]["sha"])

    def create_ref(self, full_name: str, ref: str, sha: str) -> GitRef:
        """
        Create a reference (a branch when ref is "refs/heads/<name>").

        Args:
            full_name: Repository name in "org/name" form
            ref: Fully qualified reference, e.g. "refs/heads/autoupdate-20240101"
            sha: Commit the new reference should point to

        Raises:
            ValidationError: If the reference already exists
        """
        data = self.transport.request(
            "POST",
            f"/repos/{full_name}/git/refs",
            body={"ref": ref, "sha": sha},
        )
        return GitRef(ref=data["ref"], sha=data["object"]["sha"])

    def get_contents(
        self, full_name: str, path: str, ref: str | None = None
    ) -> ContentFile:
        """
        Read a file through the contents API.

        Args:
            full_name: Repository name in "org/name" form
            path: Path of the file relative to the repository root
            ref: Branch, tag or sha to read from (default: the default branch)

        Returns:
            ContentFile with the blob sha and decoded bytes

        Raises:
            NotFoundError: If the file (or one of its directories) does not exist
            ValidationError: If the path names a directory, symlink or submodule
        """
        params = {"ref": ref} if ref else None
        data = self.transport.request("GET", _contents_path(full_name, path), params=params)
        if not isinstance(data, dict) or data.get("type", "file") != "file":
            kind = "directory" if isinstance(data, list) else (data or {}).get("type", "unknown")
            raise ValidationError("NOT_A_FILE", f"{path} in {full_name} is a {kind}, not a file")

        encoding = data.get("encoding", "base64")
        if encoding == "none":
            # Files over 1 MB come back without content; read them as a blob
            return ContentFile(
                path=data.get("path", path),
                sha=data["sha"],
                content=self.get_blob(full_name, data["sha"]),
            )
        encoded = data.get("content") or ""
        if encoding == "base64":
            content = base64.b64decode(encoded)
        else:
            content = encoded.encode("utf-8")
        return ContentFile(path=data.get("path", path), sha=data["sha"], content=content)

    def get_blob(self, full_name: str, sha: str) -> bytes:
        """
        Read a blob by sha (up to 100 MB, unlike the contents API).

        Raises:
            NotFoundError: If the blob does not exist
        """
        data = self.transport.request("GET", f"/repos/{full_name}/git/blobs/{sha}")
        return base64.b64decode(data.get("content") or "")

    def create_contents(
        self,
        full_name: str,
        path: str,
        message: str,
        content: bytes,
        branch: str,
    ) -> str:
        """
        Create a new file on a branch.

        Returns:
            The sha of the commit that added the file
        """
        return self._put_contents(full_name, path, message, content, branch, None)

    def update_contents(
        self,
        full_name: str,
        path: str,
        message: str,
        content: bytes,
        sha: str,
        branch: str,
    ) -> str:
        """
        Replace an existing file on a branch.

        Args:
            sha: Blob sha of the file being replaced; the API rejects the
                update with a conflict when the file changed since it was read

        Returns:
            The sha of the commit that updated the file

        Raises:
            ConflictError: If ``sha`` no longer matches the file
        """
        return self._put_contents(full_name, path, message, content, branch, sha)

    def _put_contents(
        self,
        full_name: str,
        path: str,
        message: str,
        content: bytes,
        branch: str,
        sha: str | None,
    ) -> str:
        body: dict[str, Any] = {
            "message": message,
            "content": base64.b64encode(content).decode("ascii"),
            "branch": branch,
        }
        if sha is not None:
            body["sha"] = sha

        data = self.transport.request("PUT", _contents_path(full_name, path), body=body)
        return data["commit"]["sha"]
