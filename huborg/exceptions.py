"""Huborg exception classes."""


class HuborgError(Exception):
    """Base exception for all Huborg errors."""

    def __init__(
        self, code: str, message: str, request_id: str | None = None
    ) -> None:
        self.code = code
        self.message = message
        self.request_id = request_id
        super().__init__(f"[{code}] {message}")


class ConfigurationError(HuborgError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class AuthenticationError(HuborgError):
    """Raised when the access token is rejected."""

    pass


class AuthorizationError(HuborgError):
    """Raised when access is denied."""

    pass


class NotFoundError(HuborgError):
    """Raised when a resource is not found."""

    pass


class ConflictError(HuborgError):
    """Raised on conflicts (stale content sha, existing ref, etc.)."""

    pass


class RateLimitedError(HuborgError):
    """Raised when rate limited."""

    def __init__(
        self,
        code: str,
        message: str,
        retry_after: int,
        request_id: str | None = None,
    ) -> None:
        super().__init__(code, message, request_id)
        self.retry_after = retry_after


class ValidationError(HuborgError):
    """Raised on validation errors (422 and other client errors)."""

    pass


class ServerError(HuborgError):
    """Raised on server errors (5xx) and connection failures."""

    pass


class GitCommandError(HuborgError):
    """Raised when a local git command exits with a non-zero status."""

    def __init__(
        self,
        command: list[str],
        returncode: int,
        stderr: str = "",
    ) -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip() or f"exit status {returncode}"
        super().__init__("GIT_COMMAND_FAILED", f"{' '.join(command)}: {detail}")
