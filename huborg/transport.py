"""
HTTP Transport for Huborg.

Handles HTTP communication with the GitHub REST API: token authentication,
explicit timeouts, bounded retry on transient failures, and error response
parsing into typed exceptions.
"""

import random
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import httpx

from huborg.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    HuborgError,
    NotFoundError,
    RateLimitedError,
    ServerError,
    ValidationError,
)
from huborg.logging import log_http_request, log_http_response

API_VERSION = "2022-11-28"


@dataclass
class RetryConfig:
    """Configuration for automatic retry behavior."""

    max_retries: int = 3
    backoff_factor: float = 2.0
    retry_on: list[int] = field(default_factory=lambda: [429, 500, 502, 503, 504])
    respect_retry_after: bool = True
    max_backoff: float = 60.0  # Maximum backoff time in seconds
    jitter: float = 0.1  # Jitter factor (0.1 = ±10%)


class HTTPTransport:
    """
    HTTP transport layer with token authentication and retry logic.

    Handles:
    - Bearer token and GitHub API headers on every request
    - Exponential backoff with jitter for retries
    - Retry-After header respect for rate limiting
    - Error response parsing into typed exceptions
    - Link header pagination metadata
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: float = 30.0,
        retry_config: RetryConfig | None = None,
        http_transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize HTTP transport.

        Args:
            base_url: Base URL for API requests (e.g., "https://api.github.com")
            token: Personal access token or app installation token
            timeout: Request timeout in seconds
            retry_config: Configuration for retry behavior
            http_transport: Optional httpx transport (tests pass httpx.MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry_config = retry_config or RetryConfig()

        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            transport=http_transport,
            headers={
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {token}",
                "X-GitHub-Api-Version": API_VERSION,
            },
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "HTTPTransport":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> Any:
        """
        Make a request with automatic retry.

        Args:
            method: HTTP method (GET, POST, PUT, etc.)
            path: API path (e.g., "/orgs/acme/repos") or absolute URL
            params: Query parameters
            body: JSON request body

        Returns:
            Parsed JSON response, or None for empty responses

        Raises:
            HuborgError: On API errors
        """
        response = self._send(method, path, params, body)
        if not response.content:
            return None
        return response.json()

    def get_page(
        self, url: str, params: dict[str, Any] | None = None
    ) -> tuple[list[Any], str | None]:
        """
        Fetch one page of a list endpoint.

        Args:
            url: API path for the first page, or the absolute "next" URL
            params: Query parameters (only meaningful for the first page; the
                "next" URL already carries them)

        Returns:
            Tuple of (items on this page, URL of the next page or None)
        """
        response = self._send("GET", url, params, None)
        next_url = response.links.get("next", {}).get("url")
        data = response.json() if response.content else []
        return data, next_url

    def _send(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None,
        body: dict[str, Any] | None,
    ) -> httpx.Response:
        def make_request() -> httpx.Response:
            log_http_request(method, path, body=body)
            started = time.monotonic()
            response = self._client.request(method, path, params=params, json=body)
            log_http_response(
                response.status_code,
                str(response.request.url),
                elapsed_ms=(time.monotonic() - started) * 1000,
            )
            return response

        return self._execute_with_retry(make_request)

    def _execute_with_retry(
        self, request_fn: Callable[[], httpx.Response]
    ) -> httpx.Response:
        """
        Execute a request with automatic retry on retryable errors.

        Args:
            request_fn: Function that makes the HTTP request

        Returns:
            The successful response

        Raises:
            HuborgError: On non-retryable errors or after max retries
        """
        last_error: Exception | None = None

        for attempt in range(self.retry_config.max_retries + 1):
            try:
                response = request_fn()

                if response.status_code < 400:
                    return response

                error = self._parse_error_response(response)

                if not self._should_retry(response.status_code, attempt):
                    raise error

                last_error = error

                retry_after = response.headers.get("Retry-After")
                wait_time = self._get_backoff_time(attempt, retry_after)
                time.sleep(wait_time)

            except httpx.TimeoutException as e:
                if attempt >= self.retry_config.max_retries:
                    raise ServerError("TIMEOUT", str(e)) from e

                last_error = e
                time.sleep(self._get_backoff_time(attempt, None))

            except httpx.TransportError as e:
                # Network errors are retryable
                if attempt >= self.retry_config.max_retries:
                    raise ServerError("CONNECTION_ERROR", str(e)) from e

                last_error = e
                time.sleep(self._get_backoff_time(attempt, None))

        if last_error:
            if isinstance(last_error, HuborgError):
                raise last_error
            raise ServerError("MAX_RETRIES_EXCEEDED", str(last_error))

        raise ServerError("UNKNOWN_ERROR", "Request failed with no error details")

    def _should_retry(self, status_code: int, attempt: int) -> bool:
        """
        Determine if a request should be retried.

        Args:
            status_code: HTTP status code
            attempt: Current attempt number (0-indexed)

        Returns:
            True if the request should be retried
        """
        if attempt >= self.retry_config.max_retries:
            return False

        return status_code in self.retry_config.retry_on

    def _get_backoff_time(
        self, attempt: int, retry_after: str | None
    ) -> float:
        """
        Calculate backoff time for retry.

        Uses exponential backoff with jitter, respecting Retry-After header
        if present.

        Args:
            attempt: Current attempt number (0-indexed)
            retry_after: Value of Retry-After header (if present)

        Returns:
            Time to wait in seconds
        """
        if retry_after and self.retry_config.respect_retry_after:
            try:
                return min(float(retry_after), self.retry_config.max_backoff)
            except ValueError:
                pass  # Fall through to exponential backoff

        base_wait = self.retry_config.backoff_factor ** attempt

        jitter_range = base_wait * self.retry_config.jitter
        jitter = random.uniform(-jitter_range, jitter_range)
        wait_time = base_wait + jitter

        return min(wait_time, self.retry_config.max_backoff)

    def _parse_error_response(self, response: httpx.Response) -> HuborgError:
        """
        Parse an error response into a typed exception.

        GitHub error bodies look like ``{"message": "...", "documentation_url": "..."}``.

        Args:
            response: HTTP response with error status

        Returns:
            Appropriate HuborgError subclass
        """
        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        status_code = response.status_code
        message = data.get("message") or f"HTTP {status_code}"
        request_id = response.headers.get("X-GitHub-Request-Id")

        if status_code == 401:
            return AuthenticationError("UNAUTHORIZED", message, request_id)
        elif status_code == 403:
            if response.headers.get("X-RateLimit-Remaining") == "0":
                return RateLimitedError(
                    "RATE_LIMITED", message, self._retry_after(response), request_id
                )
            return AuthorizationError("FORBIDDEN", message, request_id)
        elif status_code == 404:
            return NotFoundError("NOT_FOUND", message, request_id)
        elif status_code == 409:
            return ConflictError("CONFLICT", message, request_id)
        elif status_code == 429:
            return RateLimitedError(
                "RATE_LIMITED", message, self._retry_after(response), request_id
            )
        elif status_code >= 500:
            return ServerError("SERVER_ERROR", message, request_id)
        else:
            return ValidationError("VALIDATION_FAILED", message, request_id)

    @staticmethod
    def _retry_after(response: httpx.Response) -> int:
        try:
            return int(response.headers.get("Retry-After", "60"))
        except ValueError:
            return 60
