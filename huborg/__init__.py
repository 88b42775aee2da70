"""Huborg - bulk maintenance of the repositories of GitHub organizations."""

from huborg.batch import CancellationToken, run_each
from huborg.client import GitHubClient
from huborg.deployer import BranchNamer, DeployResult, RemoteTemplateDeployer
from huborg.enumerator import RepositoryEnumerator
from huborg.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    ConflictError,
    GitCommandError,
    HuborgError,
    NotFoundError,
    RateLimitedError,
    ServerError,
    ValidationError,
)
from huborg.filters import AcceptAll, PatternFilter, PredicateFilter, RepositoryFilter
from huborg.git import GitHelper, WorkingTreeStatus
from huborg.local_sync import LocalSyncEngine, SyncResult
from huborg.logging import configure_logging, get_logger, null_logger
from huborg.mailmap import MailmapSynchronizer, MailmapSyncResult
from huborg.orchestrator import Huborg
from huborg.reports import ALL, LicenseAuditor, LicenseFinding, PullRequestCollector
from huborg.transport import HTTPTransport, RetryConfig
from huborg.types import ContentFile, GitRef, License, PullRequest, Repository

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Entry points
    "Huborg",
    "GitHubClient",
    # Engine
    "RepositoryEnumerator",
    "RemoteTemplateDeployer",
    "DeployResult",
    "BranchNamer",
    "MailmapSynchronizer",
    "MailmapSyncResult",
    "LocalSyncEngine",
    "SyncResult",
    "LicenseAuditor",
    "LicenseFinding",
    "PullRequestCollector",
    "ALL",
    # Filters
    "RepositoryFilter",
    "AcceptAll",
    "PatternFilter",
    "PredicateFilter",
    # Batch execution
    "CancellationToken",
    "run_each",
    # Git
    "GitHelper",
    "WorkingTreeStatus",
    # Types
    "Repository",
    "License",
    "GitRef",
    "ContentFile",
    "PullRequest",
    # Exceptions
    "HuborgError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "ConflictError",
    "RateLimitedError",
    "ValidationError",
    "ServerError",
    "ConfigurationError",
    "GitCommandError",
    # Transport
    "HTTPTransport",
    "RetryConfig",
    # Logging
    "configure_logging",
    "get_logger",
    "null_logger",
]
