"""Huborg resource clients."""

from huborg.clients.orgs import OrgsClient
from huborg.clients.pulls import PullsClient
from huborg.clients.repos import ReposClient

__all__ = [
    "OrgsClient",
    "ReposClient",
    "PullsClient",
]
