"""Huborg type definitions.

This module exports all data model types used by the package.
"""

from huborg.types.pulls import PullRequest
from huborg.types.repos import ContentFile, GitRef, License, Repository

__all__ = [
    # Repository types
    "Repository",
    "License",
    "GitRef",
    "ContentFile",
    # Pull request types
    "PullRequest",
]
