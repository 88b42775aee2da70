"""Pull request-related data models."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class PullRequest:
    """Pull request information."""

    number: int
    title: str
    state: str  # "open" or "closed"
    html_url: str
    head: str
    base: str
    author: str | None
    created_at: datetime
