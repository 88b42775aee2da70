"""
Repository filters.

A filter decides which enumerated repositories make up the working set of a
run. Filters see the fully enumerated list one repository at a time, along
with a context object (the GitHub client) for lookups such as topics.
"""

import re
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from huborg.types.repos import Repository


class RepositoryFilter(ABC):
    """Abstract base class for repository filters."""

    @abstractmethod
    def matches(self, context: Any, repository: Repository) -> bool:
        """Return True when the repository belongs to the working set."""
        pass


class AcceptAll(RepositoryFilter):
    """Accept every repository."""

    def matches(self, context: Any, repository: Repository) -> bool:
        return True

    def __repr__(self) -> str:
        return "AcceptAll()"


class PatternFilter(RepositoryFilter):
    """
    Accept repositories whose full name matches a regular expression.

    Example:
        ```python
        # Only repositories that mention "hyrax", case-insensitively
        PatternFilter(re.compile(r"hyrax", re.IGNORECASE))
        ```
    """

    def __init__(self, pattern: str | re.Pattern[str]) -> None:
        self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern

    def matches(self, context: Any, repository: Repository) -> bool:
        return self.pattern.search(repository.full_name) is not None

    def __repr__(self) -> str:
        return f"PatternFilter({self.pattern.pattern!r})"


class PredicateFilter(RepositoryFilter):
    """Adapt a plain ``(context, repository) -> bool`` callable."""

    def __init__(self, predicate: Callable[[Any, Repository], bool]) -> None:
        self.predicate = predicate

    def matches(self, context: Any, repository: Repository) -> bool:
        return bool(self.predicate(context, repository))

    def __repr__(self) -> str:
        name = getattr(self.predicate, "__name__", type(self.predicate).__name__)
        return f"PredicateFilter({name})"
