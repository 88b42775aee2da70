"""Lazy traversal of GitHub's Link-header pagination."""

from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from huborg.transport import HTTPTransport

T = TypeVar("T")


class PageIterator(Generic[T]):
    """
    A forward-only, restartable sequence of result pages.

    Each call to ``iter()`` starts again from the first page and follows the
    ``rel="next"`` links until the server stops sending one. Nothing is
    fetched until iteration begins.

    Example:
        ```python
        pages = PageIterator(transport, "/orgs/acme/repos", parse=parse_repository)
        repos = pages.collect()
        ```
    """

    def __init__(
        self,
        transport: "HTTPTransport",
        path: str,
        parse: Callable[[dict[str, Any]], T],
        params: dict[str, Any] | None = None,
    ) -> None:
        self.transport = transport
        self.path = path
        self.parse = parse
        self.params = params

    def __iter__(self) -> Iterator[list[T]]:
        url: str | None = self.path
        params = self.params
        while url is not None:
            data, url = self.transport.get_page(url, params)
            # The next URL already carries the original query
            params = None
            yield [self.parse(item) for item in data]

    def items(self) -> Iterator[T]:
        """Iterate over individual items across all pages."""
        for page in self:
            yield from page

    def collect(self) -> list[T]:
        """Fetch every page and return the concatenated items in API order."""
        return list(self.items())
