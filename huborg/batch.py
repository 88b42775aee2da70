"""Running one operation per repository, sequentially or on a bounded pool."""

import logging
import threading
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from typing import TypeVar

from huborg.logging import get_logger

T = TypeVar("T")
R = TypeVar("R")


class CancellationToken:
    """
    Cooperative, run-wide cancellation.

    Checked between repositories only: an operation that has started always
    runs to completion.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


def run_each(
    items: Iterable[T],
    operation: Callable[[T], R],
    max_workers: int = 1,
    cancel: CancellationToken | None = None,
    logger: logging.Logger | None = None,
) -> list[R]:
    """
    Apply ``operation`` to every item.

    Args:
        items: Work items, usually repositories
        operation: Per-item operation; expected to report its own failures
        max_workers: 1 runs in order on the calling thread, more uses a thread pool
        cancel: Optional token; items not yet started when it fires are skipped
        logger: Logger for cancellation notices

    Returns:
        Results of the operations that ran, in input order
    """
    logger = logger or get_logger()
    items = list(items)

    if max_workers <= 1:
        results: list[R] = []
        for index, item in enumerate(items):
            if cancel is not None and cancel.cancelled:
                logger.warning("Run cancelled, %d item(s) not started", len(items) - index)
                break
            results.append(operation(item))
        return results

    skipped = object()

    def guarded(item: T) -> object:
        if cancel is not None and cancel.cancelled:
            return skipped
        return operation(item)

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [executor.submit(guarded, item) for item in items]
        outcomes = [future.result() for future in futures]

    results = [outcome for outcome in outcomes if outcome is not skipped]  # type: ignore[misc]
    if len(results) < len(items):
        logger.warning("Run cancelled, %d item(s) not started", len(items) - len(results))
    return results
