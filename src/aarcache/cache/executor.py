"""Shared worker pool and join helpers for filesystem batches."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from types import TracebackType
from typing import Any, TypeVar

from aarcache.cache.context import SyncContext
from aarcache.constants.config import DEFAULT_MAX_WORKERS, WAIT_POLL_SECONDS
from aarcache.exceptions import BatchExecutionError, SyncCancelledError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FetchExecutor:
    """Fixed-size thread pool shared by every task of a cache root."""

    def __init__(self, max_workers: int = DEFAULT_MAX_WORKERS) -> None:
        self._pool = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="aar-fetch")

    def submit(self, fn: Callable[..., T], /, *args: Any, **kwargs: Any) -> Future[T]:
        return self._pool.submit(fn, *args, **kwargs)

    def shutdown(self, *, wait: bool = True, cancel_futures: bool = False) -> None:
        self._pool.shutdown(wait=wait, cancel_futures=cancel_futures)

    def __enter__(self) -> FetchExecutor:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        # On interruption, queued tasks are dropped and in-flight ones finish on their own.
        interrupted = exc_type is not None
        self.shutdown(wait=not interrupted, cancel_futures=interrupted)


def wait_for_all(futures: Iterable[Future[Any]], context: SyncContext | None = None) -> None:
    """Block until every future completes.

    Raises ``SyncCancelledError`` when the context asks for cancellation and
    ``BatchExecutionError`` as soon as any task fails or was cancelled.
    """
    pending = set(futures)
    while pending:
        if context is not None and context.cancel_requested:
            raise SyncCancelledError(f"Cancelled with {len(pending)} task(s) still pending")
        # wait() only counts CANCELLED_AND_NOTIFIED futures as done; one cancelled while queued stays CANCELLED.
        if any(future.cancelled() for future in pending):
            raise BatchExecutionError("A batch task was cancelled before it ran")
        done, pending = wait(pending, timeout=WAIT_POLL_SECONDS, return_when=FIRST_EXCEPTION)
        for future in done:
            if future.cancelled():
                raise BatchExecutionError("A batch task was cancelled before it ran")
            error = future.exception()
            if error is not None:
                raise BatchExecutionError(f"A batch task failed: {error}") from error


def wait_for_future(context: SyncContext, future: Future[T], label: str) -> T:
    """Wait for a single collaborator future, honoring cancellation."""
    logger.debug("%s...", label)
    wait_for_all((future,), context)
    return future.result()
