"""
Wall-clock bounded execution of a search.

The search runs on a worker thread while the calling thread polls for
completion. When the budget runs out the caller sets the cancellation flag
and joins the worker; the search then winds down on its own and returns its
best estimate so far. Nothing is interrupted forcibly.
"""

import logging
import threading
import time
from typing import Callable, Optional, Tuple

from alpha_beta_light.engine.alphabeta import SearchResult
from alpha_beta_light.errors import ConfigurationError, NoMoveFoundError

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_MS = 10


class _SearchWorker:
    """Runs one search and keeps its outcome for the polling thread."""

    def __init__(self, search: Callable[[threading.Event], SearchResult]):
        self.search = search
        self.cancel = threading.Event()
        self.finished = threading.Event()
        self.result: Optional[SearchResult] = None
        self.error: Optional[Exception] = None

    def run(self):
        try:
            self.result = self.search(self.cancel)
        except Exception as exc:  # re-raised in the calling thread
            self.error = exc
        finally:
            self.finished.set()


def run_with_time_limit(
    search: Callable[[threading.Event], SearchResult],
    time_limit_ms: int,
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
) -> Tuple[SearchResult, int]:
    """
    Run `search(cancel)` on a worker thread for at most `time_limit_ms`.

    Args:
        search: Callable taking the cancellation event, e.g. `engine.search`
        time_limit_ms: Wall-clock budget in milliseconds
        poll_interval_ms: How often the caller checks for completion

    Returns:
        (result, elapsed_ns)

    Raises:
        ConfigurationError: non-positive time limit or poll interval
        NoMoveFoundError: the search finished without a move
    """
    if time_limit_ms <= 0:
        raise ConfigurationError(f"time_limit_ms must be positive, got {time_limit_ms}")
    if poll_interval_ms <= 0:
        raise ConfigurationError(f"poll_interval_ms must be positive, got {poll_interval_ms}")

    worker = _SearchWorker(search)
    thread = threading.Thread(target=worker.run, name="bounded-search", daemon=True)

    start = time.perf_counter_ns()
    deadline = start + time_limit_ms * 1_000_000
    thread.start()
    while not worker.finished.is_set() and time.perf_counter_ns() < deadline:
        worker.finished.wait(poll_interval_ms / 1000)

    if not worker.finished.is_set():
        logger.debug("Time limit of %d ms reached, cancelling search", time_limit_ms)
    worker.cancel.set()
    thread.join()
    elapsed_ns = time.perf_counter_ns() - start

    if worker.error is not None:
        raise worker.error
    result = worker.result
    if result is None or result.best_move is None:
        raise NoMoveFoundError(
            f"Time-limited search returned no move after {elapsed_ns // 1_000_000} ms"
        )
    return result, elapsed_ns
