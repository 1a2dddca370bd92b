from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Optional

from roster_browser.core.exceptions import RosterBrowserError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueryState:
    """
    Last known state of one cached query.

    `data` is always a complete snapshot (or None if none was ever loaded).
    `error` holds the message of the most recent failed fetch, and is
    cleared by the next successful one.
    """
    data: Any = None
    error: Optional[str] = None
    updated_at: float = 0.0
    is_invalidated: bool = True

    @property
    def has_data(self) -> bool:
        return self.data is not None

    def is_fresh(self, stale_after: float, now: float) -> bool:
        return (
            self.has_data
            and self.error is None
            and not self.is_invalidated
            and now - self.updated_at < stale_after
        )


class QueryCache:
    """
    Explicit cache of fetched collections keyed by name ("students",
    "branches", ...), owned by a table service.

    At most one load per key runs at a time: concurrent callers of `fetch`
    wait for the running load and share its stored state. Each load takes
    a generation token; an `invalidate` that lands while it runs leaves the
    stored result marked invalidated, so the next fetch loads again.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._lock = threading.Lock()
        self._states: Dict[str, QueryState] = {}
        self._generation: Dict[str, int] = {}
        self._in_flight: Dict[str, threading.Event] = {}

    def get(self, key: str) -> Any:
        """Cached data for key, or None."""
        return self.state(key).data

    def state(self, key: str) -> QueryState:
        with self._lock:
            return self._states.get(key, QueryState())

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._generation[key] = self._generation.get(key, 0) + 1
            current = self._states.get(key)
            if current is not None:
                self._states[key] = replace(current, is_invalidated=True)
        logger.debug("Query invalidated", extra={"query_key": key})

    def invalidate_all(self) -> None:
        with self._lock:
            keys = list(self._states)
        for key in keys:
            self.invalidate(key)

    def fetch(
            self,
            key: str,
            loader: Callable[[], Any],
            stale_after: float = 0.0,
    ) -> QueryState:
        """
        Return the cached state for `key`, calling `loader` first if the
        entry is missing, stale, invalidated or errored.

        Loader failures (RosterBrowserError) are recorded on the state;
        the previous complete snapshot is kept. Callers arriving while a
        load for `key` runs get that load's outcome, never an empty state
        without an error.
        """
        while True:
            with self._lock:
                current = self._states.get(key, QueryState())
                if current.is_fresh(stale_after, self._clock()):
                    return current
                pending = self._in_flight.get(key)
                if pending is None:
                    token = self._generation.get(key, 0) + 1
                    self._generation[key] = token
                    done = threading.Event()
                    self._in_flight[key] = done
                    break

            pending.wait()
            shared = self.state(key)
            if shared.has_data or shared.error is not None:
                return shared
            # the running load died without an outcome; load ourselves

        try:
            return self._load(key, token, loader)
        finally:
            with self._lock:
                self._in_flight.pop(key, None)
            done.set()

    def _load(self, key: str, token: int, loader: Callable[[], Any]) -> QueryState:
        try:
            data = loader()
        except RosterBrowserError as e:
            logger.error("Query failed", extra={"query_key": key, "error": str(e)})
            with self._lock:
                new_state = replace(self._states.get(key, QueryState()), error=str(e))
                self._states[key] = new_state
            return new_state

        with self._lock:
            superseded = self._generation.get(key) != token
            new_state = QueryState(
                data=data, error=None, updated_at=self._clock(), is_invalidated=superseded
            )
            self._states[key] = new_state

        if superseded:
            logger.debug("Result loaded across an invalidation", extra={"query_key": key})
        else:
            logger.info("Query loaded", extra={"query_key": key})
        return new_state
