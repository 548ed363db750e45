# Project: rainfall-insights
# Owner: GreenUnicorn
"""
cache.py — Process-lifetime cache for the parsed record set.

The dashboard builds one RecordCache at startup and every page render asks
it for the records. The first caller runs the loader; callers that arrive
while that load is running wait for it instead of starting another one.
A failed load leaves the cache empty so the next request can try again.
Nothing expires: restarting the process is the only reset.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class CacheState(str, Enum):
    EMPTY = "empty"
    LOADING = "loading"
    READY = "ready"


class _Flight:
    """One in-progress load that waiting callers can block on."""

    def __init__(self) -> None:
        self.done = threading.Event()
        self.value = None
        self.error: BaseException | None = None


class RecordCache(Generic[T]):
    """Single-flight, load-once cache: EMPTY -> LOADING -> READY."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._state = CacheState.EMPTY
        self._value: T | None = None
        self._flight: _Flight | None = None

    @property
    def state(self) -> CacheState:
        return self._state

    def get_or_load(self, loader: Callable[[], T]) -> T:
        """Return the cached value, running *loader* at most once at a time.

        Args:
            loader: Zero-argument callable that fetches and parses the data.

        Returns:
            The loaded value (the same object for every caller).

        Raises:
            Whatever *loader* raised, for the caller that ran it and for
            every caller that was waiting on that load.
        """
        with self._lock:
            if self._state is CacheState.READY:
                return self._value
            flight = self._flight
            leader = flight is None
            if leader:
                flight = self._flight = _Flight()
                self._state = CacheState.LOADING

        if not leader:
            flight.done.wait()
            if flight.error is not None:
                raise flight.error
            return flight.value

        try:
            value = loader()
        except BaseException as e:
            with self._lock:
                self._state = CacheState.EMPTY
                self._flight = None
            flight.error = e
            flight.done.set()
            raise

        with self._lock:
            self._value = value
            self._state = CacheState.READY
            self._flight = None
        flight.value = value
        flight.done.set()
        return value
