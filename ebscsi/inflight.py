"""Tracking of operations in progress, keyed by volume or snapshot identifier."""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator

logger = logging.getLogger(__name__)

VOLUME_OPERATION_ALREADY_EXISTS_MSG = "An operation with the given Volume {} already exists"


class InFlight:
    """A thread-safe set of keys for requests that are currently being served."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._keys: set[str] = set()

    def insert(self, key: str) -> bool:
        """Record ``key`` as in flight; return False if it already was."""
        with self._lock:
            if key in self._keys:
                return False
            self._keys.add(key)
            return True

    def delete(self, key: str) -> None:
        """Forget ``key``; a key that is not present is ignored."""
        with self._lock:
            self._keys.discard(key)
        logger.debug("Node Service: volume=%r operation finished", key)

    @contextmanager
    def hold(self, key: str) -> Iterator[bool]:
        """Hold ``key`` for the duration of the block.

        Yields whether the key was acquired. A key that was acquired is
        released on exit; one that was already held by someone else is left
        untouched.
        """
        acquired = self.insert(key)
        try:
            yield acquired
        finally:
            if acquired:
                self.delete(key)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._keys

    def __len__(self) -> int:
        with self._lock:
            return len(self._keys)