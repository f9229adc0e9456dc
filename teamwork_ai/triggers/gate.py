"""
In-flight task registry.

Teamwork may deliver the same task webhook more than once while the first
delivery is still being handled. The gate lets exactly one handler own a task
id at a time; everybody else backs off.
"""

import threading
from contextlib import contextmanager
from typing import Hashable, Iterator


class InFlightSet:
    """Process-wide set of keys currently being processed."""

    def __init__(self):
        self._lock = threading.Lock()
        self._keys: set = set()

    def try_add(self, key: Hashable) -> bool:
        """Insert key if absent. Returns False when it was already present."""
        with self._lock:
            if key in self._keys:
                return False
            self._keys.add(key)
            return True

    def discard(self, key: Hashable) -> None:
        with self._lock:
            self._keys.discard(key)

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._keys

    def __len__(self) -> int:
        with self._lock:
            return len(self._keys)

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[bool]:
        """
        Hold key for the duration of the block.

        Yields True when this caller owns the key. The key is released on every
        exit path, including errors and cancellation, but only by its owner.
        """
        acquired = self.try_add(key)
        try:
            yield acquired
        finally:
            if acquired:
                self.discard(key)


# Shared by every request handled by this process.
processing = InFlightSet()
