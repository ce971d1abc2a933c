"""Per-key mutual exclusion for read-decide-write sequences."""

from contextlib import contextmanager
from typing import Dict, Iterator
import logging
import threading

logger = logging.getLogger(__name__)


class KeyedLock:
    """Hands out one lock per key so work on different keys runs in parallel.
    
    Locks are created on first use and kept for the life of the object;
    records are never deleted so the key set only grows with the data.
    """
    
    def __init__(self):
        self._locks: Dict[str, threading.Lock] = {}
        self._guard = threading.Lock()
    
    def _lock_for(self, key: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock
    
    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        """Hold the lock for key for the duration of the with-block."""
        lock = self._lock_for(key)
        lock.acquire()
        try:
            yield
        finally:
            lock.release()
    
    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
