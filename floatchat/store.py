"""
FloatChat — In-memory session store
Holds map and chat sessions between requests. Bounded: the least recently
used session is evicted once capacity is reached, and sessions idle for
longer than the TTL are dropped on the next access.
"""

import logging
import time
import uuid
from collections import OrderedDict
from threading import Lock
from typing import Dict, Generic, Optional, TypeVar

log = logging.getLogger("floatchat.store")

T = TypeVar("T")

DEFAULT_IDLE_TTL = 6 * 60 * 60   # seconds


class SessionStore(Generic[T]):

    def __init__(self, name: str, capacity: int, idle_ttl: float = DEFAULT_IDLE_TTL):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.name      = name
        self.capacity  = capacity
        self.idle_ttl  = idle_ttl
        self._items: "OrderedDict[str, T]" = OrderedDict()
        self._touch: Dict[str, float] = {}
        self._lock = Lock()

    def add(self, item: T) -> str:
        """Store *item* under a fresh id, evicting the stalest sessions if full."""
        session_id = uuid.uuid4().hex
        with self._lock:
            self._expire()
            while len(self._items) >= self.capacity:
                evicted, _ = self._items.popitem(last=False)
                self._touch.pop(evicted, None)
                log.info(f"{self.name} session evicted: {evicted}")
            self._items[session_id] = item
            self._touch[session_id] = time.monotonic()
        return session_id

    def get(self, session_id: str) -> Optional[T]:
        with self._lock:
            self._expire()
            item = self._items.get(session_id)
            if item is not None:
                self._items.move_to_end(session_id)
                self._touch[session_id] = time.monotonic()
            return item

    def pop(self, session_id: str) -> Optional[T]:
        with self._lock:
            self._touch.pop(session_id, None)
            return self._items.pop(session_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def _expire(self) -> None:
        cutoff = time.monotonic() - self.idle_ttl
        # Oldest first, so stop at the first fresh entry
        for session_id in list(self._items):
            if self._touch.get(session_id, 0) > cutoff:
                break
            del self._items[session_id]
            self._touch.pop(session_id, None)
            log.info(f"{self.name} session expired: {session_id}")
