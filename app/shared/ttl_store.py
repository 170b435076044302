import threading
import time
from typing import Callable, Dict, Generic, Hashable, Optional, Tuple, TypeVar

V = TypeVar("V")


class ExpiringStore(Generic[V]):
    """
    Process-wide key/value map whose entries expire after a TTL.

    Expired entries are evicted when they are read, and on every write.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._items: Dict[Hashable, Tuple[V, float]] = {}
        self._lock = threading.Lock()

    def set(self, key: Hashable, value: V) -> None:
        with self._lock:
            self._evict_expired()
            self._items[key] = (value, self._clock() + self.ttl_seconds)

    def get(self, key: Hashable) -> Optional[V]:
        with self._lock:
            return self._get_live(key)

    def pop(self, key: Hashable) -> Optional[V]:
        with self._lock:
            value = self._get_live(key)
            self._items.pop(key, None)
            return value

    def __len__(self) -> int:
        with self._lock:
            self._evict_expired()
            return len(self._items)

    def _get_live(self, key: Hashable) -> Optional[V]:
        item = self._items.get(key)
        if item is None:
            return None
        value, expires_at = item
        if self._clock() >= expires_at:
            del self._items[key]
            return None
        return value

    def _evict_expired(self) -> None:
        now = self._clock()
        for key in [k for k, (_, exp) in self._items.items() if now >= exp]:
            del self._items[key]
