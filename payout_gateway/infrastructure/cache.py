"""In-process TTL cache with lazy expiry"""

import time
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

from payout_gateway.domain.models import CacheEntry


class TTLCache:
    """
    Key/value store whose entries are valid while `now - stored_at <= ttl`.

    Expired entries are never swept; a read past the TTL is a miss and the
    next set overwrites the entry. Not coordinated across writers.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self._clock = clock or time.monotonic
        self._entries: Dict[Hashable, CacheEntry] = {}

    def get(self, key: Hashable) -> Tuple[Any, bool]:
        entry = self._entries.get(key)
        if entry is None or not entry.is_fresh(self._clock()):
            return None, False
        return entry.payload, True

    def set(self, key: Hashable, value: Any, ttl: float) -> None:
        self._entries[key] = CacheEntry(stored_at=self._clock(), ttl=ttl, payload=value)
