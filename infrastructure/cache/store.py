import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import timedelta
from enum import IntEnum
from typing import Protocol


class CacheItemPriority(IntEnum):
    LOW = 0
    NORMAL = 1
    HIGH = 2
    NEVER_REMOVE = 3


@dataclass(frozen=True)
class CacheEntryOptions:
    """Expiration policy for a single cache write.

    Whichever of the two expirations triggers first evicts the entry: the
    sliding window is renewed on every read but never extends past the
    absolute deadline.
    """
    absolute_expiration: timedelta | None = None
    sliding_expiration: timedelta | None = None
    priority: CacheItemPriority = CacheItemPriority.NORMAL


class CacheStore(Protocol):
    async def get(self, key: str) -> str | None:
        ...

    async def set(self, key: str, value: str, options: CacheEntryOptions) -> None:
        ...

    async def close(self) -> None:
        ...


@dataclass
class _MemoryEntry:
    value: str
    expires_at: float | None
    sliding: float | None
    last_access: float
    priority: CacheItemPriority

    def is_expired(self, now: float) -> bool:
        if self.expires_at is not None and now >= self.expires_at:
            return True
        if self.sliding is not None and now - self.last_access >= self.sliding:
            return True
        return False


class MemoryCacheStore:
    """In-process store with absolute/sliding expiration and priority eviction."""

    def __init__(self, size_limit: int | None = None, clock: Callable[[], float] = time.monotonic):
        self.size_limit = size_limit
        self._clock = clock
        self._entries: dict[str, _MemoryEntry] = {}
        self._lock = threading.Lock()

    async def get(self, key: str) -> str | None:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_expired(now):
                del self._entries[key]
                return None
            entry.last_access = now
            return entry.value

    async def set(self, key: str, value: str, options: CacheEntryOptions) -> None:
        now = self._clock()
        absolute = options.absolute_expiration
        sliding = options.sliding_expiration
        entry = _MemoryEntry(
            value=value,
            expires_at=now + absolute.total_seconds() if absolute is not None else None,
            sliding=sliding.total_seconds() if sliding is not None else None,
            last_access=now,
            priority=options.priority,
        )
        with self._lock:
            self._entries[key] = entry
            self._compact(now)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    async def close(self) -> None:
        with self._lock:
            self._entries.clear()

    def _compact(self, now: float) -> None:
        # Caller holds the lock.
        if self.size_limit is None or len(self._entries) <= self.size_limit:
            return

        for key in [k for k, e in self._entries.items() if e.is_expired(now)]:
            del self._entries[key]

        while len(self._entries) > self.size_limit:
            candidates = [
                (e.priority, e.last_access, k)
                for k, e in self._entries.items()
                if e.priority != CacheItemPriority.NEVER_REMOVE
            ]
            if not candidates:
                return
            _, _, victim = min(candidates)
            del self._entries[victim]
