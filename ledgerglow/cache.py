import asyncio
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

T = TypeVar("T")


@dataclass
class CacheEntry:
    value: Any
    expires_at: Optional[float]


class ResponseCache:
    """In-memory cache of payloads already returned to clients.

    Entries live for the lifetime of the process unless a bound is
    configured: ``max_size`` evicts least recently used keys and
    ``default_ttl`` expires entries. Zero disables either bound.
    """

    def __init__(self, default_ttl: int = 0, max_size: int = 0):
        self.default_ttl = default_ttl
        self.max_size = max_size
        self._cache: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Optional[Any]:
        async with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return None

            if entry.expires_at is not None and time.time() > entry.expires_at:
                del self._cache[key]
                return None

            self._cache.move_to_end(key)
            return entry.value

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        async with self._lock:
            ttl = self.default_ttl if ttl is None else ttl
            expires_at = time.time() + ttl if ttl else None

            self._cache[key] = CacheEntry(value=value, expires_at=expires_at)
            self._cache.move_to_end(key)

            if self.max_size:
                while len(self._cache) > self.max_size:
                    self._cache.popitem(last=False)

    async def clear(self) -> None:
        async with self._lock:
            self._cache.clear()

    def size(self) -> int:
        return len(self._cache)


class SingleFlight:
    """Collapse concurrent calls sharing a key into one execution.

    The first caller starts the work as a task; callers arriving while it
    runs await the same task. The key is released when the task finishes,
    whatever the outcome, so a failed call is retried by the next caller.
    """

    def __init__(self) -> None:
        self._calls: Dict[str, "asyncio.Task[Any]"] = {}

    async def do(self, key: str, fn: Callable[[], Awaitable[T]]) -> T:
        task = self._calls.get(key)
        if task is None:
            task = asyncio.ensure_future(fn())
            self._calls[key] = task
            task.add_done_callback(lambda done, key=key: self._release(key, done))
        # A caller going away must not cancel the shared call
        return await asyncio.shield(task)

    def _release(self, key: str, task: "asyncio.Task[Any]") -> None:
        if self._calls.get(key) is task:
            del self._calls[key]

    def in_flight(self, key: str) -> bool:
        return key in self._calls

    def __len__(self) -> int:
        return len(self._calls)


def cache_key_logo(fingerprint: str) -> str:
    return f"logo_{fingerprint}"


def cache_key_description(issuer: str, currency: str) -> str:
    return f"desc_{issuer}_{currency}"


def cache_key_richlist(fingerprint: str) -> str:
    return f"richlist_{fingerprint}"


def cache_key_offers(account: str) -> str:
    return f"offers_{account}"
