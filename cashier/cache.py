"""
Session cache — read-through memo for per-session reads.

Settings and loyalty balance are read once per checkout session and
reused until explicitly refreshed. Only successful reads are stored.

    balances = session_cache(lambda uid: f"balance:{uid.value}", fetch_balance)
    result = await balances.get(user_id)    # Ok(CacheResult(value=..., hit=False))
    result = await balances.get(user_id)    # hit=True
    balances.refresh(user_id)
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from kungfu import Error, LazyCoroResult, Ok, Result

type KeyFn[K] = Callable[[K], str]


@dataclass(frozen=True, slots=True)
class CacheResult[T]:
    value: T
    hit: bool


@dataclass(slots=True)
class SessionCache[K, T, E]:
    key_fn: KeyFn[K]
    fetch: Callable[[K], LazyCoroResult[T, E]]
    _entries: dict[str, T] = field(default_factory=dict)

    def get(self, key: K) -> LazyCoroResult[CacheResult[T], E]:
        """Cached value, or fetch and store it on success."""
        cache_key = self.key_fn(key)
        entries = self._entries
        fetch_fn = self.fetch

        async def execute() -> Result[CacheResult[T], E]:
            if cache_key in entries:
                return Ok(CacheResult(value=entries[cache_key], hit=True))

            result = await fetch_fn(key)
            match result:
                case Ok(value):
                    entries[cache_key] = value
                    return Ok(CacheResult(value=value, hit=False))
                case Error(e):
                    return Error(e)

        return LazyCoroResult(execute)

    def refresh(self, key: K) -> bool:
        """Drop one entry so the next get refetches. True if it was cached."""
        cache_key = self.key_fn(key)
        if cache_key in self._entries:
            del self._entries[cache_key]
            return True
        return False

    def clear(self) -> None:
        self._entries.clear()


def session_cache[K, T, E](
    key: KeyFn[K],
    fetch: Callable[[K], LazyCoroResult[T, E]],
) -> SessionCache[K, T, E]:
    return SessionCache(key_fn=key, fetch=fetch)


__all__ = ("CacheResult", "SessionCache", "session_cache")
