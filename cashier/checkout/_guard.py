"""
Submission guard — at most one in-flight submission per attempt key.

    if not await guard.begin(key):
        ...                                   # already in flight or done
    try:
        receipt = await send()
        await guard.complete(key, receipt)
    except ...:
        await guard.fail(key)                 # key may be retried

Note: in-memory, one checkout session per process.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum, auto

from cashier.wire import SubmissionReceipt


class AttemptState(Enum):
    PENDING = auto()
    COMPLETED = auto()


@dataclass(slots=True)
class _Attempt:
    state: AttemptState
    started_at: datetime
    receipt: SubmissionReceipt | None = None


class SubmissionGuard:
    def __init__(self) -> None:
        self._attempts: dict[str, _Attempt] = {}
        self._lock = asyncio.Lock()

    async def begin(self, key: str) -> bool:
        """Claim `key`. False if it is pending or already completed."""
        async with self._lock:
            if key in self._attempts:
                return False
            self._attempts[key] = _Attempt(AttemptState.PENDING, datetime.now(UTC))
            return True

    async def complete(self, key: str, receipt: SubmissionReceipt) -> None:
        async with self._lock:
            attempt = self._attempts.get(key)
            if attempt is None:
                raise KeyError(f"no pending submission for key: {key}")
            attempt.state = AttemptState.COMPLETED
            attempt.receipt = receipt

    async def fail(self, key: str) -> None:
        """Release a pending key so the same attempt can be submitted again."""
        async with self._lock:
            attempt = self._attempts.get(key)
            if attempt is not None and attempt.state is AttemptState.PENDING:
                del self._attempts[key]

    async def receipt(self, key: str) -> SubmissionReceipt | None:
        async with self._lock:
            attempt = self._attempts.get(key)
            return attempt.receipt if attempt is not None else None

    async def state(self, key: str) -> AttemptState | None:
        async with self._lock:
            attempt = self._attempts.get(key)
            return attempt.state if attempt is not None else None


__all__ = ("AttemptState", "SubmissionGuard")
