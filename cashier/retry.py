"""
Retry — bounded retry with exponential backoff for lazy results.

    policy = Retry(times=3, backoff_initial=0.1)
    lazy = retrying(L.service_call(fetch_balance), policy, retry_on=is_transport)
    result = await lazy

`times` is the total number of attempts. The lazy result is re-awaited
for every attempt, so it must wrap the call itself, not its outcome.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from combinators import RetryPolicy, flow
from kungfu import LazyCoroResult


class RetryOn(Protocol):
    def __call__(self, err: object) -> bool: ...


@dataclass(frozen=True, slots=True)
class Retry:
    """Retry settings applied via combinators.flow().retry(...)."""
    times: int = 3
    backoff_initial: float = 0.1
    backoff_factor: float = 2.0
    backoff_max: float = 2.0

    def to_policy(self, retry_on: RetryOn | None = None) -> RetryPolicy:
        return RetryPolicy.exponential_jitter(
            times=max(self.times, 1),
            initial=self.backoff_initial,
            multiplier=self.backoff_factor,
            max_delay=self.backoff_max,
            retry_on=retry_on,
        )


NO_RETRY = Retry(times=1)


def retrying[T, E](
    lazy: LazyCoroResult[T, E],
    policy: Retry,
    *,
    retry_on: RetryOn | None = None,
) -> LazyCoroResult[T, E]:
    """Re-run `lazy` while it fails with an error `retry_on` accepts (any, if None)."""
    return flow(lazy).retry(policy=policy.to_policy(retry_on)).compile()


__all__ = ("Retry", "RetryOn", "NO_RETRY", "retrying")
