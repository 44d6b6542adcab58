"""Tests for retry and the session cache."""

from kungfu import Error, LazyCoroResult, Ok

from conftest import run, unwrap

from cashier.cache import session_cache
from cashier.retry import NO_RETRY, Retry, retrying

FAST = Retry(times=3, backoff_initial=0.0, backoff_max=0.0)


def _flaky(failures: int, calls: list[int], *, error: str = "down") -> LazyCoroResult[str, str]:
    async def execute():
        calls.append(1)
        if len(calls) <= failures:
            return Error(error)
        return Ok("value")
    return LazyCoroResult(execute)


def test_retries_until_success():
    calls: list[int] = []
    assert unwrap(run(retrying(_flaky(2, calls), FAST))) == "value"
    assert len(calls) == 3


def test_gives_up_after_times():
    calls: list[int] = []
    result = run(retrying(_flaky(5, calls), FAST))

    assert isinstance(result, Error)
    assert len(calls) == 3


def test_non_retryable_error_stops_immediately():
    calls: list[int] = []
    run(retrying(_flaky(5, calls, error="rejected"), FAST, retry_on=lambda e: e == "down"))
    assert len(calls) == 1


def test_no_retry_is_a_single_attempt():
    calls: list[int] = []
    run(retrying(_flaky(1, calls), NO_RETRY))
    assert len(calls) == 1


def test_zero_times_still_attempts_once():
    calls: list[int] = []
    run(retrying(_flaky(1, calls), Retry(times=0, backoff_initial=0.0, backoff_max=0.0)))
    assert len(calls) == 1


def test_cache_stores_only_successes():
    calls: list[int] = []
    cache = session_cache(lambda key: f"k:{key}", lambda key: _flaky(1, calls))

    async def scenario():
        first = await cache.get(1)
        second = await cache.get(1)
        third = await cache.get(1)
        return first, second, third

    first, second, third = run(scenario())

    assert isinstance(first, Error)
    assert unwrap(second).hit is False
    assert unwrap(third).hit is True
    assert len(calls) == 2


def test_cache_refresh_forces_refetch():
    calls: list[int] = []
    cache = session_cache(lambda key: str(key), lambda key: _flaky(0, calls))

    async def scenario():
        await cache.get("a")
        assert cache.refresh("a")
        assert not cache.refresh("b")
        return await cache.get("a")

    assert unwrap(run(scenario())).hit is False
    assert len(calls) == 2
