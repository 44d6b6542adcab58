"""Tests for stock validation."""

from conftest import FAST, FakeBackend, burger, error_of, run, unwrap

from cashier.errors import CheckoutErrorKind
from cashier.pricing import price_line
from cashier.stock import StockValidator, shortfalls
from cashier.wire import CapacityReport


def test_line_above_capacity_is_rejected():
    backend = FakeBackend(capacity={10: CapacityReport(max_quantity=1, limiting_ingredient="Bacon")})
    validator = StockValidator(backend, retry=FAST)

    report = unwrap(run(validator.validate_all([price_line(burger(quantity=3))])))

    assert len(report) == 1
    line = report[0]
    assert not line.available
    assert line.requested == 3
    assert line.limiting_ingredient == "Bacon"
    assert shortfalls(report) == [line]


def test_excluded_lines_are_not_simulated():
    backend = FakeBackend()
    validator = StockValidator(backend, retry=FAST)

    lines = [price_line(burger("1")), price_line(burger("2", price="nope"))]
    report = unwrap(run(validator.validate_all(lines)))

    assert [a.line_ref for a in report] == ["1"]
    assert backend.calls["capacity"] == 1


def test_transport_failure_is_retried_then_reported():
    flaky = FakeBackend(capacity_failures=2)
    assert unwrap(run(StockValidator(flaky, retry=FAST).validate_all([price_line(burger())])))

    down = FakeBackend(capacity_failures=10)
    err = error_of(run(StockValidator(down, retry=FAST).validate_all([price_line(burger())])))
    assert err.kind is CheckoutErrorKind.TRANSPORT
    assert down.calls["capacity"] == FAST.times


def test_results_are_never_cached():
    backend = FakeBackend()
    validator = StockValidator(backend, retry=FAST)
    lines = [price_line(burger())]

    run(validator.validate_all(lines))
    run(validator.validate_all(lines))

    assert backend.calls["capacity"] == 2
