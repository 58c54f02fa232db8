"""
Pytest fixtures for the finance-calc test suite.

Provides:
- Isolation of process-wide state (default calculation context, logging)
- Common value objects used across formula tests
"""

from decimal import ROUND_HALF_EVEN, Decimal

import pytest

from fincalc_kernel.domain.calculation_context import (
    CalculationContext,
    reset_default_context,
)
from fincalc_kernel.domain.values import Money, Rate, RateAndPeriods
from fincalc_kernel.logging_config import LogContext, reset_logging


@pytest.fixture(autouse=True)
def _isolate_process_state():
    """Unseal the default context and reset logging around every test."""
    reset_default_context()
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()
    reset_default_context()


@pytest.fixture
def decimal64() -> CalculationContext:
    return CalculationContext(precision=16, rounding=ROUND_HALF_EVEN)


@pytest.fixture
def high_precision() -> CalculationContext:
    """Reference context for 'direct evaluation' comparisons."""
    return CalculationContext(precision=50, rounding=ROUND_HALF_EVEN)


@pytest.fixture
def payment_usd() -> Money:
    return Money.of("1000", "USD")


@pytest.fixture
def five_percent_ten_periods() -> RateAndPeriods:
    return RateAndPeriods.of(Rate.of("0.05"), 10)


@pytest.fixture
def assert_money_close():
    """Assert same currency and amounts within an absolute tolerance."""

    def _assert(actual: Money, expected: Money, tolerance: str = "0.000001") -> None:
        assert actual.currency == expected.currency
        assert abs(actual.amount - expected.amount) <= Decimal(tolerance), (
            f"{actual} differs from {expected} by more than {tolerance}"
        )

    return _assert
