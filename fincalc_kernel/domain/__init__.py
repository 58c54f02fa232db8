"""
Pure domain layer.

Value objects and numeric policy with NO dependencies on I/O, clocks or
configuration files. All domain objects are immutable and deterministic.
"""

from fincalc_kernel.domain.calculation_context import (
    CalculationContext,
    configure_default_context,
    get_default_context,
    is_default_context_sealed,
    reset_default_context,
    resolve_context,
)
from fincalc_kernel.domain.currency import CurrencyInfo, CurrencyRegistry
from fincalc_kernel.domain.results import ConstructionResult, ValidationError
from fincalc_kernel.domain.values import (
    Currency,
    Money,
    Rate,
    RateAndPeriods,
    to_decimal,
)

__all__ = [
    "CalculationContext",
    "ConstructionResult",
    "Currency",
    "CurrencyInfo",
    "CurrencyRegistry",
    "Money",
    "Rate",
    "RateAndPeriods",
    "ValidationError",
    "configure_default_context",
    "get_default_context",
    "is_default_context_sealed",
    "reset_default_context",
    "resolve_context",
    "to_decimal",
]
