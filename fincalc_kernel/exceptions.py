"""
Typed Exception Hierarchy for the calculation kernel.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from FinanceCalcError:

    FinanceCalcError (base)
    |
    +-- InvalidArgumentError          (also a ValueError)
    |   +-- MissingArgumentError
    |   +-- InvalidRateError
    |   +-- InvalidPeriodsError
    |   +-- InvalidAmountError
    |
    +-- CurrencyError
    |   +-- InvalidCurrencyError      (also a ValueError)
    |   +-- CurrencyMismatchError     (also an ArithmeticError)
    |
    +-- CalculationContextError
    |   +-- ContextSealedError
    |
    +-- FormulaNotFoundError
    |
    +-- ConfigurationError            (also a ValueError)

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                   | When Raised
----------------|------------------------|------------------------------------------
Argument        | INVALID_ARGUMENT       | Out-of-domain input to a factory/formula
                | MISSING_ARGUMENT       | Required argument is None
                | INVALID_RATE           | Rate not finite, or <= -1 for compounding
                | INVALID_PERIODS        | Period count not an int >= 1
                | INVALID_AMOUNT         | Monetary amount not a finite decimal
----------------|------------------------|------------------------------------------
Currency        | INVALID_CURRENCY       | Not a registered ISO 4217 code
                | CURRENCY_MISMATCH      | Arithmetic across two currencies
----------------|------------------------|------------------------------------------
Context         | CONTEXT_SEALED         | Default context replaced after first use
----------------|------------------------|------------------------------------------
Registry        | FORMULA_NOT_FOUND      | Unknown formula name
----------------|------------------------|------------------------------------------
Configuration   | INVALID_CONFIGURATION  | YAML numeric policy cannot be parsed

===============================================================================
ARITHMETIC FAILURES
===============================================================================

Numeric failures inside a formula (overflow, division by zero, invalid
operation) are the ``decimal`` signal exceptions themselves
(``decimal.Overflow``, ``decimal.DivisionByZero``,
``decimal.InvalidOperation``), all subclasses of ``ArithmeticError``.
They are propagated unchanged and never wrapped.

===============================================================================
HANDLING PATTERNS
===============================================================================

    try:
        result = FutureValueOfAnnuity.calculate(amount, rate_and_periods)
    except InvalidRateError as e:
        log.warning("rate rejected", extra={"rate": str(e.value)})
    except InvalidArgumentError as e:
        api_response(code=e.code, argument=e.argument)
    except ArithmeticError:
        # decimal overflow / currency mismatch
        raise
"""

from __future__ import annotations

from typing import Any


class FinanceCalcError(Exception):
    """
    Base exception for all calculation kernel errors.

    All subclasses carry a ``code`` class attribute for machine-readable
    error identification.
    """

    code: str = "FINANCE_CALC_ERROR"


# Argument validation


class InvalidArgumentError(FinanceCalcError, ValueError):
    """An argument is outside the domain accepted by a factory or formula."""

    code: str = "INVALID_ARGUMENT"

    def __init__(self, argument: str, value: Any, reason: str):
        self.argument = argument
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {argument}: {value!r} ({reason})")


class MissingArgumentError(InvalidArgumentError):
    """A required argument was None."""

    code: str = "MISSING_ARGUMENT"

    def __init__(self, argument: str):
        super().__init__(argument, None, "required, got None")


class InvalidRateError(InvalidArgumentError):
    """Rate is not a finite decimal, or is outside a formula's domain."""

    code: str = "INVALID_RATE"

    def __init__(self, value: Any, reason: str = "must be a finite decimal"):
        super().__init__("rate", value, reason)


class InvalidPeriodsError(InvalidArgumentError):
    """Period count is not an integer >= 1."""

    code: str = "INVALID_PERIODS"

    def __init__(self, value: Any, reason: str = "must be an integer >= 1"):
        super().__init__("periods", value, reason)


class InvalidAmountError(InvalidArgumentError):
    """Monetary amount is not a finite decimal."""

    code: str = "INVALID_AMOUNT"

    def __init__(self, value: Any, reason: str = "must be a finite decimal"):
        super().__init__("amount", value, reason)


# Currency


class CurrencyError(FinanceCalcError):
    """Base exception for currency errors."""

    code: str = "CURRENCY_ERROR"


class InvalidCurrencyError(CurrencyError, ValueError):
    """Currency code is not a registered ISO 4217 code."""

    code: str = "INVALID_CURRENCY"

    def __init__(self, currency_code: Any):
        self.currency_code = currency_code
        super().__init__(f"Invalid ISO 4217 currency code: {currency_code!r}")


class CurrencyMismatchError(CurrencyError, ArithmeticError):
    """Arithmetic attempted across two different currencies."""

    code: str = "CURRENCY_MISMATCH"

    def __init__(self, operation: str, left: str, right: str):
        self.operation = operation
        self.left = left
        self.right = right
        super().__init__(
            f"Cannot {operation} Money with different currencies: {left} and {right}"
        )


# Calculation context


class CalculationContextError(FinanceCalcError):
    """Base exception for calculation context errors."""

    code: str = "CALCULATION_CONTEXT_ERROR"


class ContextSealedError(CalculationContextError):
    """The process default context was replaced after calculations used it."""

    code: str = "CONTEXT_SEALED"

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(
            f"Default calculation context is sealed ({current}); "
            f"cannot switch to {requested}. Configure it before the first calculation."
        )


# Registry


class FormulaNotFoundError(FinanceCalcError):
    """No formula is registered under the requested name."""

    code: str = "FORMULA_NOT_FOUND"

    def __init__(self, name: str, available: list[str]):
        self.name = name
        self.available = available
        super().__init__(
            f"No formula registered as {name!r}. Available: {', '.join(available)}"
        )


# Configuration


class ConfigurationError(FinanceCalcError, ValueError):
    """The numeric policy in a configuration file is invalid."""

    code: str = "INVALID_CONFIGURATION"

    def __init__(self, key: str, value: Any, reason: str, source: str | None = None):
        self.key = key
        self.value = value
        self.reason = reason
        self.source = source
        where = f" in {source}" if source else ""
        super().__init__(f"Invalid configuration{where}: {key}={value!r} ({reason})")
