"""
fincalc_formulas.base -- Operator protocol, shared construction and compounding.

Responsibility:
    Defines the capability every formula offers (``apply(amount) -> Money``),
    the ``rate_period_operator`` class decorator that gives each formula
    the shared construction, validation and delegation members, and the
    compounding helper that evaluates (1 + r) ** n and (1 + r) ** n - 1.
    Formulas do not inherit from a common base; each is an independent
    frozen dataclass.

Architecture position:
    Formulas -- pure calculation layer, zero I/O.
    May only import fincalc_kernel.

Invariants enforced:
    - Every formula validates amount and RateAndPeriods at invocation.
    - Compounding formulas reject rates <= -1: the growth factor 1 + r
      must be positive.
    - Growth factors are evaluated with guard digits above the policy's
      precision; formulas round to the policy exactly once, in the final
      Money operation.
    - (1 + r) ** n - 1 keeps its significant digits for any non-zero rate,
      however small. Rates whose growth is below the working precision
      use the first-order term n x r.
"""

from __future__ import annotations

import decimal
from dataclasses import dataclass
from decimal import Context, Decimal
from typing import Any, Final, Protocol, TypeVar, runtime_checkable

from fincalc_kernel.domain.calculation_context import CalculationContext, resolve_context
from fincalc_kernel.domain.results import ConstructionResult, attempt
from fincalc_kernel.domain.values import Money, RateAndPeriods
from fincalc_kernel.exceptions import (
    InvalidArgumentError,
    InvalidRateError,
    MissingArgumentError,
)

# Digits carried above the policy's precision while compounding.
GUARD_DIGITS: Final[int] = 4

FINGERPRINT_FIELDS: Final[tuple[str, ...]] = ("amount", "rate_and_periods", "context")


@runtime_checkable
class MonetaryOperator(Protocol):
    """
    Protocol for monetary operators.

    Operators are:
    - Pure: no side effects beyond allocating the result
    - Deterministic: same amount and context always give the same result
    - Currency-preserving: the result is in the input's currency
    """

    def apply(self, amount: Money) -> Money:
        ...


def require_amount(amount: Any) -> Money:
    """Return amount if it is a Money, else raise InvalidArgumentError."""
    if amount is None:
        raise MissingArgumentError("amount")
    if not isinstance(amount, Money):
        raise InvalidArgumentError("amount", amount, "must be Money")
    return amount


def require_rate_and_periods(rate_and_periods: Any) -> RateAndPeriods:
    """Return rate_and_periods if it is a RateAndPeriods, else raise InvalidArgumentError."""
    if rate_and_periods is None:
        raise MissingArgumentError("rate_and_periods")
    if not isinstance(rate_and_periods, RateAndPeriods):
        raise InvalidArgumentError(
            "rate_and_periods", rate_and_periods, "must be RateAndPeriods"
        )
    return rate_and_periods


def require_growth_rate(rate_and_periods: RateAndPeriods) -> Decimal:
    """Return the rate of a compounding formula, rejecting r <= -1."""
    rate = rate_and_periods.rate.value
    if rate <= -1:
        raise InvalidRateError(rate, "must be greater than -1 for compounding")
    return rate


# ---------------------------------------------------------------------------
# Compounding
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Compounding:
    """
    (1 + r) ** n evaluated at working precision.

    ``work`` is the decimal.Context the formula continues in; its
    precision exceeds the policy's so the formula's own divisions and
    products do not add rounding error before the final Money operation.
    """

    rate: Decimal
    work: Context
    growth: Decimal
    growth_less_one: Decimal

    @property
    def is_flat(self) -> bool:
        """True when the amount does not grow: r == 0, or n x r underflows."""
        return not self.growth_less_one


def compound(rate: Decimal, periods: int, context: CalculationContext) -> Compounding:
    """
    Evaluate (1 + rate) ** periods and (1 + rate) ** periods - 1.

    Working precision is the policy's precision plus the digits of
    ``periods`` plus GUARD_DIGITS. Subtracting 1 from the growth factor
    cancels about -log10(|rate|) digits, so the power itself is taken
    with that many more. When n x r is smaller than one unit of the
    working precision, 1 + n x r is the growth factor to that precision
    and n x r is used directly.
    """
    base_prec = min(context.precision + len(str(periods)) + GUARD_DIGITS, decimal.MAX_PREC)
    work = context.math_context()
    work.prec = base_prec
    one = context.one()

    first_order = work.multiply(Decimal(periods), rate)
    if not first_order:
        return Compounding(rate, work, one, Decimal(0))
    if first_order.adjusted() < -base_prec:
        return Compounding(rate, work, work.add(one, first_order), first_order)

    work.prec = min(base_prec + max(0, -rate.adjusted()), decimal.MAX_PREC)
    growth = work.power(work.add(one, rate), periods)
    return Compounding(rate, work, growth, work.subtract(growth, one))


def annuity_growth(c: Compounding) -> Decimal:
    """((1 + r) ** n - 1) / r, the accumulation factor of an ordinary annuity."""
    return c.work.divide(c.growth_less_one, c.rate)


def annuity_discount(c: Compounding) -> Decimal:
    """(1 - (1 + r) ** -n) / r, written as ((1 + r) ** n - 1) / ((1 + r) ** n x r)."""
    return c.work.divide(c.growth_less_one, c.work.multiply(c.growth, c.rate))


# ---------------------------------------------------------------------------
# Shared operator construction
# ---------------------------------------------------------------------------

_T = TypeVar("_T")


def _validate_configuration(self: Any) -> None:
    rate_and_periods = require_rate_and_periods(self.rate_and_periods)
    if self.compounding:
        require_growth_rate(rate_and_periods)
    if self.context is not None:
        resolve_context(self.context)


def _of(
    cls: type[_T],
    rate_and_periods: RateAndPeriods,
    context: CalculationContext | None = None,
) -> _T:
    """
    Build the operator.

    Raises:
        MissingArgumentError: If rate_and_periods is None.
        InvalidArgumentError: If rate_and_periods is not a RateAndPeriods
            or context is not a CalculationContext.
        InvalidRateError: If the formula compounds and the rate is <= -1.
    """
    return cls(rate_and_periods, context)


def _try_of(
    cls: type[_T],
    rate_and_periods: RateAndPeriods,
    context: CalculationContext | None = None,
) -> ConstructionResult[_T]:
    """Like ``of`` but returns a ConstructionResult instead of raising."""
    return attempt(cls.of, rate_and_periods, context)


def _apply(self: Any, amount: Money) -> Money:
    return self.calculate(amount, self.rate_and_periods, self.context)


def _call(self: Any, amount: Money) -> Money:
    return self.apply(amount)


def _str(self: Any) -> str:
    return f"{type(self).__name__}{{{self.rate_and_periods}}}"


_SHARED_MEMBERS: Final[dict[str, Any]] = {
    "__post_init__": _validate_configuration,
    "of": classmethod(_of),
    "try_of": classmethod(_try_of),
    "apply": _apply,
    "__call__": _call,
    "__str__": _str,
}


def rate_period_operator(cls: type | None = None, *, compounding: bool = True) -> Any:
    """
    Class decorator giving a formula the shared operator contract.

    The formula declares ``formula_name``, the ``rate_and_periods`` and
    ``context`` fields and a static ``calculate``. The decorator adds
    construction-time validation (``__post_init__``), ``of``, ``try_of``,
    ``apply``, ``__call__`` and ``__str__``; members the class defines
    itself are kept. Apply it beneath ``@dataclass`` so the generated
    ``__init__`` runs the validation.

    compounding=False skips the r > -1 check.

    Raises:
        TypeError: If the class has no ``formula_name`` or ``calculate``.
    """

    def decorate(formula: type) -> type:
        for required in ("formula_name", "calculate"):
            if not hasattr(formula, required):
                raise TypeError(f"{formula.__name__} has no {required}")
        formula.compounding = compounding
        for name, member in _SHARED_MEMBERS.items():
            if name not in vars(formula):
                setattr(formula, name, member)
        return formula

    if cls is None:
        return decorate
    return decorate(cls)
