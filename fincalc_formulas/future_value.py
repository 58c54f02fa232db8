"""
fincalc_formulas.future_value -- Future value of a sum and of annuities.

Responsibility:
    Compound a single amount, an ordinary annuity and an annuity due
    forward over a number of periods at a fixed rate.

Architecture position:
    Formulas -- pure calculation layer, zero I/O.
    May only import fincalc_kernel and sibling formula modules.

Invariants enforced:
    - Rates must be greater than -1 (InvalidRateError otherwise).
    - A zero rate is the limit of the annuity formulas: amount x periods.
      Rates too small to move the growth factor converge to that limit.
    - Intermediate results carry guard digits; the result is rounded to
      the CalculationContext once.
    - The result is in the input amount's currency.

Failure modes:
    - MissingArgumentError / InvalidArgumentError on bad inputs.
    - decimal.Overflow when (1 + r) ** n exceeds the context's Emax.

Usage:
    from fincalc_formulas.future_value import FutureValueOfAnnuity
    from fincalc_kernel.domain.values import Money, RateAndPeriods

    fva = FutureValueOfAnnuity.of(RateAndPeriods.of("0.05", 10))
    fva.apply(Money.of("1000", "USD")).round()   # 12577.89 USD
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from fincalc_formulas.base import (
    FINGERPRINT_FIELDS,
    annuity_growth,
    compound,
    rate_period_operator,
    require_amount,
    require_growth_rate,
    require_rate_and_periods,
)
from fincalc_formulas.registry import FormulaRegistry
from fincalc_formulas.tracer import traced_formula
from fincalc_kernel.domain.calculation_context import CalculationContext, resolve_context
from fincalc_kernel.domain.values import Money, RateAndPeriods


@FormulaRegistry.register
@dataclass(frozen=True, slots=True)
@rate_period_operator
class FutureValue:
    """
    Value of a single amount after compounding: A x (1 + r) ** n.
    """

    formula_name: ClassVar[str] = "future_value"

    rate_and_periods: RateAndPeriods
    context: CalculationContext | None = None

    @staticmethod
    @traced_formula("future_value", "1.0", fingerprint_fields=FINGERPRINT_FIELDS)
    def calculate(
        amount: Money,
        rate_and_periods: RateAndPeriods,
        context: CalculationContext | None = None,
    ) -> Money:
        amount = require_amount(amount)
        rate_and_periods = require_rate_and_periods(rate_and_periods)
        rate = require_growth_rate(rate_and_periods)
        calc = resolve_context(context)
        return amount.multiply(compound(rate, rate_and_periods.periods, calc).growth, calc)


@FormulaRegistry.register
@dataclass(frozen=True, slots=True)
@rate_period_operator
class FutureValueOfAnnuity:
    """
    Future value of an ordinary annuity.

    Computes what a series of equal periodic payments is worth at the end
    of the last period, assuming:

    - the rate does not change
    - the first payment is one period away
    - the periodic payment does not change

    Formula:
        FVA = A x ((1 + r) ** n - 1) / r

    If the first payment is made immediately, use FutureValueOfAnnuityDue.

    Contract:
        Configured once with a RateAndPeriods (and optionally an explicit
        CalculationContext), then applied to any number of payment
        amounts. ``calculate`` is the equivalent static entry point.

    Guarantees:
        - Immutable; apply() has no side effects and is idempotent
        - apply(amount) == calculate(amount, rate_and_periods, context)
        - The result currency equals the payment currency
        - r == 0 returns amount x periods (the formula's limit), and
          rates approaching 0 converge to it

    Non-goals:
        - Does NOT round to the currency's minor units; call .round()
    """

    formula_name: ClassVar[str] = "future_value_of_annuity"

    rate_and_periods: RateAndPeriods
    context: CalculationContext | None = None

    @staticmethod
    @traced_formula("future_value_of_annuity", "1.0", fingerprint_fields=FINGERPRINT_FIELDS)
    def calculate(
        amount: Money,
        rate_and_periods: RateAndPeriods,
        context: CalculationContext | None = None,
    ) -> Money:
        """
        Perform the calculation.

        Args:
            amount: The periodic payment.
            rate_and_periods: The rate and number of periods.
            context: Numeric policy; the process default when None.

        Returns:
            The future value, in the payment's currency.

        Raises:
            MissingArgumentError: If amount or rate_and_periods is None.
            InvalidRateError: If the rate is <= -1.
            decimal.Overflow: If the growth factor exceeds the context.
        """
        amount = require_amount(amount)
        rate_and_periods = require_rate_and_periods(rate_and_periods)
        rate = require_growth_rate(rate_and_periods)
        periods = rate_and_periods.periods
        calc = resolve_context(context)

        c = compound(rate, periods, calc)
        if c.is_flat:
            return amount.multiply(periods, calc)
        return amount.multiply(annuity_growth(c), calc)


@FormulaRegistry.register
@dataclass(frozen=True, slots=True)
@rate_period_operator
class FutureValueOfAnnuityDue:
    """
    Future value of an annuity whose payments fall at the start of each period.

    FVAD = A x ((1 + r) ** n - 1) / r x (1 + r); amount x periods when r == 0.
    """

    formula_name: ClassVar[str] = "future_value_of_annuity_due"

    rate_and_periods: RateAndPeriods
    context: CalculationContext | None = None

    @staticmethod
    @traced_formula("future_value_of_annuity_due", "1.0", fingerprint_fields=FINGERPRINT_FIELDS)
    def calculate(
        amount: Money,
        rate_and_periods: RateAndPeriods,
        context: CalculationContext | None = None,
    ) -> Money:
        amount = require_amount(amount)
        rate_and_periods = require_rate_and_periods(rate_and_periods)
        rate = require_growth_rate(rate_and_periods)
        periods = rate_and_periods.periods
        calc = resolve_context(context)

        c = compound(rate, periods, calc)
        if c.is_flat:
            return amount.multiply(periods, calc)
        factor = c.work.multiply(annuity_growth(c), c.work.add(calc.one(), rate))
        return amount.multiply(factor, calc)
