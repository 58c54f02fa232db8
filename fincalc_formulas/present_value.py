"""
fincalc_formulas.present_value -- Present value of a sum and of annuities.

Responsibility:
    Discount a single future amount, an ordinary annuity and an annuity
    due back to today at a fixed per-period rate.

Architecture position:
    Formulas -- pure calculation layer, zero I/O.

Invariants enforced:
    - Rates must be greater than -1.
    - A zero rate returns the undiscounted sum: amount (single) or
      amount x periods (annuities).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from fincalc_formulas.base import (
    FINGERPRINT_FIELDS,
    annuity_discount,
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
class PresentValue:
    """
    Today's value of an amount received after n periods: A / (1 + r) ** n.
    """

    formula_name: ClassVar[str] = "present_value"

    rate_and_periods: RateAndPeriods
    context: CalculationContext | None = None

    @staticmethod
    @traced_formula("present_value", "1.0", fingerprint_fields=FINGERPRINT_FIELDS)
    def calculate(
        amount: Money,
        rate_and_periods: RateAndPeriods,
        context: CalculationContext | None = None,
    ) -> Money:
        amount = require_amount(amount)
        rate_and_periods = require_rate_and_periods(rate_and_periods)
        rate = require_growth_rate(rate_and_periods)
        calc = resolve_context(context)
        return amount.divide(compound(rate, rate_and_periods.periods, calc).growth, calc)


@FormulaRegistry.register
@dataclass(frozen=True, slots=True)
@rate_period_operator
class PresentValueOfAnnuity:
    """
    Present value of an ordinary annuity (payments at period end).

    Formula:
        PVA = A x (1 - (1 + r) ** -n) / r

    Guarantees:
        - r == 0 returns amount x periods
        - apply(amount) == calculate(amount, rate_and_periods, context)
    """

    formula_name: ClassVar[str] = "present_value_of_annuity"

    rate_and_periods: RateAndPeriods
    context: CalculationContext | None = None

    @staticmethod
    @traced_formula("present_value_of_annuity", "1.0", fingerprint_fields=FINGERPRINT_FIELDS)
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
        return amount.multiply(annuity_discount(c), calc)


@FormulaRegistry.register
@dataclass(frozen=True, slots=True)
@rate_period_operator
class PresentValueOfAnnuityDue:
    """
    Present value of an annuity due (payments at period start).

    PVAD = PVA x (1 + r).
    """

    formula_name: ClassVar[str] = "present_value_of_annuity_due"

    rate_and_periods: RateAndPeriods
    context: CalculationContext | None = None

    @staticmethod
    @traced_formula("present_value_of_annuity_due", "1.0", fingerprint_fields=FINGERPRINT_FIELDS)
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
        factor = c.work.multiply(annuity_discount(c), c.work.add(calc.one(), rate))
        return amount.multiply(factor, calc)
