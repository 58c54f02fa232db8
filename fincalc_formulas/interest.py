"""
fincalc_formulas.interest -- Interest earned and level annuity payments.

Responsibility:
    Interest accrued on a principal (compound and simple) and the level
    payment that amortises a present value over n periods.

Architecture position:
    Formulas -- pure calculation layer, zero I/O.

Invariants enforced:
    - CompoundInterest and AnnuityPayment require rates greater than -1.
    - SimpleInterest accepts any finite rate; it never compounds.
    - AnnuityPayment with r == 0 spreads the amount evenly: amount / periods.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from fincalc_formulas.base import (
    FINGERPRINT_FIELDS,
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
class CompoundInterest:
    """
    Interest earned on a principal with compounding: A x ((1 + r) ** n - 1).
    """

    formula_name: ClassVar[str] = "compound_interest"

    rate_and_periods: RateAndPeriods
    context: CalculationContext | None = None

    @staticmethod
    @traced_formula("compound_interest", "1.0", fingerprint_fields=FINGERPRINT_FIELDS)
    def calculate(
        amount: Money,
        rate_and_periods: RateAndPeriods,
        context: CalculationContext | None = None,
    ) -> Money:
        amount = require_amount(amount)
        rate_and_periods = require_rate_and_periods(rate_and_periods)
        rate = require_growth_rate(rate_and_periods)
        calc = resolve_context(context)
        c = compound(rate, rate_and_periods.periods, calc)
        return amount.multiply(c.growth_less_one, calc)


@FormulaRegistry.register
@dataclass(frozen=True, slots=True)
@rate_period_operator(compounding=False)
class SimpleInterest:
    """Interest without compounding: A x r x n."""

    formula_name: ClassVar[str] = "simple_interest"

    rate_and_periods: RateAndPeriods
    context: CalculationContext | None = None

    @staticmethod
    @traced_formula("simple_interest", "1.0", fingerprint_fields=FINGERPRINT_FIELDS)
    def calculate(
        amount: Money,
        rate_and_periods: RateAndPeriods,
        context: CalculationContext | None = None,
    ) -> Money:
        amount = require_amount(amount)
        rate_and_periods = require_rate_and_periods(rate_and_periods)
        calc = resolve_context(context)
        ctx = calc.math_context()
        factor = ctx.multiply(rate_and_periods.rate.value, rate_and_periods.periods)
        return amount.multiply(factor, calc)


@FormulaRegistry.register
@dataclass(frozen=True, slots=True)
@rate_period_operator
class AnnuityPayment:
    """
    Level payment per period that repays a present value.

    Formula:
        P = PV x r / (1 - (1 + r) ** -n)

    evaluated as PV x r x (1 + r) ** n / ((1 + r) ** n - 1), which stays
    finite for rates too small to move 1 + r at the policy's precision.

    The inverse of PresentValueOfAnnuity:
    PresentValueOfAnnuity(AnnuityPayment(PV)) == PV within the context's
    precision.
    """

    formula_name: ClassVar[str] = "annuity_payment"

    rate_and_periods: RateAndPeriods
    context: CalculationContext | None = None

    @staticmethod
    @traced_formula("annuity_payment", "1.0", fingerprint_fields=FINGERPRINT_FIELDS)
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
            return amount.divide(periods, calc)
        work = c.work
        factor = work.divide(work.multiply(rate, c.growth), c.growth_less_one)
        return amount.multiply(factor, calc)
