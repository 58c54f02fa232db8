"""
Module: fincalc_formulas
Responsibility:
    Package entrypoint that re-exports the formula catalog, the operator
    protocol and the registry. Importing the package registers every
    formula with FormulaRegistry.

Architecture position:
    Formulas -- pure calculation layer, zero I/O.
    May only import fincalc_kernel (and sibling formula modules).
    MUST NOT import fincalc_config; only the CLI does.

Invariants enforced:
    - Decimal-only arithmetic under an explicit CalculationContext.
    - Determinism: identical inputs always produce identical outputs.

Usage:
    from fincalc_formulas import FutureValueOfAnnuity, FormulaRegistry
    from fincalc_kernel.domain import Money, RateAndPeriods

    rp = RateAndPeriods.of("0.05", 10)
    FutureValueOfAnnuity.calculate(Money.of("1000", "USD"), rp)
    FormulaRegistry.create("present_value", rp).apply(Money.of("1000", "USD"))
"""

from fincalc_formulas.base import (
    Compounding,
    MonetaryOperator,
    annuity_discount,
    annuity_growth,
    compound,
    rate_period_operator,
    require_amount,
    require_growth_rate,
    require_rate_and_periods,
)
from fincalc_formulas.future_value import (
    FutureValue,
    FutureValueOfAnnuity,
    FutureValueOfAnnuityDue,
)
from fincalc_formulas.interest import (
    AnnuityPayment,
    CompoundInterest,
    SimpleInterest,
)
from fincalc_formulas.present_value import (
    PresentValue,
    PresentValueOfAnnuity,
    PresentValueOfAnnuityDue,
)
from fincalc_formulas.registry import FormulaRegistry
from fincalc_formulas.tracer import compute_input_fingerprint, traced_formula

__all__ = [
    # Protocol and helpers
    "Compounding",
    "MonetaryOperator",
    "annuity_discount",
    "annuity_growth",
    "compound",
    "rate_period_operator",
    "require_amount",
    "require_growth_rate",
    "require_rate_and_periods",
    # Future value
    "FutureValue",
    "FutureValueOfAnnuity",
    "FutureValueOfAnnuityDue",
    # Present value
    "PresentValue",
    "PresentValueOfAnnuity",
    "PresentValueOfAnnuityDue",
    # Interest and payments
    "AnnuityPayment",
    "CompoundInterest",
    "SimpleInterest",
    # Registry and tracing
    "FormulaRegistry",
    "compute_input_fingerprint",
    "traced_formula",
]
