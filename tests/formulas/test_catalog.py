"""
Tests for the sibling formulas of the catalog.

Each formula is checked against a worked value at 5 % over 10 periods
and against the algebraic identities that tie the catalog together.
"""

import dataclasses
import decimal
from decimal import Decimal

import pytest

from fincalc_formulas import (
    AnnuityPayment,
    CompoundInterest,
    FormulaRegistry,
    FutureValue,
    FutureValueOfAnnuity,
    FutureValueOfAnnuityDue,
    PresentValue,
    PresentValueOfAnnuity,
    PresentValueOfAnnuityDue,
    SimpleInterest,
    compound,
    rate_period_operator,
)
from fincalc_kernel.domain.calculation_context import CalculationContext
from fincalc_kernel.domain.values import Money, Rate, RateAndPeriods
from fincalc_kernel.exceptions import InvalidArgumentError, InvalidRateError

ALL_FORMULAS = [
    FutureValue,
    FutureValueOfAnnuity,
    FutureValueOfAnnuityDue,
    PresentValue,
    PresentValueOfAnnuity,
    PresentValueOfAnnuityDue,
    CompoundInterest,
    SimpleInterest,
    AnnuityPayment,
]

COMPOUNDING_FORMULAS = [f for f in ALL_FORMULAS if f is not SimpleInterest]


class TestWorkedValues:
    """1000 USD at 5 % for 10 periods, rounded half-up to cents."""

    @pytest.mark.parametrize(
        "formula, expected",
        [
            (FutureValue, "1628.89"),
            (FutureValueOfAnnuity, "12577.89"),
            (FutureValueOfAnnuityDue, "13206.79"),
            (PresentValue, "613.91"),
            (PresentValueOfAnnuity, "7721.73"),
            (PresentValueOfAnnuityDue, "8107.82"),
            (CompoundInterest, "628.89"),
            (SimpleInterest, "500.00"),
            (AnnuityPayment, "129.50"),
        ],
    )
    def test_rounded_value(self, formula, expected, payment_usd, five_percent_ten_periods):
        result = formula.calculate(payment_usd, five_percent_ten_periods)
        assert result.round() == Money.of(expected, "USD")


class TestCatalogIdentities:

    def test_annuity_due_is_one_period_more_growth(
        self, payment_usd, five_percent_ten_periods, assert_money_close
    ):
        fva = FutureValueOfAnnuity.calculate(payment_usd, five_percent_ten_periods)
        fvad = FutureValueOfAnnuityDue.calculate(payment_usd, five_percent_ten_periods)
        assert_money_close(fvad, fva * "1.05")

    def test_present_value_annuity_due(
        self, payment_usd, five_percent_ten_periods, assert_money_close
    ):
        pva = PresentValueOfAnnuity.calculate(payment_usd, five_percent_ten_periods)
        pvad = PresentValueOfAnnuityDue.calculate(payment_usd, five_percent_ten_periods)
        assert_money_close(pvad, pva * "1.05")

    def test_present_value_inverts_future_value(
        self, payment_usd, five_percent_ten_periods, assert_money_close
    ):
        fv = FutureValue.calculate(payment_usd, five_percent_ten_periods)
        assert_money_close(PresentValue.calculate(fv, five_percent_ten_periods), payment_usd)

    def test_annuity_payment_inverts_present_value_of_annuity(
        self, payment_usd, five_percent_ten_periods, assert_money_close
    ):
        pva = PresentValueOfAnnuity.calculate(payment_usd, five_percent_ten_periods)
        assert_money_close(AnnuityPayment.calculate(pva, five_percent_ten_periods), payment_usd)

    def test_compounded_present_value_of_annuity_is_future_value_of_annuity(
        self, payment_usd, five_percent_ten_periods, assert_money_close
    ):
        pva = PresentValueOfAnnuity.calculate(payment_usd, five_percent_ten_periods)
        fva = FutureValueOfAnnuity.calculate(payment_usd, five_percent_ten_periods)
        assert_money_close(FutureValue.calculate(pva, five_percent_ten_periods), fva)

    def test_compound_interest_is_growth_minus_principal(
        self, payment_usd, five_percent_ten_periods, assert_money_close
    ):
        fv = FutureValue.calculate(payment_usd, five_percent_ten_periods)
        interest = CompoundInterest.calculate(payment_usd, five_percent_ten_periods)
        assert_money_close(interest, fv - payment_usd)

    def test_simple_interest_below_compound_interest(self, payment_usd, five_percent_ten_periods):
        simple = SimpleInterest.calculate(payment_usd, five_percent_ten_periods)
        compound = CompoundInterest.calculate(payment_usd, five_percent_ten_periods)
        assert simple < compound


class TestZeroRateLimits:

    @pytest.fixture
    def zero_rate(self):
        return RateAndPeriods.of(Rate.of("0"), 4)

    @pytest.mark.parametrize(
        "formula, expected",
        [
            (FutureValue, "1000"),
            (FutureValueOfAnnuity, "4000"),
            (FutureValueOfAnnuityDue, "4000"),
            (PresentValue, "1000"),
            (PresentValueOfAnnuity, "4000"),
            (PresentValueOfAnnuityDue, "4000"),
            (CompoundInterest, "0"),
            (SimpleInterest, "0"),
            (AnnuityPayment, "250"),
        ],
    )
    def test_zero_rate(self, formula, expected, payment_usd, zero_rate):
        assert formula.calculate(payment_usd, zero_rate) == Money.of(expected, "USD")


class TestSharedContract:

    @pytest.mark.parametrize("formula", ALL_FORMULAS)
    def test_registered_under_formula_name(self, formula):
        assert FormulaRegistry.get(formula.formula_name) is formula

    @pytest.mark.parametrize("formula", ALL_FORMULAS)
    def test_apply_equals_calculate(self, formula, payment_usd, five_percent_ten_periods):
        operator = formula.of(five_percent_ten_periods)
        assert operator.apply(payment_usd) == formula.calculate(
            payment_usd, five_percent_ten_periods
        )

    @pytest.mark.parametrize("formula", ALL_FORMULAS)
    def test_currency_preserved(self, formula, five_percent_ten_periods):
        result = formula.of(five_percent_ten_periods).apply(Money.of("500", "EUR"))
        assert result.currency.code == "EUR"

    @pytest.mark.parametrize("formula", ALL_FORMULAS)
    def test_str_names_the_formula(self, formula, five_percent_ten_periods):
        assert str(formula.of(five_percent_ten_periods)).startswith(formula.__name__ + "{")

    @pytest.mark.parametrize("formula", COMPOUNDING_FORMULAS)
    def test_compounding_rejects_rate_minus_one(self, formula, payment_usd):
        rp = RateAndPeriods.of(Rate.of("-1"), 3)
        with pytest.raises(InvalidRateError):
            formula.of(rp)
        with pytest.raises(InvalidRateError):
            formula.calculate(payment_usd, rp)

    def test_simple_interest_accepts_any_finite_rate(self, payment_usd):
        rp = RateAndPeriods.of(Rate.of("-1.5"), 2)
        assert SimpleInterest.calculate(payment_usd, rp) == Money.of("-3000", "USD")


class TestTinyRateLimits:
    """Rates too small to move 1 + r at 16 digits converge to the zero-rate values."""

    @pytest.mark.parametrize("rate", ["1E-17", "-1E-17", "1E-30", "-1E-30"])
    @pytest.mark.parametrize(
        "formula, expected",
        [
            (FutureValue, "1000.00"),
            (FutureValueOfAnnuity, "10000.00"),
            (FutureValueOfAnnuityDue, "10000.00"),
            (PresentValue, "1000.00"),
            (PresentValueOfAnnuity, "10000.00"),
            (PresentValueOfAnnuityDue, "10000.00"),
            (CompoundInterest, "0.00"),
            (SimpleInterest, "0.00"),
            (AnnuityPayment, "100.00"),
        ],
    )
    def test_rounded_limit(self, formula, expected, rate, payment_usd):
        result = formula.calculate(payment_usd, RateAndPeriods.of(rate, 10))
        assert result.round() == Money.of(expected, "USD")

    def test_annuity_payment_finite_where_discount_rounds_to_one(self, payment_usd):
        payment = AnnuityPayment.calculate(payment_usd, RateAndPeriods.of("1E-17", 10))
        assert abs(payment.amount - Decimal("100")) < Decimal("1E-12")

    def test_rate_underflowing_the_context_is_the_zero_rate(self, payment_usd):
        rp = RateAndPeriods.of("1E-500", 10)
        assert FutureValueOfAnnuity.calculate(payment_usd, rp) == Money.of("10000", "USD")
        assert AnnuityPayment.calculate(payment_usd, rp) == Money.of("100", "USD")

    def test_compound_interest_keeps_significant_digits(self, payment_usd):
        interest = CompoundInterest.calculate(payment_usd, RateAndPeriods.of("1E-17", 10))
        assert abs(interest.amount - Decimal("1E-13")) < Decimal("1E-27")


class TestCompounding:

    def test_growth_less_one_without_cancellation(self):
        c = compound(Decimal("1E-17"), 10, CalculationContext())
        assert abs(c.growth_less_one - Decimal("1E-16")) < Decimal("1E-30")
        assert not c.is_flat

    def test_zero_rate_is_flat(self):
        c = compound(Decimal(0), 10, CalculationContext())
        assert c.is_flat
        assert c.growth == 1

    def test_working_precision_has_guard_digits(self):
        c = compound(Decimal("0.05"), 10, CalculationContext(precision=6))
        assert c.work.prec > 6
        assert c.growth == Decimal("1.6288946267774")

    def test_working_context_keeps_traps(self):
        c = compound(Decimal("0.05"), 10, CalculationContext())
        assert c.work.traps[decimal.Overflow]


class TestSharedConstruction:

    @pytest.mark.parametrize("formula", ALL_FORMULAS)
    def test_independent_variants(self, formula, five_percent_ten_periods):
        assert formula.__bases__ == (object,)
        assert type(formula.of(five_percent_ten_periods)) is formula

    @pytest.mark.parametrize("formula", ALL_FORMULAS)
    def test_same_factory_for_every_formula(self, formula):
        assert formula.of.__func__ is FutureValueOfAnnuity.of.__func__
        assert formula.apply is FutureValueOfAnnuity.apply

    def test_equality_is_per_formula(self, five_percent_ten_periods):
        assert FutureValue.of(five_percent_ten_periods) != PresentValue.of(five_percent_ten_periods)
        assert FutureValue.of(five_percent_ten_periods) == FutureValue.of(five_percent_ten_periods)

    @pytest.mark.parametrize("formula", COMPOUNDING_FORMULAS)
    def test_try_of_rejects_rate_minus_one(self, formula):
        result = formula.try_of(RateAndPeriods.of("-1", 3))
        assert not result.is_valid
        assert result.errors[0].code == "INVALID_RATE"

    def test_simple_interest_try_of_accepts_rate_minus_one(self):
        assert SimpleInterest.try_of(RateAndPeriods.of("-1", 3)).is_valid

    def test_context_checked_at_construction(self, five_percent_ten_periods):
        with pytest.raises(InvalidArgumentError):
            PresentValueOfAnnuity.of(five_percent_ten_periods, "decimal64")

    def test_requires_calculate(self):
        with pytest.raises(TypeError):

            @rate_period_operator
            class NoCalculate:
                formula_name = "no_calculate"

    def test_own_members_kept(self, five_percent_ten_periods):
        @dataclasses.dataclass(frozen=True)
        @rate_period_operator
        class Labelled:
            formula_name = "labelled"
            rate_and_periods: RateAndPeriods
            context: CalculationContext | None = None

            @staticmethod
            def calculate(amount, rate_and_periods, context=None):
                return amount

            def __str__(self):
                return "labelled"

        operator = Labelled.of(five_percent_ten_periods)
        assert str(operator) == "labelled"
        assert operator(Money.of("5", "USD")) == Money.of("5", "USD")
