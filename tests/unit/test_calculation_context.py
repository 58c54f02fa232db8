"""
Tests for CalculationContext and the process default.

Verifies:
- Policy validation
- math_context() hands out independent copies
- The default is sealed after first use
"""

import decimal
from decimal import ROUND_DOWN, ROUND_HALF_EVEN, Decimal

import pytest

from fincalc_kernel.domain.calculation_context import (
    CalculationContext,
    configure_default_context,
    get_default_context,
    is_default_context_sealed,
    reset_default_context,
    resolve_context,
)
from fincalc_kernel.exceptions import ContextSealedError, InvalidArgumentError


class TestCalculationContext:

    def test_decimal64_defaults(self):
        ctx = CalculationContext.decimal64()
        assert ctx.precision == 16
        assert ctx.rounding == ROUND_HALF_EVEN
        assert ctx.emin == -383
        assert ctx.emax == 384

    def test_math_context_reflects_policy(self):
        mc = CalculationContext(precision=7, rounding=ROUND_DOWN).math_context()
        assert mc.prec == 7
        assert mc.rounding == ROUND_DOWN

    def test_math_context_traps_signals(self):
        mc = CalculationContext().math_context()
        assert mc.traps[decimal.DivisionByZero]
        assert mc.traps[decimal.InvalidOperation]
        assert mc.traps[decimal.Overflow]

    def test_math_context_is_a_copy(self):
        policy = CalculationContext()
        first = policy.math_context()
        first.prec = 3
        assert policy.math_context().prec == 16

    def test_one(self):
        assert CalculationContext().one() == Decimal(1)

    def test_division_follows_precision(self):
        mc = CalculationContext(precision=4).math_context()
        assert mc.divide(Decimal(1), Decimal(3)) == Decimal("0.3333")

    def test_value_equality(self):
        assert CalculationContext() == CalculationContext.decimal64()
        assert CalculationContext(precision=20) != CalculationContext()
        assert hash(CalculationContext()) == hash(CalculationContext.decimal64())

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"precision": 0},
            {"precision": True},
            {"precision": "16"},
            {"rounding": "ROUND_SIDEWAYS"},
            {"emin": 1},
            {"emax": -1},
            {"precision": decimal.MAX_PREC + 1},
            {"precision": 10**20},
            {"emin": decimal.MIN_EMIN - 1},
            {"emax": decimal.MAX_EMAX + 1},
        ],
    )
    def test_invalid_policy_rejected(self, kwargs):
        with pytest.raises(InvalidArgumentError):
            CalculationContext(**kwargs)

    def test_out_of_range_precision_names_the_argument(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            CalculationContext(precision=10**20)
        assert exc_info.value.argument == "precision"

    def test_decimal_limits_accepted(self):
        ctx = CalculationContext(emin=decimal.MIN_EMIN, emax=decimal.MAX_EMAX)
        assert ctx.math_context().Emax == decimal.MAX_EMAX

    def test_str(self):
        assert str(CalculationContext()) == (
            "CalculationContext(precision=16, rounding=ROUND_HALF_EVEN)"
        )


class TestDefaultContext:

    def test_unsealed_until_first_use(self):
        assert not is_default_context_sealed()
        get_default_context()
        assert is_default_context_sealed()

    def test_configure_before_first_use(self):
        custom = CalculationContext(precision=34)
        configure_default_context(custom)
        assert get_default_context() == custom

    def test_configure_after_first_use_rejected(self):
        get_default_context()
        with pytest.raises(ContextSealedError) as exc_info:
            configure_default_context(CalculationContext(precision=34))
        assert exc_info.value.code == "CONTEXT_SEALED"
        assert get_default_context() == CalculationContext()

    def test_reconfigure_with_same_policy_is_allowed(self):
        get_default_context()
        configure_default_context(CalculationContext.decimal64())
        assert get_default_context() == CalculationContext()

    def test_configure_rejects_non_context(self):
        with pytest.raises(InvalidArgumentError):
            configure_default_context("decimal64")

    def test_reset_unseals(self):
        configure_default_context(CalculationContext(precision=20))
        get_default_context()
        reset_default_context()
        assert not is_default_context_sealed()
        assert get_default_context() == CalculationContext()

    def test_resolve_none_uses_default(self):
        assert resolve_context(None) == CalculationContext()
        assert is_default_context_sealed()

    def test_resolve_explicit_does_not_seal(self):
        explicit = CalculationContext(precision=8)
        assert resolve_context(explicit) is explicit
        assert not is_default_context_sealed()

    def test_resolve_rejects_non_context(self):
        with pytest.raises(InvalidArgumentError):
            resolve_context(decimal.Context())
