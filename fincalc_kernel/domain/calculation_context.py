"""
CalculationContext -- Numeric precision and rounding policy for formulas.

Responsibility:
    Holds the decimal precision, rounding mode and exponent limits under
    which every formula evaluates its intermediate results. All formulas
    route additions, powers and divisions through the same policy, so
    composed calculations are reproducible.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Consumed by fincalc_kernel.domain.values (Money arithmetic) and by
    every operator in fincalc_formulas.

Invariants enforced:
    - 1 <= precision <= decimal.MAX_PREC, rounding is a ``decimal``
      rounding constant, decimal.MIN_EMIN <= emin <= 0 <= emax <=
      decimal.MAX_EMAX.
    - math_context() hands out a copy; the policy itself is never mutated.
    - The process default is replaced only before its first use. After
      get_default_context() has been called it is sealed and
      configure_default_context() raises ContextSealedError.

Failure modes:
    - InvalidArgumentError on an invalid policy.
    - ContextSealedError when reconfiguring a sealed default.

Concurrency:
    Policies are immutable and may be shared freely. Replacing the
    process default while calculations are in flight is a caller error;
    do it once at start-up (see fincalc_config.configure_from_file).
"""

from __future__ import annotations

import decimal
import threading
from dataclasses import dataclass, field
from decimal import ROUND_HALF_EVEN, Context, Decimal
from typing import Final

from fincalc_kernel.exceptions import ContextSealedError, InvalidArgumentError
from fincalc_kernel.logging_config import get_logger

logger = get_logger("kernel.calculation_context")

ROUNDING_MODES: Final[frozenset[str]] = frozenset({
    decimal.ROUND_CEILING,
    decimal.ROUND_DOWN,
    decimal.ROUND_FLOOR,
    decimal.ROUND_HALF_DOWN,
    decimal.ROUND_HALF_EVEN,
    decimal.ROUND_HALF_UP,
    decimal.ROUND_UP,
    decimal.ROUND_05UP,
})

# IEEE 754 decimal64
DEFAULT_PRECISION: Final[int] = 16
DEFAULT_ROUNDING: Final[str] = ROUND_HALF_EVEN
DEFAULT_EMIN: Final[int] = -383
DEFAULT_EMAX: Final[int] = 384

_TRAPS: Final[tuple[type[decimal.DecimalException], ...]] = (
    decimal.DivisionByZero,
    decimal.InvalidOperation,
    decimal.Overflow,
)


@dataclass(frozen=True, slots=True)
class CalculationContext:
    """
    Immutable numeric policy shared by all formulas.

    Contract:
        math_context() returns a ``decimal.Context`` honouring the policy,
        with DivisionByZero, InvalidOperation and Overflow trapped.
        one() returns the multiplicative identity created under it.

    Guarantees:
        - Immutable and hashable
        - Two contexts with the same fields produce identical results

    Non-goals:
        - Does NOT install itself as the thread-local decimal context
    """

    precision: int = DEFAULT_PRECISION
    rounding: str = DEFAULT_ROUNDING
    emin: int = DEFAULT_EMIN
    emax: int = DEFAULT_EMAX
    _context: Context = field(init=False, repr=False, compare=False, hash=False)
    _one: Decimal = field(init=False, repr=False, compare=False, hash=False)

    def __post_init__(self) -> None:
        if isinstance(self.precision, bool) or not isinstance(self.precision, int) or self.precision < 1:
            raise InvalidArgumentError("precision", self.precision, "must be an integer >= 1")
        if self.precision > decimal.MAX_PREC:
            raise InvalidArgumentError(
                "precision", self.precision, f"must be <= {decimal.MAX_PREC}"
            )
        if self.rounding not in ROUNDING_MODES:
            raise InvalidArgumentError(
                "rounding", self.rounding, f"must be one of {sorted(ROUNDING_MODES)}"
            )
        if not isinstance(self.emin, int) or self.emin > 0:
            raise InvalidArgumentError("emin", self.emin, "must be an integer <= 0")
        if self.emin < decimal.MIN_EMIN:
            raise InvalidArgumentError("emin", self.emin, f"must be >= {decimal.MIN_EMIN}")
        if not isinstance(self.emax, int) or self.emax < 0:
            raise InvalidArgumentError("emax", self.emax, "must be an integer >= 0")
        if self.emax > decimal.MAX_EMAX:
            raise InvalidArgumentError("emax", self.emax, f"must be <= {decimal.MAX_EMAX}")

        ctx = Context(
            prec=self.precision,
            rounding=self.rounding,
            Emin=self.emin,
            Emax=self.emax,
            traps=list(_TRAPS),
        )
        object.__setattr__(self, "_context", ctx)
        object.__setattr__(self, "_one", ctx.create_decimal(1))

    @classmethod
    def decimal64(cls) -> CalculationContext:
        """The default policy: 16 digits, half-even."""
        return cls()

    def math_context(self) -> Context:
        """A fresh ``decimal.Context`` for this policy."""
        return self._context.copy()

    def one(self) -> Decimal:
        """The constant 1 under this policy."""
        return self._one

    def __str__(self) -> str:
        return f"CalculationContext(precision={self.precision}, rounding={self.rounding})"


# ---------------------------------------------------------------------------
# Process default
# ---------------------------------------------------------------------------

_default_context: CalculationContext = CalculationContext()
_sealed = False
_lock = threading.Lock()


def get_default_context() -> CalculationContext:
    """Return the process default policy and seal it against replacement."""
    global _sealed
    with _lock:
        _sealed = True
        return _default_context


def configure_default_context(context: CalculationContext) -> None:
    """
    Replace the process default policy.

    Preconditions:
        - No calculation has used the default yet.

    Raises:
        InvalidArgumentError: If context is not a CalculationContext.
        ContextSealedError: If the default has already been used.
    """
    global _default_context
    if not isinstance(context, CalculationContext):
        raise InvalidArgumentError(
            "context", context, "must be a CalculationContext"
        )
    with _lock:
        if _sealed and context != _default_context:
            raise ContextSealedError(str(_default_context), str(context))
        _default_context = context
    logger.info("calculation_context_configured", extra={
        "precision": context.precision,
        "rounding": context.rounding,
        "emin": context.emin,
        "emax": context.emax,
    })


def is_default_context_sealed() -> bool:
    with _lock:
        return _sealed


def reset_default_context() -> None:
    """Restore the decimal64 default and unseal it. FOR TESTING ONLY."""
    global _default_context, _sealed
    with _lock:
        _default_context = CalculationContext()
        _sealed = False


def resolve_context(context: CalculationContext | None) -> CalculationContext:
    """Return ``context`` if given, else the (now sealed) process default."""
    if context is None:
        return get_default_context()
    if not isinstance(context, CalculationContext):
        raise InvalidArgumentError("context", context, "must be a CalculationContext")
    return context
