"""
Values -- Immutable, self-validating domain value objects.

Responsibility:
    Provides the value types every formula consumes and produces:
    Currency, Money, Rate and RateAndPeriods. These replace primitive
    types (Decimal, str, int) wherever financial data appears.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Imported by fincalc_formulas. Depends only on the currency registry,
    the calculation context and the exception hierarchy.

Invariants enforced:
    - Money pairs a finite Decimal with a registered ISO 4217 Currency;
      the two are never separated and floats never survive construction.
    - Money arithmetic that can round (multiply, divide) runs under an
      explicit CalculationContext, never the thread-local decimal context.
    - Rate holds one finite Decimal. RateAndPeriods holds a Rate and an
      integer period count >= 1.

Failure modes:
    - MissingArgumentError / InvalidRateError / InvalidPeriodsError /
      InvalidAmountError on construction with out-of-domain input.
    - InvalidCurrencyError for unknown currency codes.
    - CurrencyMismatchError (an ArithmeticError) when arithmetic mixes
      currencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from fincalc_kernel.domain.calculation_context import (
    ROUNDING_MODES,
    CalculationContext,
    resolve_context,
)
from fincalc_kernel.domain.currency import CurrencyRegistry
from fincalc_kernel.domain.results import ConstructionResult, attempt
from fincalc_kernel.exceptions import (
    CurrencyMismatchError,
    InvalidAmountError,
    InvalidArgumentError,
    InvalidPeriodsError,
    InvalidRateError,
    MissingArgumentError,
)

Numeric = Decimal | int | str | float


def to_decimal(value: Any, argument: str) -> Decimal:
    """
    Convert a numeric input to a finite Decimal.

    Floats are converted through ``str`` so 0.05 becomes Decimal("0.05"),
    not its binary expansion.

    Raises:
        MissingArgumentError: If value is None.
        InvalidArgumentError: If value is a bool, unparsable, or not finite.
    """
    if value is None:
        raise MissingArgumentError(argument)
    if isinstance(value, bool):
        raise InvalidArgumentError(argument, value, "booleans are not numbers")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float, str)):
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError) as e:
            raise InvalidArgumentError(argument, value, "not a decimal number") from e
    else:
        raise InvalidArgumentError(
            argument, value, f"unsupported type {type(value).__name__}"
        )
    if not result.is_finite():
        raise InvalidArgumentError(argument, value, "must be finite")
    return result


@dataclass(frozen=True, slots=True)
class Currency:
    """
    ISO 4217 currency code value object.

    Guarantees:
        - Immutable and hashable
        - code is always an uppercase, registered ISO 4217 code
    """

    code: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "code", CurrencyRegistry.validate(self.code))

    @property
    def minor_units(self) -> int:
        return CurrencyRegistry.get_minor_units(self.code)

    @property
    def quantum(self) -> Decimal:
        """Smallest unit of this currency, e.g. Decimal("0.01") for USD."""
        return Decimal(1).scaleb(-self.minor_units)

    @property
    def name(self) -> str:
        info = CurrencyRegistry.get_info(self.code)
        return info.name if info else self.code

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"Currency({self.code!r})"


@dataclass(frozen=True, slots=True)
class Money:
    """
    Monetary amount value object.

    Contract:
        Pairs a Decimal amount with its Currency. Every operation returns a
        new Money in the same currency; nothing is mutated in place.

    Guarantees:
        - Immutable and hashable
        - amount is always a finite Decimal (never float)
        - Arithmetic never mixes currencies silently

    Non-goals:
        - Does NOT perform currency conversion
        - Does NOT auto-round -- callers must explicitly call .round()
    """

    amount: Decimal
    currency: Currency

    def __post_init__(self) -> None:
        try:
            amount = to_decimal(self.amount, "amount")
        except MissingArgumentError:
            raise
        except InvalidArgumentError as e:
            raise InvalidAmountError(self.amount, e.reason) from e
        object.__setattr__(self, "amount", amount)

        if self.currency is None:
            raise MissingArgumentError("currency")
        if isinstance(self.currency, str):
            object.__setattr__(self, "currency", Currency(self.currency))
        elif not isinstance(self.currency, Currency):
            raise InvalidArgumentError(
                "currency", self.currency, "must be Currency or str"
            )

    @classmethod
    def of(cls, amount: Numeric, currency: str | Currency) -> Money:
        """
        Factory method for creating Money.

        Raises:
            InvalidAmountError: If amount is not a finite decimal.
            InvalidCurrencyError: If currency is not a registered code.
        """
        return cls(amount=amount, currency=currency)

    @classmethod
    def zero(cls, currency: str | Currency) -> Money:
        return cls(amount=Decimal("0"), currency=currency)

    @property
    def is_zero(self) -> bool:
        return self.amount == 0

    @property
    def is_positive(self) -> bool:
        return self.amount > 0

    @property
    def is_negative(self) -> bool:
        return self.amount < 0

    def _require_same_currency(self, other: Money, operation: str) -> None:
        if self.currency != other.currency:
            raise CurrencyMismatchError(
                operation, self.currency.code, other.currency.code
            )

    def round(self, rounding: str = ROUND_HALF_UP) -> Money:
        """Round to the currency's minor units."""
        if rounding not in ROUNDING_MODES:
            raise InvalidArgumentError("rounding", rounding, "not a decimal rounding mode")
        rounded = self.amount.quantize(self.currency.quantum, rounding=rounding)
        return Money(amount=rounded, currency=self.currency)

    def add(self, other: Money, context: CalculationContext | None = None) -> Money:
        self._require_same_currency(other, "add")
        ctx = resolve_context(context).math_context()
        return Money(amount=ctx.add(self.amount, other.amount), currency=self.currency)

    def subtract(self, other: Money, context: CalculationContext | None = None) -> Money:
        self._require_same_currency(other, "subtract")
        ctx = resolve_context(context).math_context()
        return Money(amount=ctx.subtract(self.amount, other.amount), currency=self.currency)

    def multiply(self, factor: Numeric, context: CalculationContext | None = None) -> Money:
        """Multiply by a scalar under ``context`` (process default if None)."""
        factor = to_decimal(factor, "factor")
        ctx = resolve_context(context).math_context()
        return Money(amount=ctx.multiply(self.amount, factor), currency=self.currency)

    def divide(self, divisor: Numeric, context: CalculationContext | None = None) -> Money:
        """
        Divide by a scalar under ``context`` (process default if None).

        Raises:
            decimal.DivisionByZero: If divisor is zero.
        """
        divisor = to_decimal(divisor, "divisor")
        ctx = resolve_context(context).math_context()
        return Money(amount=ctx.divide(self.amount, divisor), currency=self.currency)

    def __add__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return self.subtract(other)

    def __mul__(self, factor: Numeric) -> Money:
        if isinstance(factor, Money):
            return NotImplemented
        return self.multiply(factor)

    def __rmul__(self, factor: Numeric) -> Money:
        return self.__mul__(factor)

    def __truediv__(self, divisor: Numeric) -> Money:
        if isinstance(divisor, Money):
            return NotImplemented
        return self.divide(divisor)

    def __neg__(self) -> Money:
        return Money(amount=-self.amount, currency=self.currency)

    def __abs__(self) -> Money:
        return Money(amount=abs(self.amount), currency=self.currency)

    def __lt__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._require_same_currency(other, "compare")
        return self.amount < other.amount

    def __le__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._require_same_currency(other, "compare")
        return self.amount <= other.amount

    def __gt__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._require_same_currency(other, "compare")
        return self.amount > other.amount

    def __ge__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._require_same_currency(other, "compare")
        return self.amount >= other.amount

    def __str__(self) -> str:
        return f"{self.amount} {self.currency.code}"

    def __repr__(self) -> str:
        return f"Money({self.amount!r}, {self.currency!r})"


@dataclass(frozen=True, slots=True)
class Rate:
    """
    Dimensionless per-period rate, e.g. Rate.of("0.05") for 5 %.

    Guarantees:
        - Immutable, hashable, compared by value
        - value is always a finite Decimal

    Non-goals:
        - Does NOT restrict the sign; formulas apply their own domain
    """

    value: Decimal

    def __post_init__(self) -> None:
        if self.value is None:
            raise MissingArgumentError("rate")
        try:
            value = to_decimal(self.value, "rate")
        except InvalidArgumentError as e:
            raise InvalidRateError(self.value, e.reason) from e
        object.__setattr__(self, "value", value)

    @classmethod
    def of(cls, value: Numeric | Rate) -> Rate:
        """
        Create a Rate from a decimal fraction.

        Raises:
            MissingArgumentError: If value is None.
            InvalidRateError: If value is not a finite number.
        """
        if isinstance(value, Rate):
            return value
        return cls(value=value)

    @classmethod
    def of_percent(cls, percent: Numeric) -> Rate:
        """Rate.of_percent(5) == Rate.of("0.05")."""
        return cls(value=to_decimal(percent, "rate").scaleb(-2))

    @classmethod
    def try_of(cls, value: Numeric | Rate) -> ConstructionResult[Rate]:
        return attempt(cls.of, value)

    def get(self) -> Decimal:
        return self.value

    def __str__(self) -> str:
        return f"Rate[{self.value}]"


@dataclass(frozen=True, slots=True)
class RateAndPeriods:
    """
    A Rate paired with a number of periods.

    Contract:
        Parameter object for every rate/period formula. Validated eagerly,
        immutable afterwards, safe to share between threads.

    Guarantees:
        - rate is a Rate
        - periods is an int >= 1 (bools rejected)
    """

    rate: Rate
    periods: int

    def __post_init__(self) -> None:
        if self.rate is None:
            raise MissingArgumentError("rate")
        object.__setattr__(self, "rate", Rate.of(self.rate))

        if self.periods is None:
            raise MissingArgumentError("periods")
        if isinstance(self.periods, bool) or not isinstance(self.periods, int):
            raise InvalidPeriodsError(self.periods, "must be an integer")
        if self.periods < 1:
            raise InvalidPeriodsError(self.periods)

    @classmethod
    def of(cls, rate: Rate | Numeric, periods: int) -> RateAndPeriods:
        """
        Raises:
            MissingArgumentError: If rate or periods is None.
            InvalidRateError: If rate is not a finite number.
            InvalidPeriodsError: If periods is not an integer >= 1.
        """
        return cls(rate=rate, periods=periods)

    @classmethod
    def try_of(cls, rate: Rate | Numeric, periods: int) -> ConstructionResult[RateAndPeriods]:
        return attempt(cls.of, rate, periods)

    def get_rate(self) -> Rate:
        return self.rate

    def get_periods(self) -> int:
        return self.periods

    def __str__(self) -> str:
        return f"RateAndPeriods(rate={self.rate.value}, periods={self.periods})"
