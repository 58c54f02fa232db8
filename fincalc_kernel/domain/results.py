"""Construction results -- non-raising outcomes for value and operator factories."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from fincalc_kernel.exceptions import InvalidArgumentError

T = TypeVar("T")


@dataclass(frozen=True)
class ValidationError:
    """
    A single validation error.

    Contract:
        Carries the machine-readable code of the exception that would have
        been raised, a human-readable message and the offending argument.

    Non-goals:
        - Does NOT raise exceptions -- it IS the error representation.
    """

    code: str
    message: str
    field: str | None = None
    details: dict[str, Any] | None = None

    @classmethod
    def from_exception(cls, exc: InvalidArgumentError) -> ValidationError:
        return cls(
            code=exc.code,
            message=str(exc),
            field=exc.argument,
            details={"value": repr(exc.value), "reason": exc.reason},
        )


@dataclass(frozen=True)
class ConstructionResult(Generic[T]):
    """
    Result of a ``try_of`` factory.

    Either contains a value OR validation errors, never both.
    """

    value: T | None
    errors: tuple[ValidationError, ...] = field(default_factory=tuple)

    @classmethod
    def success(cls, value: T) -> ConstructionResult[T]:
        return cls(value=value, errors=())

    @classmethod
    def failure(cls, *errors: ValidationError) -> ConstructionResult[T]:
        return cls(value=None, errors=tuple(errors))

    @property
    def is_valid(self) -> bool:
        return not self.errors and self.value is not None

    def unwrap(self) -> T:
        """Return the value, or raise ValueError listing the errors."""
        if not self.is_valid:
            raise ValueError(
                "Construction failed: " + "; ".join(e.message for e in self.errors)
            )
        return self.value  # type: ignore[return-value]

    def __bool__(self) -> bool:
        return self.is_valid


def attempt(factory: Callable[..., T], *args: Any, **kwargs: Any) -> ConstructionResult[T]:
    """Run a raising factory and capture InvalidArgumentError as a failure."""
    try:
        return ConstructionResult.success(factory(*args, **kwargs))
    except InvalidArgumentError as exc:
        return ConstructionResult.failure(ValidationError.from_exception(exc))
