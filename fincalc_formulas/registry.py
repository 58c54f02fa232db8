"""FormulaRegistry -- Name to formula class dispatch registry."""

from __future__ import annotations

from typing import Any, ClassVar

from fincalc_kernel.domain.calculation_context import CalculationContext
from fincalc_kernel.domain.values import RateAndPeriods
from fincalc_kernel.exceptions import FormulaNotFoundError


class FormulaRegistry:
    """Registry for rate/period formulas, keyed by ``formula_name``."""

    _formulas: ClassVar[dict[str, type]] = {}

    @classmethod
    def register(cls, formula: type) -> type:
        """Class decorator: register a formula under its ``formula_name``."""
        name = getattr(formula, "formula_name", None)
        if not name or not isinstance(name, str):
            raise ValueError(f"{formula.__name__} has no formula_name")

        existing = cls._formulas.get(name)
        if existing is not None and existing is not formula:
            raise ValueError(
                f"Formula already registered as {name!r}: {existing.__name__}"
            )

        cls._formulas[name] = formula
        return formula

    @classmethod
    def get(cls, name: str) -> type:
        if name not in cls._formulas:
            raise FormulaNotFoundError(name, cls.list_formulas())
        return cls._formulas[name]

    @classmethod
    def create(
        cls,
        name: str,
        rate_and_periods: RateAndPeriods,
        context: CalculationContext | None = None,
    ) -> Any:
        """Look up a formula and build an operator from it."""
        return cls.get(name).of(rate_and_periods, context)

    @classmethod
    def list_formulas(cls) -> list[str]:
        return sorted(cls._formulas)

    @classmethod
    def has_formula(cls, name: str) -> bool:
        return name in cls._formulas
