"""
Calculation policy schema.

The human-authored source artifact for the numeric policy. YAML files are
parsed into ``CalculationPolicyDef`` by the loader; ``to_context()``
turns it into the runtime ``CalculationContext``.
"""

from __future__ import annotations

from dataclasses import dataclass

from fincalc_kernel.domain.calculation_context import (
    DEFAULT_EMAX,
    DEFAULT_EMIN,
    DEFAULT_PRECISION,
    DEFAULT_ROUNDING,
    CalculationContext,
)


@dataclass(frozen=True)
class CalculationPolicyDef:
    """Numeric policy as declared in a configuration file."""

    precision: int = DEFAULT_PRECISION
    rounding: str = DEFAULT_ROUNDING
    emin: int = DEFAULT_EMIN
    emax: int = DEFAULT_EMAX
    source: str | None = None
    checksum: str = ""

    def to_context(self) -> CalculationContext:
        return CalculationContext(
            precision=self.precision,
            rounding=self.rounding,
            emin=self.emin,
            emax=self.emax,
        )
