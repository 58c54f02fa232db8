"""
Finance Calc Kernel

Immutable value objects and numeric policy for rate/period based
monetary formulas:
- ISO 4217 currencies and Decimal-only Money
- Rate and RateAndPeriods parameter objects
- An explicit CalculationContext (precision + rounding) shared by all formulas
- Typed exceptions and structured JSON logging
"""

__version__ = "0.1.0"
