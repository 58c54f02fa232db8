"""
Command-line front end for the formula catalog.

Usage:
    fincalc future_value_of_annuity --amount 1000 --currency USD --rate 0.05 --periods 10
    fincalc present_value --amount 1000 --currency EUR --rate 0.03 --periods 5 --no-round
    fincalc --list
    fincalc annuity_payment ... --config path/to/policy.yaml --verbose
"""

from __future__ import annotations

import argparse
import decimal
import logging
import sys
from collections.abc import Sequence
from uuid import uuid4

import yaml

from fincalc_config import configure_from_file
from fincalc_formulas.registry import FormulaRegistry
from fincalc_kernel.domain.values import Money, RateAndPeriods
from fincalc_kernel.exceptions import FinanceCalcError
from fincalc_kernel.logging_config import LogContext, configure_logging, get_logger

logger = get_logger("cli")

EXIT_OK = 0
EXIT_INVALID = 2
EXIT_ARITHMETIC = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fincalc",
        description="Evaluate a rate/period financial formula on a monetary amount.",
    )
    parser.add_argument("formula", nargs="?", help="Formula name (see --list)")
    parser.add_argument("--amount", help="Monetary amount, e.g. 1000.00")
    parser.add_argument("--currency", help="ISO 4217 currency code")
    parser.add_argument("--rate", help="Per-period rate as a fraction, e.g. 0.05")
    parser.add_argument("--periods", type=int, help="Number of periods (>= 1)")
    parser.add_argument("--config", help="YAML file with a calculation_context section")
    parser.add_argument(
        "--no-round", action="store_true",
        help="Print the full-precision result instead of rounding to minor units",
    )
    parser.add_argument("--list", action="store_true", help="List available formulas")
    parser.add_argument("--verbose", action="store_true", help="Emit JSON trace logs to stderr")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        configure_logging(level=logging.INFO)

    if args.list:
        for name in FormulaRegistry.list_formulas():
            print(name)
        return EXIT_OK

    missing = [
        flag for flag, value in (
            ("formula", args.formula),
            ("--amount", args.amount),
            ("--currency", args.currency),
            ("--rate", args.rate),
            ("--periods", args.periods),
        )
        if value is None
    ]
    if missing:
        parser.error(f"missing required arguments: {', '.join(missing)}")

    with LogContext.bind(correlation_id=uuid4().hex):
        return _calculate(args)


def _calculate(args: argparse.Namespace) -> int:
    try:
        context = configure_from_file(args.config) if args.config else None
        operator = FormulaRegistry.create(
            args.formula, RateAndPeriods.of(args.rate, args.periods), context
        )
        result = operator.apply(Money.of(args.amount, args.currency))
    except (FinanceCalcError, OSError, yaml.YAMLError) as e:
        logger.error("cli_calculation_rejected", extra={"error_type": type(e).__name__})
        print(f"error: {e}", file=sys.stderr)
        return EXIT_INVALID
    except decimal.DecimalException as e:
        logger.error("cli_calculation_failed", extra={"error_type": type(e).__name__})
        print(f"arithmetic error: {type(e).__name__}", file=sys.stderr)
        return EXIT_ARITHMETIC

    logger.info("cli_calculation_completed", extra={"formula_name": args.formula})
    print(result if args.no_round else result.round())
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
