"""
fincalc_config -- single public entrypoint for the numeric policy.

Responsibility:
    Provides the ONLY way to obtain the configured CalculationContext at
    runtime through ``get_active_context()``, and the start-up hook
    ``configure_from_file()`` that installs it as the process default.
    YAML loading is internal tooling.

Architecture position:
    Configuration -- sits above ``fincalc_kernel``. The kernel and the
    formula layer MUST NEVER import from ``fincalc_config``.

Invariants enforced:
    - Single entrypoint: all runtime config flows through
      ``get_active_context()``.
    - ``configure_from_file()`` must run before the first calculation;
      afterwards the default is sealed (ContextSealedError).

Failure modes:
    - ``FileNotFoundError`` -- the configuration file does not exist.
    - ``yaml.YAMLError`` -- the file is not valid YAML.
    - ``ConfigurationError`` -- the numeric policy is invalid.
    - ``ContextSealedError`` -- configure_from_file() after first use.

Audit relevance:
    Every successful load emits a ``FINANCE_CONFIG_TRACE`` log entry with
    the source path, checksum and policy values.
"""

from __future__ import annotations

import logging
from pathlib import Path

from fincalc_config.loader import load_yaml_file, parse_calculation_policy
from fincalc_config.schema import CalculationPolicyDef
from fincalc_kernel.domain.calculation_context import (
    CalculationContext,
    configure_default_context,
)

_logger = logging.getLogger("fincalc.config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"


def load_policy(config_path: Path | str | None = None) -> CalculationPolicyDef:
    """Load and validate the policy file (packaged default when None)."""
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    return parse_calculation_policy(load_yaml_file(path), source=str(path))


def get_active_context(config_path: Path | str | None = None) -> CalculationContext:
    """The ONLY public configuration entrypoint.

    Guarantees:
        - The returned context has passed type and range validation.
        - A ``FINANCE_CONFIG_TRACE`` log entry is emitted on every
          successful call.

    Non-goals:
        - Does NOT cache; callers hold the returned context.
        - Does NOT install the context as the process default
          (see ``configure_from_file``).

    Args:
        config_path: YAML file with a ``calculation_context`` section.
            Defaults to fincalc_config/sets/default.yaml.
    """
    policy = load_policy(config_path)
    context = policy.to_context()

    _logger.info(
        "FINANCE_CONFIG_TRACE",
        extra={
            "trace_type": "FINANCE_CONFIG_TRACE",
            "config_source": policy.source,
            "checksum": policy.checksum,
            "precision": policy.precision,
            "rounding": policy.rounding,
            "emin": policy.emin,
            "emax": policy.emax,
        },
    )
    return context


def configure_from_file(config_path: Path | str | None = None) -> CalculationContext:
    """Load the policy and install it as the process default.

    Call once at start-up, before any formula runs.

    Raises:
        ContextSealedError: If a calculation has already used the default.
    """
    context = get_active_context(config_path)
    configure_default_context(context)
    return context


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "CalculationPolicyDef",
    "configure_from_file",
    "get_active_context",
    "load_policy",
]
