"""
Configuration Loader (``fincalc_config.loader``).

Responsibility
--------------
Loads a YAML file and parses its ``calculation_context`` section into a
``CalculationPolicyDef``. Runtime callers go through
``fincalc_config.get_active_context()`` instead of calling this directly.

Invariants enforced
-------------------
* Every parse error raises ``ConfigurationError`` naming the key; no
  silent coercion of wrongly typed values.
* Keys that are absent fall back to the decimal64 defaults.
* ``compute_checksum`` produces a deterministic SHA-256 hash for
  configuration identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Wrong types or unknown rounding names  -> ``ConfigurationError``.
"""

from __future__ import annotations

import decimal
import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from fincalc_config.schema import CalculationPolicyDef
from fincalc_kernel.domain.calculation_context import (
    DEFAULT_EMAX,
    DEFAULT_EMIN,
    DEFAULT_PRECISION,
    DEFAULT_ROUNDING,
    ROUNDING_MODES,
)
from fincalc_kernel.exceptions import ConfigurationError, InvalidArgumentError

SECTION = "calculation_context"


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ConfigurationError: if the document is not a mapping.
    """
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError("<root>", type(data).__name__, "must be a mapping", str(path))
    return data


def parse_rounding(value: Any, source: str | None = None) -> str:
    """
    Accept ``ROUND_HALF_EVEN``, ``half_even`` or ``HALF_EVEN``.

    Raises:
        ConfigurationError: if the name is not a decimal rounding mode.
    """
    if not isinstance(value, str):
        raise ConfigurationError("rounding", value, "must be a string", source)
    name = value.strip().upper()
    if not name.startswith("ROUND_"):
        name = f"ROUND_{name}"
    if name not in ROUNDING_MODES:
        raise ConfigurationError(
            "rounding", value, f"must be one of {sorted(ROUNDING_MODES)}", source
        )
    return getattr(decimal, name)


def _parse_int(data: dict[str, Any], key: str, default: int, source: str | None) -> int:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(key, value, "must be an integer", source)
    return value


def parse_calculation_policy(
    data: dict[str, Any],
    source: str | None = None,
) -> CalculationPolicyDef:
    """
    Parse a ``CalculationPolicyDef`` from a loaded YAML document.

    Postconditions:
        - Returns a policy whose ``to_context()`` succeeds.
    Raises:
        ConfigurationError: if the section or any value is invalid.
    """
    section = data.get(SECTION, {})
    if section is None:
        section = {}
    if not isinstance(section, dict):
        raise ConfigurationError(SECTION, section, "must be a mapping", source)

    policy = CalculationPolicyDef(
        precision=_parse_int(section, "precision", DEFAULT_PRECISION, source),
        rounding=parse_rounding(section.get("rounding", DEFAULT_ROUNDING), source),
        emin=_parse_int(section, "emin", DEFAULT_EMIN, source),
        emax=_parse_int(section, "emax", DEFAULT_EMAX, source),
        source=source,
        checksum=compute_checksum(section),
    )

    # Surface range errors (precision < 1, emin > 0, ...) as configuration errors
    try:
        policy.to_context()
    except InvalidArgumentError as e:
        raise ConfigurationError(e.argument, e.value, e.reason, source) from e

    return policy


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
