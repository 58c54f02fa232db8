"""
fincalc_formulas.tracer -- Formula invocation tracer emitting FINANCE_FORMULA_TRACE.

Responsibility:
    Provide a lightweight decorator (``@traced_formula``) that wraps pure
    formula invocations with structured trace logging. The trace captures
    formula_name, formula_version, input_fingerprint (deterministic
    SHA-256 hash of selected inputs), outcome, duration_ms and a fresh
    trace_id. The trace_id is bound in LogContext while the formula runs,
    so any record logged inside the call carries it too.

Architecture position:
    Formulas -- infrastructure support for the pure calculation layer.
    Does NOT introduce I/O into formulas; emits a log record only.

Invariants enforced:
    - Fingerprints are deterministic: _canonicalize produces stable string
      representations; dict keys are sorted; the hash is SHA-256
      truncated to 16 hex chars.
    - The decorator never mutates inputs and never alters the result or
      the exception of the wrapped call.

Failure modes:
    - Exceptions from the wrapped formula are logged with outcome
      "failed" and re-raised unchanged.

Usage:
    from fincalc_formulas.tracer import traced_formula

    @traced_formula("future_value", "1.0", fingerprint_fields=("amount", "rate_and_periods"))
    def calculate(amount, rate_and_periods, context=None):
        ...
"""

from __future__ import annotations

import functools
import hashlib
import inspect
import logging
import time
from collections.abc import Callable
from decimal import Decimal
from typing import Any
from uuid import uuid4

from fincalc_kernel.logging_config import LogContext

# Own logger namespace; configured by fincalc_kernel.logging_config at the root.
_logger = logging.getLogger("fincalc.formulas.tracer")

TRACE_TYPE = "FINANCE_FORMULA_TRACE"


def _canonicalize(value: Any) -> str:
    """Produce a stable string representation of a value for fingerprinting."""
    if value is None:
        return "null"
    if isinstance(value, Decimal):
        # 1.0 and 1.00 are the same input
        return str(value.normalize()) if value.is_finite() else str(value)
    if isinstance(value, (int, float, str)):
        return str(value)
    if isinstance(value, dict):
        items = sorted(value.items())
        return "{" + ",".join(f"{k}:{_canonicalize(v)}" for k, v in items) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_canonicalize(v) for v in value) + "]"
    return str(value)


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    arguments: dict[str, Any],
) -> str:
    """Compute a deterministic SHA-256 fingerprint of selected input fields.

    Only the fields listed in fingerprint_fields are included. Missing
    fields are recorded as "null". The result is a 16-char hex prefix.
    """
    parts: list[str] = []
    for name in fingerprint_fields:
        parts.append(f"{name}={_canonicalize(arguments.get(name))}")
    canonical = "|".join(parts)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]


def traced_formula(
    formula_name: str,
    formula_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable:
    """Decorator that emits FINANCE_FORMULA_TRACE for pure formula invocations.

    Positional and keyword arguments are both fingerprinted; they are
    bound to parameter names through the wrapped function's signature.

    Args:
        formula_name: Formula identifier (e.g., "future_value_of_annuity").
        formula_version: Formula version (e.g., "1.0").
        fingerprint_fields: Parameter names to include in the input
            fingerprint hash.
    """

    def decorator(func: Callable) -> Callable:
        signature = inspect.signature(func)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                arguments = signature.bind(*args, **kwargs).arguments
            except TypeError:
                # Let the call itself report the bad signature.
                return func(*args, **kwargs)

            fp = ""
            if fingerprint_fields:
                fp = compute_input_fingerprint(fingerprint_fields, arguments)

            trace_id = uuid4().hex
            trace: dict[str, Any] = {
                "trace_type": TRACE_TYPE,
                "trace_id": trace_id,
                "formula_name": formula_name,
                "formula_version": formula_version,
                "input_fingerprint": fp,
                "function": func.__qualname__,
            }

            with LogContext.bind(trace_id=trace_id):
                t0 = time.monotonic()
                try:
                    result = func(*args, **kwargs)
                except Exception as exc:
                    trace["outcome"] = "failed"
                    trace["error_type"] = type(exc).__name__
                    trace["error_code"] = getattr(exc, "code", None)
                    trace["duration_ms"] = round((time.monotonic() - t0) * 1000, 2)
                    _logger.warning(TRACE_TYPE, extra=trace)
                    raise

                trace["outcome"] = "ok"
                trace["duration_ms"] = round((time.monotonic() - t0) * 1000, 2)
                _logger.info(TRACE_TYPE, extra=trace)
                return result

        return wrapper

    return decorator
