"""
Structured logging for fincalc.

Responsibility:
    Renders every record of the ``fincalc`` logger hierarchy as one JSON
    object per line and merges the identifiers bound in LogContext into
    it. Two identifiers exist:

    - ``correlation_id``: one front-end request (a CLI invocation).
    - ``trace_id``: one formula evaluation; bound by ``traced_formula``.

    Records emitted while an identifier is bound carry it, so every line a
    calculation produces can be grouped after the fact.

Invariants enforced:
    - Decimal values are written as strings, never as floats.
    - Only the identifiers listed in LogContext.FIELDS can be bound.
    - Bindings are per thread and per asyncio task (ContextVar).
"""

__all__ = [
    "StructuredFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

import json
import logging
import sys
import threading
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any, Final

LOGGER_ROOT: Final[str] = "fincalc"

_BINDINGS: Final[dict[str, ContextVar[str | None]]] = {
    "correlation_id": ContextVar("fincalc_correlation_id", default=None),
    "trace_id": ContextVar("fincalc_trace_id", default=None),
}


class LogContext:
    """Identifiers merged into every structured record while bound."""

    FIELDS: Final[tuple[str, ...]] = tuple(_BINDINGS)

    @staticmethod
    def _var(name: str) -> ContextVar[str | None]:
        try:
            return _BINDINGS[name]
        except KeyError:
            raise TypeError(
                f"Unknown LogContext field {name!r}; expected one of {list(_BINDINGS)}"
            ) from None

    @classmethod
    def set(cls, **fields: str | None) -> None:
        """Set identifiers for the rest of the current context. None values are skipped."""
        resolved = [(cls._var(name), value) for name, value in fields.items()]
        for var, value in resolved:
            if value is not None:
                var.set(value)

    @classmethod
    def get(cls, name: str) -> str | None:
        return cls._var(name).get()

    @classmethod
    def get_all(cls) -> dict[str, str]:
        return {
            name: value
            for name, var in _BINDINGS.items()
            if (value := var.get()) is not None
        }

    @classmethod
    def clear(cls) -> None:
        for var in _BINDINGS.values():
            var.set(None)

    @classmethod
    def bind(cls, **fields: str | None) -> AbstractContextManager[None]:
        """
        Bind identifiers for the duration of a ``with`` block.

        Previous values are restored on exit, including on error.

        Raises:
            TypeError: If a field is not one of FIELDS.
        """
        return _bound([(cls._var(name), value) for name, value in fields.items()])


@contextmanager
def _bound(bindings: list[tuple[ContextVar[str | None], str | None]]) -> Iterator[None]:
    tokens = [(var, var.set(value)) for var, value in bindings if value is not None]
    try:
        yield
    finally:
        for var, token in reversed(tokens):
            var.reset(token)


# ---------------------------------------------------------------------------
# JSON rendering
# ---------------------------------------------------------------------------

# Attributes every LogRecord has; anything else arrived through ``extra``.
_RECORD_ATTRIBUTES: Final[frozenset[str]] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "taskName"}


def _json_default(obj: Any) -> Any:
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, datetime):
        return obj.isoformat()
    return str(obj)


def _exception_fields(exc: BaseException) -> dict[str, Any]:
    """exc_type, exc_message and, for fincalc errors, code and public attributes."""
    fields: dict[str, Any] = {
        "exc_type": type(exc).__name__,
        "exc_message": str(exc),
    }
    code = getattr(exc, "code", None)
    if code is not None:
        fields["exc_code"] = code
    for key, value in vars(exc).items():
        if not key.startswith("_") and key != "code":
            fields[f"exc_{key}"] = value
    return fields


class StructuredFormatter(logging.Formatter):
    """One JSON object per record: ts, level, logger, message, bindings, extras."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **LogContext.get_all(),
        }
        for key, value in vars(record).items():
            if key not in _RECORD_ATTRIBUTES:
                payload.setdefault(key, value)

        if record.exc_info and record.exc_info[1] is not None:
            payload.update(_exception_fields(record.exc_info[1]))
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=_json_default)


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------


def get_logger(name: str) -> logging.Logger:
    """The logger ``fincalc.<name>``."""
    return logging.getLogger(f"{LOGGER_ROOT}.{name}")


_configured = False
_lock = threading.Lock()


def configure_logging(
    *,
    level: int = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """
    Attach a StructuredFormatter handler to the ``fincalc`` logger.

    Only the first call has an effect; the CLI and embedding applications
    may both call it.
    """
    global _configured
    with _lock:
        if _configured:
            return
        _configured = True

    root = logging.getLogger(LOGGER_ROOT)
    root.setLevel(level)
    root.propagate = False

    target = handler if handler is not None else logging.StreamHandler(stream or sys.stderr)
    target.setFormatter(StructuredFormatter())
    root.addHandler(target)


def reset_logging() -> None:
    """Undo configure_logging. FOR TESTING ONLY."""
    global _configured
    with _lock:
        _configured = False
    root = logging.getLogger(LOGGER_ROOT)
    root.handlers.clear()
    root.setLevel(logging.WARNING)
    root.propagate = True
