"""
Structured JSON logging for the LP kernel.

Every record under the ``lp_kernel`` logger tree is rendered as one JSON
object per line:

    {"ts": ..., "level": ..., "logger": ..., "message": ...,
     <LogContext fields>, <extra= fields>, <exc_* fields>}

Request-scoped fields (subject_id, correlation_id, ...) live in a single
``contextvars`` mapping so they follow the current thread or asyncio task.
Messages are event names (``balance_history_computed``) and the data rides
in ``extra=``, never in the message text.
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
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any, Iterator, Mapping
from uuid import UUID

ROOT_LOGGER_NAME = "lp_kernel"


# ---------------------------------------------------------------------------
# Context propagation
# ---------------------------------------------------------------------------

_context: ContextVar[Mapping[str, str]] = ContextVar("lp_kernel_log_context", default={})


class LogContext:
    """Request-scoped log fields attached to every record."""

    FIELDS = ("correlation_id", "subject_id", "actor_id", "trace_id")

    @classmethod
    def set(cls, **fields: str | None) -> None:
        """Update the given fields; None values are ignored."""
        _context.set({**_context.get(), **cls._accepted(fields)})

    @classmethod
    def get_all(cls) -> dict[str, str]:
        return dict(_context.get())

    @classmethod
    def clear(cls) -> None:
        _context.set({})

    @classmethod
    @contextmanager
    def bind(cls, **fields: str | None) -> Iterator[type["LogContext"]]:
        """Set fields for the duration of a ``with`` block, then restore."""
        token = _context.set({**_context.get(), **cls._accepted(fields)})
        try:
            yield cls
        finally:
            _context.reset(token)

    @classmethod
    def _accepted(cls, fields: Mapping[str, str | None]) -> dict[str, str]:
        unknown = set(fields) - set(cls.FIELDS)
        if unknown:
            raise TypeError(f"Unknown LogContext field(s): {sorted(unknown)}")
        return {k: str(v) for k, v in fields.items() if v is not None}


# ---------------------------------------------------------------------------
# JSON rendering
# ---------------------------------------------------------------------------

# Attributes every LogRecord carries; anything else came in through extra=
_RESERVED = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}


def _jsonable(value: Any) -> Any:
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def _exception_fields(exc: BaseException) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "exc_type": type(exc).__name__,
        "exc_message": str(exc),
    }
    code = getattr(exc, "code", None)
    if code is not None:
        fields["exc_code"] = code
    # LpKernelError subclasses keep their context as public attributes
    for name, value in vars(exc).items():
        if not name.startswith("_"):
            fields[f"exc_{name}"] = value
    return fields


class StructuredFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **LogContext.get_all(),
        }
        for key, value in vars(record).items():
            if key not in _RESERVED:
                payload.setdefault(key, value)

        if record.exc_info and record.exc_info[1] is not None:
            payload.update(_exception_fields(record.exc_info[1]))
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=_jsonable)


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------


def get_logger(name: str) -> logging.Logger:
    """Logger named ``lp_kernel.<name>``."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


_setup_lock = threading.Lock()
_installed_handler: logging.Handler | None = None


def configure_logging(
    *,
    level: int = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """
    Attach a JSON handler to the ``lp_kernel`` logger.

    Only the first call has an effect; later calls return immediately until
    reset_logging() is called.  Records do not propagate to the root logger.
    """
    global _installed_handler
    with _setup_lock:
        if _installed_handler is not None:
            return
        _installed_handler = handler or logging.StreamHandler(stream or sys.stderr)

    _installed_handler.setFormatter(StructuredFormatter())
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)
    root.propagate = False
    root.addHandler(_installed_handler)


def reset_logging() -> None:
    """Undo configure_logging(). Tests only."""
    global _installed_handler
    with _setup_lock:
        _installed_handler = None
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.handlers.clear()
    root.setLevel(logging.WARNING)
