# ============================================================================
# STRUCTURED LOGGING
# ============================================================================
# STATUS: Core - Diagnostics with synthesis context
# PURPOSE: Diagnostics on stderr so stdout carries only the generated DDL
# CREATED: 18 OCT 2026
# EXPORTS: log_context, get_logger, configure_logging, ContextLogger,
#          StructuredFormatter, HumanFormatter, LogContext
# ============================================================================
"""
Structured Logging

Every record emitted while a table is being synthesized carries the table,
the current step and, for per-operation steps, the row operation. The
ContextFilter copies those fields onto the record; the formatters only
read the record.

    2026-10-18 09:14:02 DEBUG    core.schema.synthesizer [table=public.user, step=drop_trigger, op=INSERT]: ...

With LOG_FORMAT=json (or --log-format json) each record is one JSON object.

Usage:
    from core.logging import get_logger, log_context

    logger = get_logger("pgauditor")

    with log_context(table="public.user"):
        logger.info("Synthesizing")
"""

import json
import logging
import os
import sys
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

CONTEXT_FIELDS = ("table", "step", "operation")


@dataclass(frozen=True)
class LogContext:
    """Synthesis fields attached to log records."""
    table: Optional[str] = None
    step: Optional[str] = None
    operation: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def merged(self, **fields) -> "LogContext":
        extra = {**self.extra, **fields.pop("extra", {})}
        known = {k: v for k, v in fields.items() if k in CONTEXT_FIELDS}
        extra.update({k: v for k, v in fields.items() if k not in CONTEXT_FIELDS})
        return replace(self, extra=extra, **known)

    def to_dict(self) -> Dict[str, Any]:
        """Set fields only, extras last."""
        result = {name: getattr(self, name) for name in CONTEXT_FIELDS if getattr(self, name) is not None}
        result.update(self.extra)
        return result


_local = threading.local()


def get_current_context() -> LogContext:
    return getattr(_local, "context", None) or LogContext()


@contextmanager
def log_context(**fields):
    """
    Add fields to every record logged inside the block.

    Nested blocks inherit the enclosing fields and may override them.

    Example:
        with log_context(table="public.user", step="drop_trigger"):
            logger.debug("Checking trigger")
    """
    previous = getattr(_local, "context", None)
    _local.context = get_current_context().merged(**fields)
    try:
        yield _local.context
    finally:
        _local.context = previous


class ContextFilter(logging.Filter):
    """Copy the current LogContext onto each record as ``record.context``."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "context"):
            record.context = get_current_context().to_dict()
        return True


def _timestamp() -> datetime:
    return datetime.now(timezone.utc)


class StructuredFormatter(logging.Formatter):
    """One JSON object per record, for log aggregation."""

    def __init__(self, include_timestamp: bool = True):
        super().__init__()
        self.include_timestamp = include_timestamp

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {}
        if self.include_timestamp:
            payload["timestamp"] = _timestamp().isoformat()
        payload.update(
            level=record.levelname,
            logger=record.name,
            message=record.getMessage(),
        )

        context = getattr(record, "context", None)
        if context:
            payload["context"] = context
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


class HumanFormatter(logging.Formatter):
    """Single line per record with context in brackets."""

    LABELS = {"operation": "op"}

    def format(self, record: logging.LogRecord) -> str:
        context = getattr(record, "context", None) or {}
        tags = ", ".join(f"{self.LABELS.get(k, k)}={v}" for k, v in context.items())
        tags = f" [{tags}]" if tags else ""

        line = (
            f"{_timestamp():%Y-%m-%d %H:%M:%S} {record.levelname:<8} "
            f"{record.name}{tags}: {record.getMessage()}"
        )
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class ContextLogger(logging.LoggerAdapter):
    """Adapter that snapshots the context when the call is made."""

    def process(self, msg, kwargs):
        kwargs["extra"] = {**(kwargs.get("extra") or {}), "context": get_current_context().to_dict()}
        return msg, kwargs


def get_logger(name: str) -> ContextLogger:
    return ContextLogger(logging.getLogger(name), {})


def configure_logging(
    level: Union[str, int] = "WARNING",
    json_output: bool = False,
    stream=None,
) -> None:
    """
    Send all diagnostics to one stderr handler.

    Args:
        level: Root log level, name or number
        json_output: JSON records instead of human lines (also LOG_FORMAT=json)
        stream: Target stream, stderr by default
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    use_json = json_output or os.getenv("LOG_FORMAT", "").lower() == "json"

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(StructuredFormatter() if use_json else HumanFormatter())
    handler.addFilter(ContextFilter())

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)


__all__ = [
    "LogContext",
    "ContextFilter",
    "StructuredFormatter",
    "HumanFormatter",
    "ContextLogger",
    "get_logger",
    "configure_logging",
    "log_context",
    "get_current_context",
]
