# PATH: core/logging.py
"""
Structured JSON logging for RUNGUARD.

All contextual fields are passed only via extra={"context": {...}}.
Context is merged from three layers, later layers winning: the process-wide
global context, the logger's default context (get_logger(name, **context)),
and the per-call context.

Output format (one object per line):
{
    "timestamp": "2026-01-04T12:00:00.000+00:00",
    "level": "INFO",
    "logger": "runguard.controller",
    "message": "Run started",
    "run_id": "run_1",
    "context": {"component": "controller", "max_steps": 10}
}

`run_id` is lifted out of the context so one run's lines can be filtered
without parsing the nested object.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_global_context: dict[str, Any] = {}


def _record_time(record: logging.LogRecord) -> datetime:
    return datetime.fromtimestamp(record.created, tz=timezone.utc)


def _merged_context(record: logging.LogRecord) -> dict[str, Any]:
    context = dict(_global_context)
    context.update(getattr(record, "context", None) or {})
    return context


class JSONFormatter(logging.Formatter):
    """One JSON object per record; global and call context merged."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": _record_time(record).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = _merged_context(record)
        if "run_id" in context:
            log_entry["run_id"] = context.pop("run_id")
        if record.exc_info:
            context["exception"] = self.formatException(record.exc_info)
        if context:
            log_entry["context"] = context

        return json.dumps(log_entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Single-line human-readable output; shows at most MAX_FIELDS call-context fields."""

    MAX_FIELDS = 4

    def format(self, record: logging.LogRecord) -> str:
        timestamp = _record_time(record).astimezone().strftime("%Y-%m-%d %H:%M:%S")
        line = f"{timestamp} | {record.levelname:<8} | {record.name} | {record.getMessage()}"

        context = getattr(record, "context", None) or {}
        if context:
            shown = ", ".join(f"{k}={v}" for k, v in list(context.items())[:self.MAX_FIELDS])
            hidden = len(context) - self.MAX_FIELDS
            if hidden > 0:
                shown += f", ... (+{hidden} more)"
            line += f" | {shown}"

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class ContextAdapter(logging.LoggerAdapter):
    """Adds the logger's default context under each call's own context."""

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        extra = kwargs.get("extra") or {}
        kwargs["extra"] = {"context": {**self.extra, **extra.get("context", {})}}
        return msg, kwargs


def set_global_context(**kwargs: Any) -> None:
    """
    Set fields added to every log entry of the process.

    Example:
        set_global_context(service="runguard", version="0.1.0")
    """
    _global_context.update(kwargs)


def clear_global_context() -> None:
    _global_context.clear()


def get_logger(name: str, **context: Any) -> ContextAdapter:
    """
    Get a logger whose entries always carry `context`.

    Example:
        logger = get_logger("runguard.controller", component="controller")
        logger.info("Step recorded", extra={"context": {"step_number": 3}})
    """
    return ContextAdapter(logging.getLogger(name), context)


def setup_logging(
    level: str = "INFO",
    json_output: bool = True,
    log_file: Optional[str] = None,
) -> None:
    """
    Configure the root logger.

    Args:
        level: One of LEVELS (case-insensitive)
        json_output: JSON lines on stdout; False for ConsoleFormatter
        log_file: Also append JSON lines to this file (parent dirs created)

    Raises:
        ValueError: unknown level name
    """
    level_name = level.upper()
    if level_name not in LEVELS:
        raise ValueError(f"Unknown log level {level!r}, expected one of {', '.join(LEVELS)}")

    root_logger = logging.getLogger()
    root_logger.setLevel(level_name)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(JSONFormatter() if json_output else ConsoleFormatter())
    root_logger.addHandler(console_handler)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(file_handler)
