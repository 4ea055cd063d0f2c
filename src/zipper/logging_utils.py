"""Structured run logging for zipper."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from .constants import APP_NAME

EVENT_KEY_ORDER: dict[str, list[str]] = {
    "app_start": ["ts", "level", "output", "input_count", "log_file"],
    "app_stop": [
        "ts",
        "level",
        "reason",
        "exit_code",
        "uptime_ms",
        "error_kind",
        "error",
    ],
    "entry_written": ["ts", "level", "entry", "source", "bytes"],
    "archive_finalized": ["ts", "level", "output", "entry_count", "bytes", "elapsed_ms"],
    "archive_abandoned": [
        "ts",
        "level",
        "output",
        "entries_written",
        "error_kind",
        "error",
    ],
    "output_close_failed": ["ts", "level", "error", "pending_error"],
    "unexpected_failure": ["ts", "level", "error"],
}

logger = logging.getLogger(APP_NAME)
logger.addHandler(logging.NullHandler())


def _to_log_safe(value: Any) -> Any:
    """Convert values to JSON-serializable, log-safe representations."""
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, (list, tuple)):
        return [_to_log_safe(v) for v in value]
    return str(value)


def _one_line(value: Any) -> str:
    return str(value).replace("\n", "\\n")


def _ordered_keys(event: str, fields: dict[str, Any]) -> list[str]:
    preferred = [k for k in EVENT_KEY_ORDER.get(event, ["ts", "level"]) if k in fields]
    rest = sorted(k for k in fields if k not in preferred)
    return [k for k in preferred + rest if fields[k] is not None]


class StructuredTextFormatter(logging.Formatter):
    """Render ``log_event`` payloads as ``=== event ===`` blocks.

    Each block ends with a newline, so together with the handler's
    terminator the blocks of a run log are one blank line apart.
    """

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        try:
            fields = json.loads(message)
        except ValueError:
            fields = None
        if not isinstance(fields, dict):
            fields = {"event": "message", "message": message}

        event = str(fields.pop("event", "message"))
        fields.setdefault("level", record.levelname)
        lines = [f"=== {event} ==="]
        lines.extend(f"{key}: {_one_line(fields[key])}" for key in _ordered_keys(event, fields))
        if record.exc_info:
            lines.append("traceback:")
            lines.append(self.formatException(record.exc_info))
        return "\n".join(lines) + "\n"


def log_event(
    event: str, level: int = logging.INFO, *, exc_info: bool = False, **fields: Any
) -> None:
    """Emit a structured log event."""
    payload: dict[str, Any] = {
        "ts": datetime.now().astimezone().isoformat(),
        "event": event,
    }
    for key, value in fields.items():
        payload[key] = _to_log_safe(value)
    logger.log(
        level,
        json.dumps(payload, ensure_ascii=False, separators=(",", ":")),
        exc_info=exc_info,
    )


def setup_logging(log_file: Path | None = None, level: int = logging.DEBUG) -> None:
    """Route zipper's log events to ``log_file``, or discard them."""
    handler: logging.Handler
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(
            str(log_file), encoding="utf-8", errors="backslashreplace"
        )
        handler.setFormatter(StructuredTextFormatter())
    else:
        handler = logging.NullHandler()

    for existing in list(logger.handlers):
        logger.removeHandler(existing)
        existing.close()
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
