from __future__ import annotations

import json
import logging
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

import zipper.logging_utils as logging_utils
from zipper.logging_utils import StructuredTextFormatter, log_event


class _ListHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__()
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


@pytest.fixture
def captured_records() -> Iterator[list[logging.LogRecord]]:
    handler = _ListHandler()
    logging_utils.logger.addHandler(handler)
    previous_level = logging_utils.logger.level
    logging_utils.logger.setLevel(logging.DEBUG)
    yield handler.records
    logging_utils.logger.removeHandler(handler)
    logging_utils.logger.setLevel(previous_level)


def _record(msg: str, name: str = "zipper") -> logging.LogRecord:
    return logging.LogRecord(
        name=name,
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )


def test_log_event_emits_json_payload(captured_records: list[logging.LogRecord]) -> None:
    log_event("entry_written", level=logging.DEBUG, entry="a.txt", source=Path("/src/a.txt"))

    assert len(captured_records) == 1
    record = captured_records[0]
    assert record.levelno == logging.DEBUG
    payload = json.loads(record.getMessage())
    assert payload["event"] == "entry_written"
    assert payload["entry"] == "a.txt"
    assert payload["source"] == "/src/a.txt"
    assert "ts" in payload


def test_formatter_orders_known_event_keys() -> None:
    formatter = StructuredTextFormatter()
    message = json.dumps(
        {"event": "app_stop", "uptime_ms": 1.5, "exit_code": 2, "reason": "error", "extra": "x"}
    )

    lines = formatter.format(_record(message)).splitlines()

    assert lines[0] == "=== app_stop ==="
    keys = [line.split(":", 1)[0] for line in lines[1:]]
    assert keys[0] == "level"
    assert keys.index("reason") < keys.index("exit_code") < keys.index("uptime_ms")
    assert keys[-1] == "extra"
    assert "level: INFO" in lines


def test_formatter_skips_empty_fields() -> None:
    formatter = StructuredTextFormatter()
    message = json.dumps({"event": "app_start", "output": "out.zip", "log_file": None})

    result = formatter.format(_record(message))

    assert "output: out.zip" in result
    assert "log_file" not in result


def test_formatter_wraps_plain_messages() -> None:
    formatter = StructuredTextFormatter()

    result = formatter.format(_record("not an event"))

    assert result.startswith("=== message ===\n")
    assert "message: not an event" in result


def test_formatter_ends_each_block_with_newline() -> None:
    formatter = StructuredTextFormatter()

    result = formatter.format(_record(json.dumps({"event": "entry_written", "entry": "a.txt"})))

    assert result.endswith("entry: a.txt\n")


def test_formatter_escapes_newlines_in_values() -> None:
    formatter = StructuredTextFormatter()
    message = json.dumps({"event": "archive_abandoned", "error": "line one\nline two"})

    result = formatter.format(_record(message))

    assert "error: line one\\nline two" in result


def test_formatter_appends_traceback() -> None:
    formatter = StructuredTextFormatter()
    try:
        raise ValueError("boom")
    except ValueError:
        record = _record(json.dumps({"event": "unexpected_failure"}))
        record.exc_info = sys.exc_info()

    result = formatter.format(record)

    assert "traceback:" in result
    assert "ValueError: boom" in result


def test_setup_logging_without_file_discards_events(
    capsys: pytest.CaptureFixture[str],
) -> None:
    logging_utils.setup_logging(None)

    log_event("archive_abandoned", level=logging.WARNING, error="boom")

    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == ""
    assert logging_utils.logger.propagate is False


def test_setup_logging_writes_to_file(tmp_path: Path) -> None:
    log_path = tmp_path / "nested" / "run.log"
    logging_utils.setup_logging(log_path)
    try:
        log_event("app_start", output=tmp_path / "out.zip", input_count=2)
        log_event("app_stop", reason="normal", exit_code=0)
    finally:
        logging_utils.setup_logging(None)

    log_text = log_path.read_text(encoding="utf-8")
    assert log_text.startswith("=== app_start ===")
    assert "input_count: 2" in log_text
    assert "\n\n=== app_stop ===\n" in log_text


def test_log_event_attaches_active_exception(
    captured_records: list[logging.LogRecord],
) -> None:
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        log_event("unexpected_failure", level=logging.ERROR, exc_info=True)

    assert captured_records[0].exc_info is not None
    assert captured_records[0].exc_info[0] is RuntimeError
