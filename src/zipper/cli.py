"""CLI argument parsing and process entry."""

from __future__ import annotations

import logging
import sys
import time
from pathlib import Path
from typing import NoReturn

from . import __version__
from .archive_service import create_archive
from .constants import OPEN_LOG_FAILED
from .errors import ArchiveIOError, ErrorKind, UsageError, ZipperError, exit_code
from .logging_utils import log_event, setup_logging
from .models import CliArgs
from .presenters import render_error, render_help, render_version
from .request import parse_request


def parse_cli_args(argv: list[str]) -> CliArgs | None:
    """Split leading options from positional paths.

    Options are only recognized before the first path; from the zip file
    path on, every argument is a path, whatever it starts with. Returns
    None if help or version was shown.
    """
    log_raw: str | None = None

    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg == "--":
            i += 1
            break
        if arg in ("--help", "-h"):
            print(render_help(), end="")
            return None
        if arg == "--version":
            print(render_version(__version__))
            return None
        if arg == "--log":
            if i + 1 >= len(argv):
                raise UsageError()
            log_raw = argv[i + 1]
            i += 2
            continue
        break

    return CliArgs(
        paths=list(argv[i:]),
        log_path=Path(log_raw) if log_raw is not None else None,
    )


def main(argv: list[str] | None = None) -> int:
    args = argv if argv is not None else sys.argv[1:]
    setup_logging(None)
    try:
        return _run(args)
    finally:
        setup_logging(None)


def entry_point() -> NoReturn:
    sys.exit(main())


def _run(args: list[str]) -> int:
    app_started = time.perf_counter()
    try:
        cli_args = parse_cli_args(args)
        if cli_args is None:
            # No archive was requested.
            return exit_code(ErrorKind.USAGE)
        if cli_args.log_path is not None:
            _start_logging(cli_args.log_path)
        request = parse_request(cli_args.paths)
        log_event(
            "app_start",
            output=request.output,
            input_count=len(request.inputs),
            log_file=cli_args.log_path,
        )
        create_archive(request)
    except ZipperError as exc:
        print(render_error(exc))
        code = exit_code(exc.kind)
        log_event(
            "app_stop",
            level=logging.ERROR,
            reason="error",
            exit_code=code,
            error_kind=exc.kind.name,
            error=exc.render(),
            uptime_ms=_uptime_ms(app_started),
        )
        return code
    except Exception as exc:
        log_event("unexpected_failure", level=logging.ERROR, exc_info=True, error=repr(exc))
        raise

    log_event("app_stop", reason="normal", exit_code=0, uptime_ms=_uptime_ms(app_started))
    return 0


def _start_logging(log_path: Path) -> None:
    try:
        setup_logging(log_path)
    except OSError as exc:
        raise ArchiveIOError(OPEN_LOG_FAILED, exc) from exc


def _uptime_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 1)
