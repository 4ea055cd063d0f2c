"""Archive workflow orchestration."""

from __future__ import annotations

import logging
import time
import zipfile
from typing import BinaryIO

from .errors import ArchiveCodecError, ZipperError
from .fs_gateway import (
    copy_stream,
    derive_entry_name,
    open_output_file,
    open_source_file,
    source_file_size,
)
from .logging_utils import log_event
from .models import ArchiveRequest, ArchiveResult
from .zip_gateway import ZipArchiveWriter


def create_archive(request: ArchiveRequest) -> ArchiveResult:
    """Write every input of the request into a new zip archive at its output.

    Inputs are processed strictly in order, one open source file at a time.
    The first failure stops the run: later inputs are never opened and the
    archive is left on disk without a central directory, so no reader will
    accept it.

    Raises:
        ArchiveIOError: The output cannot be created, or a source cannot be
            named, opened or read.
        ArchiveCodecError: The container rejects an entry or cannot be
            finalized.
    """
    started = time.perf_counter()
    output_file = open_output_file(request.output)
    try:
        writer = ZipArchiveWriter(output_file)
    except ArchiveCodecError:
        output_file.close()
        raise

    entry_names: list[str] = []
    bytes_copied = 0
    with writer:
        try:
            for source_path in request.inputs:
                entry_name = derive_entry_name(source_path)
                with open_source_file(source_path) as source_file:
                    copied = _write_entry(writer, entry_name, source_file)
                entry_names.append(entry_name)
                bytes_copied += copied
                log_event(
                    "entry_written",
                    level=logging.DEBUG,
                    entry=entry_name,
                    source=source_path,
                    bytes=copied,
                )
            writer.finish()
        except ZipperError as exc:
            log_event(
                "archive_abandoned",
                level=logging.WARNING,
                output=request.output,
                entries_written=len(entry_names),
                error_kind=exc.kind.name,
                error=exc.render(),
            )
            raise

    log_event(
        "archive_finalized",
        output=request.output,
        entry_count=len(entry_names),
        bytes=bytes_copied,
        elapsed_ms=round((time.perf_counter() - started) * 1000, 1),
    )
    return ArchiveResult(
        output=request.output,
        entry_names=tuple(entry_names),
        bytes_copied=bytes_copied,
    )


def _write_entry(writer: ZipArchiveWriter, entry_name: str, source_file: BinaryIO) -> int:
    entry_stream = writer.start_entry(
        entry_name, file_size=source_file_size(source_file)
    )
    try:
        copied = copy_stream(source_file, entry_stream)
    except (RuntimeError, zipfile.LargeZipFile) as exc:
        raise ArchiveCodecError(exc) from exc
    writer.close_entry()
    return copied
