"""Filesystem helpers for the archive workflow."""

from __future__ import annotations

import os
from pathlib import Path
from typing import BinaryIO

from .constants import (
    COPY_CHUNK_SIZE,
    COPY_FAILED,
    CREATE_OUTPUT_FAILED,
    INVALID_SOURCE_NAME,
    OPEN_SOURCE_FAILED,
)
from .errors import ArchiveIOError


def open_output_file(output_path: Path) -> BinaryIO:
    try:
        return open(output_path, "wb")
    except OSError as exc:
        raise ArchiveIOError(CREATE_OUTPUT_FAILED, exc) from exc


def open_source_file(source_path: Path) -> BinaryIO:
    try:
        return open(source_path, "rb")
    except OSError as exc:
        raise ArchiveIOError(OPEN_SOURCE_FAILED, exc) from exc


def source_file_size(source_file: BinaryIO) -> int | None:
    """Return the size of an open regular file, or None when unknown."""
    try:
        return os.fstat(source_file.fileno()).st_size
    except (OSError, AttributeError, ValueError):
        return None


def derive_entry_name(source_path: Path) -> str:
    """Return the archive entry name for a source path: its basename.

    Paths without a usable basename (``/``, ``.``, ``..``) and basenames that
    cannot be written as UTF-8 text are rejected. Undecodable argv bytes reach
    Python as lone surrogates, which is what the encode check catches.
    """
    name = source_path.name
    if name in ("", "..", "."):
        cause = ValueError(f"no file name in path {str(source_path)!r}")
        raise ArchiveIOError(INVALID_SOURCE_NAME, cause) from cause

    try:
        name.encode("utf-8")
    except UnicodeEncodeError as exc:
        cause = ValueError(f"file name is not valid text: {name!r}")
        raise ArchiveIOError(INVALID_SOURCE_NAME, cause) from exc

    return name


def copy_stream(source_file: BinaryIO, target_stream: BinaryIO) -> int:
    """Copy source into target in bounded chunks and return the byte count.

    Only OSError is translated here; errors raised by the archive codec while
    accepting bytes propagate unchanged for the caller to classify.
    """
    copied = 0
    try:
        while True:
            chunk = source_file.read(COPY_CHUNK_SIZE)
            if not chunk:
                break
            target_stream.write(chunk)
            copied += len(chunk)
    except OSError as exc:
        raise ArchiveIOError(COPY_FAILED, exc) from exc
    return copied

