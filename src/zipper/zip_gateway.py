"""Zip container writer over the standard zipfile codec."""

from __future__ import annotations

import enum
import logging
import time
import zipfile
from types import TracebackType
from typing import BinaryIO

from .constants import CLOSE_OUTPUT_FAILED, ENTRY_PERMISSIONS
from .errors import ArchiveCodecError, ArchiveIOError
from .logging_utils import log_event

_CODEC_ERRORS = (OSError, ValueError, RuntimeError, zipfile.BadZipFile, zipfile.LargeZipFile)


class WriterState(enum.Enum):
    OPEN = "open"
    FINISHED = "finished"
    RELEASED = "released"


class ZipArchiveWriter:
    """Write-only zip container bound to an already opened output file.

    The writer owns the output handle from construction on. ``finish()`` is
    the only way to produce a readable archive; leaving the context manager
    without it closes the handle and leaves an archive with no central
    directory on disk.

    Example:
        with ZipArchiveWriter(open("out.zip", "wb")) as writer:
            with writer.start_entry("a.txt") as entry:
                entry.write(b"hello")
            writer.finish()
    """

    def __init__(self, sink: BinaryIO) -> None:
        try:
            self._zip_file = zipfile.ZipFile(
                sink, mode="w", compression=zipfile.ZIP_DEFLATED
            )
        except _CODEC_ERRORS as exc:
            raise ArchiveCodecError(exc) from exc
        self._sink = sink
        self._entry: BinaryIO | None = None
        self._state = WriterState.OPEN

    @property
    def state(self) -> WriterState:
        return self._state

    def __enter__(self) -> ZipArchiveWriter:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release(pending_error=exc)

    def start_entry(self, name: str, *, file_size: int | None = None) -> BinaryIO:
        """Begin a new entry and return a binary stream for its content.

        ``file_size`` lets the codec choose ZIP64 framing up front for large
        sources; it is a hint, the recorded size is what gets written.
        """
        self._require_open()
        entry_info = zipfile.ZipInfo(name, date_time=time.localtime(time.time())[:6])
        entry_info.compress_type = zipfile.ZIP_DEFLATED
        entry_info.external_attr = ENTRY_PERMISSIONS << 16
        if file_size is not None:
            entry_info.file_size = file_size

        try:
            self._entry = self._zip_file.open(entry_info, mode="w")
        except _CODEC_ERRORS as exc:
            raise ArchiveCodecError(exc) from exc
        return self._entry

    def close_entry(self) -> None:
        """Complete the current entry by writing its sizes and checksum."""
        self._require_open()
        entry, self._entry = self._entry, None
        if entry is None:
            return
        try:
            entry.close()
        except _CODEC_ERRORS as exc:
            raise ArchiveCodecError(exc) from exc

    def finish(self) -> None:
        """Write the central directory and close the output file."""
        self._require_open()
        try:
            self._zip_file.close()
            self._sink.close()
        except _CODEC_ERRORS as exc:
            self._abandon(pending_error=exc)
            raise ArchiveCodecError(exc) from exc
        self._state = WriterState.FINISHED

    def release(self, *, pending_error: BaseException | None = None) -> None:
        """Close the output file, abandoning the archive if it is unfinished.

        A failure to close raises ``ArchiveIOError``, unless ``pending_error``
        is already on its way out; then the close failure is only logged.
        """
        if self._state is WriterState.OPEN:
            self._abandon(pending_error=pending_error)

    def _abandon(self, *, pending_error: BaseException | None) -> None:
        # Detach the codec first so neither close() nor its finalizer can
        # append a central directory to the handle.
        self._zip_file.fp = None
        self._entry = None
        self._state = WriterState.RELEASED
        if self._sink.closed:
            return
        try:
            self._sink.close()
        except OSError as exc:
            if pending_error is None:
                raise ArchiveIOError(CLOSE_OUTPUT_FAILED, exc) from exc
            log_event(
                "output_close_failed",
                level=logging.WARNING,
                error=f"{CLOSE_OUTPUT_FAILED}: {exc}",
                pending_error=pending_error,
            )

    def _require_open(self) -> None:
        if self._state is not WriterState.OPEN:
            cause = ValueError(f"archive writer is {self._state.value}")
            raise ArchiveCodecError(cause) from cause
