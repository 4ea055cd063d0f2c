"""Typed exceptions and exit codes for zipper."""

from __future__ import annotations

from enum import IntEnum

from .constants import ARCHIVE_FAILED, USAGE_TEXT


class ErrorKind(IntEnum):
    """Failure categories. The value is the process exit code."""

    USAGE = 1
    IO = 2
    CODEC = 3


class ZipperError(Exception):
    """Base exception for zipper failures."""

    kind: ErrorKind = ErrorKind.IO

    def __init__(self, description: str, cause: BaseException | None = None) -> None:
        if not description:
            raise ValueError("description must not be empty")
        super().__init__(description)
        self.description = description
        self.cause = cause

    def render(self) -> str:
        """Return the one-line message shown to the user."""
        cause_text = str(self.cause).strip() if self.cause is not None else ""
        if cause_text:
            return f"{self.description}: {cause_text}"
        return self.description


class UsageError(ZipperError):
    """Raised when the invocation is malformed."""

    kind = ErrorKind.USAGE

    def __init__(self) -> None:
        super().__init__(USAGE_TEXT)


class ArchiveIOError(ZipperError):
    """Raised for filesystem failures: create, open, read, copy."""

    kind = ErrorKind.IO


class ArchiveCodecError(ZipperError):
    """Raised when the zip container cannot be written."""

    kind = ErrorKind.CODEC

    def __init__(self, cause: BaseException | None = None) -> None:
        super().__init__(ARCHIVE_FAILED, cause)


def exit_code(kind: ErrorKind) -> int:
    return int(kind)
