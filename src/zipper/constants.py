"""Literal constants used by zipper."""

APP_NAME = "zipper"

USAGE_TEXT = "Usage: zipper <zip file> <file to archive> <file to archive> ..."

HELP_TEXT = """\
Usage: zipper [--log <path>] <zip file> <file to archive> [<file to archive> ...]

Bundle files into a single zip archive, one entry per file named by its basename.

Options:
  --log <path>     Write a structured run log to <path>.
  --version        Show the version and exit.
  --help, -h       Show this help message and exit.
  --               End options; the next argument is the zip file.

Exit codes:
  0  Archive written and finalized.
  1  Usage error, or help or version shown (no archive written).
  2  File error (output not creatable, source not readable, copy failed).
  3  Archive error (entry or central directory could not be written).
"""

CREATE_OUTPUT_FAILED = "Unable to create zip file"
CLOSE_OUTPUT_FAILED = "Unable to close zip file"
OPEN_LOG_FAILED = "Unable to open log file"
OPEN_SOURCE_FAILED = "Unable to open source file"
COPY_FAILED = "An error occurred while copying files"
INVALID_SOURCE_NAME = "Invalid source file name"
ARCHIVE_FAILED = "An error occurred creating the archive"

ERROR_PREFIX = "ERROR:"

COPY_CHUNK_SIZE = 64 * 1024

# rw-r--r-- regular file, stored in the high 16 bits of external_attr.
ENTRY_PERMISSIONS = 0o100644
