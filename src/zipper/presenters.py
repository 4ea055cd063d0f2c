"""User-facing text rendering."""

from __future__ import annotations

from .constants import APP_NAME, ERROR_PREFIX, HELP_TEXT
from .errors import ErrorKind, ZipperError


def render_error(error: ZipperError) -> str:
    if error.kind is ErrorKind.USAGE:
        return error.description
    return f"{ERROR_PREFIX} {error.render()}"


def render_help() -> str:
    return HELP_TEXT


def render_version(version: str) -> str:
    return f"{APP_NAME} {version}"
