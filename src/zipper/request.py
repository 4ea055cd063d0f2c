"""Translation of positional arguments into an archive request."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from .errors import UsageError
from .models import ArchiveRequest


def parse_request(arguments: Sequence[str]) -> ArchiveRequest:
    """Build an ArchiveRequest from ``<output> <input> [<input> ...]``.

    Inputs keep their order and are not deduplicated. Nothing here touches the
    filesystem; missing or unreadable inputs surface while the archive is
    being written.

    Raises:
        UsageError: If the output path or every input path is missing.
    """
    if not arguments:
        raise UsageError()

    output_raw, *inputs_raw = arguments
    if not inputs_raw:
        raise UsageError()

    return ArchiveRequest(
        output=Path(output_raw),
        inputs=tuple(Path(input_raw) for input_raw in inputs_raw),
    )
