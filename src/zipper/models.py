"""Dataclasses shared across zipper layers."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ArchiveRequest:
    output: Path
    inputs: tuple[Path, ...]

    def __post_init__(self) -> None:
        if not self.inputs:
            raise ValueError("ArchiveRequest requires at least one input path")


@dataclass(frozen=True)
class ArchiveResult:
    output: Path
    entry_names: tuple[str, ...]
    bytes_copied: int

    @property
    def entry_count(self) -> int:
        return len(self.entry_names)


@dataclass(frozen=True)
class CliArgs:
    paths: list[str]
    log_path: Path | None
