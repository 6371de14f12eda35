"""Span tracking for diagnostics, and reading source files."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from genstd.errors import Diagnostic, DiagnosticLabel, Severity, SourceError


@dataclass(frozen=True)
class Span:
    """A range within a source file."""

    file: str
    start_line: int
    start_col: int
    end_line: int
    end_col: int

    def __str__(self) -> str:
        return f"{self.file}:{self.start_line}:{self.start_col}"


def read_source(path: Path | str) -> str:
    """Read a UTF-8 source file. Undecodable bytes raise SourceError (E100)."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        span = Span(str(path), 1, 1, 1, 1)
        raise SourceError([
            Diagnostic(
                severity=Severity.ERROR,
                code="E100",
                message=f"source is not valid UTF-8: {e.reason} at byte {e.start}",
                labels=[DiagnosticLabel(span=span, message="")],
            )
        ]) from e
