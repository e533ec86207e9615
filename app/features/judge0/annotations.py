from __future__ import annotations

from typing import Iterable, List, Tuple

from .schemas import END_OF_LINE, Annotation, Diagnostic, Marker, Severity

ERROR_MARKER_CLASS = "error-marker"


def _zero_based(value: int) -> int:
    return max(0, value - 1)


def to_annotation(diagnostic: Diagnostic) -> Annotation:
    return Annotation(
        row=_zero_based(diagnostic.row),
        column=_zero_based(diagnostic.column),
        type=Severity.warning if diagnostic.severity == Severity.warning else Severity.error,
        text=diagnostic.message,
    )


def to_marker(diagnostic: Diagnostic) -> Marker:
    """Highlight the whole source line the diagnostic points at."""
    row = _zero_based(diagnostic.row)
    return Marker(
        start_row=row,
        start_col=0,
        end_row=row,
        end_col=END_OF_LINE,
        class_name=ERROR_MARKER_CLASS,
        type="text",
    )


def project(diagnostics: Iterable[Diagnostic]) -> Tuple[List[Annotation], List[Marker]]:
    items = list(diagnostics)
    return [to_annotation(d) for d in items], [to_marker(d) for d in items]


__all__ = ["ERROR_MARKER_CLASS", "to_annotation", "to_marker", "project"]
