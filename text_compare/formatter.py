"""
Plain-text serialization of a diff.

Two forms are produced and they are not interchangeable:

* the aggregate form works on the raw line segments and is what gets
  copied or exported as a single stream;
* the per-row form works on aligned rows and gives each side of the
  split view its own column of prefixed lines.
"""

from typing import Dict, Iterable, List

from .models import (
    Segment, DiffRow,
    KIND_REMOVED, KIND_ADDED, KIND_MODIFIED,
    SIDE_LEFT, SIDE_RIGHT
)
from .text_utils import normalize_newlines

NO_DIFFERENCES = 'No differences'


def _segment_prefix(segment: Segment) -> str:
    if segment.added:
        return '+'
    if segment.removed:
        return '-'
    return ' '


def format_plain_diff(segments: Iterable[Segment]) -> List[str]:
    """
    Aggregate plain form, one ``"{prefix} {line}"`` entry per line.

    Returns ``['No differences']`` when there is nothing to show.
    """
    lines = []

    for segment in segments:
        prefix = _segment_prefix(segment)
        parts = normalize_newlines(segment.value).split('\n')
        # The empty element after a final newline is not a line
        if parts[-1] == '':
            parts.pop()
        lines.extend(f"{prefix} {line}" for line in parts)

    return lines or [NO_DIFFERENCES]


def plain_text(segments: Iterable[Segment]) -> str:
    """Aggregate plain form joined into one string."""
    return '\n'.join(format_plain_diff(segments))


def row_prefix(row: DiffRow, side: str) -> str:
    if side == SIDE_LEFT:
        return '-' if row.kind in (KIND_REMOVED, KIND_MODIFIED) else ' '
    return '+' if row.kind in (KIND_ADDED, KIND_MODIFIED) else ' '


def format_plain_rows(rows: Iterable[DiffRow], side: str) -> List[str]:
    """Per-row plain form for one side of the split view."""
    return [
        f"{row_prefix(row, side)} {row.text_for(side) or ''}"
        for row in rows
    ]


def format_plain_split(rows: List[DiffRow]) -> Dict[str, List[str]]:
    """Per-row plain form for both sides."""
    return {
        SIDE_LEFT: format_plain_rows(rows, SIDE_LEFT),
        SIDE_RIGHT: format_plain_rows(rows, SIDE_RIGHT)
    }
