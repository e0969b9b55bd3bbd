"""
Row Aligner v1.0.0
==================
Turns line-level diff segments into side-by-side display rows.

Deleted and inserted lines that fall in the same changed block are paired
by position: the i-th deleted line sits beside the i-th inserted line as a
'modified' row, and whatever is left over on the longer side becomes
'removed' or 'added' rows. Lines are never matched by similarity.

The alignment is a fold over the segments. ``align_step`` is the reducer;
it takes the current AlignState and one segment and returns the next state
together with the rows that segment emitted.
"""

from dataclasses import dataclass, replace
from typing import Iterable, List, Tuple

from .models import (
    Segment, DiffRow,
    KIND_UNCHANGED, KIND_REMOVED, KIND_ADDED, KIND_MODIFIED
)
from .text_utils import split_lines_no_trailing_empty


@dataclass(frozen=True)
class AlignState:
    """
    Accumulator for the row fold.

    Attributes:
        pending_removed: Deleted lines waiting to be paired
        pending_added: Inserted lines waiting to be paired
        left_counter: Next line number on the left side
        right_counter: Next line number on the right side
    """
    pending_removed: Tuple[str, ...] = ()
    pending_added: Tuple[str, ...] = ()
    left_counter: int = 1
    right_counter: int = 1

    @classmethod
    def initial(cls) -> 'AlignState':
        return cls()

    @property
    def has_pending(self) -> bool:
        return bool(self.pending_removed or self.pending_added)


def flush(state: AlignState) -> Tuple[AlignState, List[DiffRow]]:
    """
    Drain the pending buffers into rows, pairing lines by index.

    Args:
        state: Current fold state

    Returns:
        Tuple of (state with empty buffers, emitted rows)
    """
    rows = []
    left_no = state.left_counter
    right_no = state.right_counter
    removed = state.pending_removed
    added = state.pending_added

    for i in range(max(len(removed), len(added))):
        has_left = i < len(removed)
        has_right = i < len(added)

        if has_left and has_right:
            rows.append(DiffRow(
                kind=KIND_MODIFIED,
                left_text=removed[i],
                right_text=added[i],
                left_line_number=left_no,
                right_line_number=right_no
            ))
            left_no += 1
            right_no += 1
        elif has_left:
            rows.append(DiffRow(
                kind=KIND_REMOVED,
                left_text=removed[i],
                left_line_number=left_no
            ))
            left_no += 1
        else:
            rows.append(DiffRow(
                kind=KIND_ADDED,
                right_text=added[i],
                right_line_number=right_no
            ))
            right_no += 1

    return AlignState(left_counter=left_no, right_counter=right_no), rows


def align_step(state: AlignState, segment: Segment) -> Tuple[AlignState, List[DiffRow]]:
    """
    Consume one segment.

    Removed and added segments only extend the pending buffers. An
    unchanged segment first flushes the buffers, then emits one unchanged
    row per line.

    Args:
        state: Current fold state
        segment: Next line-level segment

    Returns:
        Tuple of (next state, rows emitted by this segment)
    """
    lines = split_lines_no_trailing_empty(segment.value)

    if segment.removed:
        return replace(state, pending_removed=state.pending_removed + tuple(lines)), []
    if segment.added:
        return replace(state, pending_added=state.pending_added + tuple(lines)), []

    state, rows = flush(state)
    left_no = state.left_counter
    right_no = state.right_counter
    for line in lines:
        rows.append(DiffRow(
            kind=KIND_UNCHANGED,
            left_text=line,
            right_text=line,
            left_line_number=left_no,
            right_line_number=right_no
        ))
        left_no += 1
        right_no += 1

    return replace(state, left_counter=left_no, right_counter=right_no), rows


def build_aligned_rows(segments: Iterable[Segment]) -> List[DiffRow]:
    """
    Build the full row sequence for a line diff.

    Args:
        segments: Line-level segments in document order

    Returns:
        List of DiffRow objects in document order
    """
    state = AlignState.initial()
    rows: List[DiffRow] = []

    for segment in segments:
        state, emitted = align_step(state, segment)
        rows.extend(emitted)

    _, emitted = flush(state)
    rows.extend(emitted)
    return rows


def has_changes(rows: Iterable[DiffRow]) -> bool:
    """True if any row is not unchanged."""
    return any(row.is_change for row in rows)
