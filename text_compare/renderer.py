"""
Highlight Renderer v1.0.0
=========================
Per-side span rendering for the split view.

In line mode, and for every row that is not 'modified', a side is one
span classified by the row kind. In word mode a modified row is refined
with the word diff engine: the left side keeps everything except added
words, the right side keeps everything except removed words.
"""

import html
from typing import List, Optional

from .engines import DiffEngine, get_word_engine
from .models import (
    DiffRow, Span,
    KIND_UNCHANGED, KIND_REMOVED, KIND_ADDED, KIND_MODIFIED,
    MODE_WORD, SIDE_LEFT, SIDE_RIGHT
)


def row_side_kind(kind: str, side: str) -> str:
    """Map a row kind to the highlight class of one side."""
    if kind == KIND_REMOVED:
        return KIND_REMOVED if side == SIDE_LEFT else KIND_UNCHANGED
    if kind == KIND_ADDED:
        return KIND_ADDED if side == SIDE_RIGHT else KIND_UNCHANGED
    if kind == KIND_MODIFIED:
        return KIND_REMOVED if side == SIDE_LEFT else KIND_ADDED
    return KIND_UNCHANGED


def refine_modified_row(row: DiffRow, side: str, word_engine: DiffEngine) -> List[Span]:
    """
    Word-level spans for one side of a modified row.

    Args:
        row: A row of kind 'modified'
        side: 'left' or 'right'
        word_engine: Engine producing word/whitespace segments

    Returns:
        Spans for that side, without segments that belong to the other side
    """
    spans = []
    for segment in word_engine.diff(row.left_text, row.right_text):
        if side == SIDE_LEFT and segment.added:
            continue
        if side == SIDE_RIGHT and segment.removed:
            continue
        spans.append(Span(segment.value, segment.kind))
    return spans


def render_row_spans(
    row: DiffRow,
    side: str,
    mode: str,
    word_engine: Optional[DiffEngine] = None
) -> List[Span]:
    """
    Spans for one side of one row.

    Args:
        row: Aligned row
        side: 'left' or 'right'
        mode: 'line' or 'word'
        word_engine: Word engine for refinement (default engine if None)

    Returns:
        List of Span objects; an absent side is a single empty span
    """
    text = row.text_for(side)
    if text is None:
        return [Span('', KIND_UNCHANGED)]

    if mode == MODE_WORD and row.kind == KIND_MODIFIED:
        return refine_modified_row(row, side, word_engine or get_word_engine())

    return [Span(text, row_side_kind(row.kind, side))]


def spans_to_html(spans: List[Span]) -> str:
    """Render spans as escaped ``<span class="chunk ...">`` markup."""
    return ''.join(
        f'<span class="chunk {span.kind}">{html.escape(span.text)}</span>'
        for span in spans
    )


def render_side_html(
    rows: List[DiffRow],
    side: str,
    mode: str,
    word_engine: Optional[DiffEngine] = None
) -> List[str]:
    """One ``<div class="diff-line">`` per row for one pane of the split view."""
    if mode == MODE_WORD and word_engine is None:
        word_engine = get_word_engine()
    return [
        f'<div class="diff-line">{spans_to_html(render_row_spans(row, side, mode, word_engine))}</div>'
        for row in rows
    ]
