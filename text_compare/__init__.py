"""
Text Comparison Module v1.0.0
=============================
Side-by-side text comparison with line-level alignment
and word-level diff highlighting.

Features:
- Newline normalization and trailing-newline aware line splitting
- Line-level alignment with index-paired modified rows
- Word-level highlighting within modified rows
- Aggregate and per-row plain text output
- Text file upload and .txt export endpoints
"""

from .routes import tc_blueprint
from .differ import TextDiffer, compute_diff
from .aligner import AlignState, align_step, build_aligned_rows, flush, has_changes
from .engines import get_line_engine, get_word_engine
from .formatter import format_plain_diff, format_plain_rows, format_plain_split, plain_text
from .text_utils import normalize_newlines, split_lines_no_trailing_empty
from .models import (
    Segment,
    DiffRow,
    Span,
    DiffResult
)

__version__ = "1.0.0"
__all__ = [
    'tc_blueprint',
    'TextDiffer',
    'compute_diff',
    'AlignState',
    'align_step',
    'build_aligned_rows',
    'flush',
    'has_changes',
    'get_line_engine',
    'get_word_engine',
    'format_plain_diff',
    'format_plain_rows',
    'format_plain_split',
    'plain_text',
    'normalize_newlines',
    'split_lines_no_trailing_empty',
    'Segment',
    'DiffRow',
    'Span',
    'DiffResult'
]
