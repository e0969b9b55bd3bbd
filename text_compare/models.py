"""
Text Comparison Models v1.0.0
=============================
Data classes for text comparison results.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Any


# Row classifications
KIND_UNCHANGED = 'unchanged'
KIND_REMOVED = 'removed'
KIND_ADDED = 'added'
KIND_MODIFIED = 'modified'

ROW_KINDS = (KIND_UNCHANGED, KIND_REMOVED, KIND_ADDED, KIND_MODIFIED)

# Diff granularity and display selectors
MODE_LINE = 'line'
MODE_WORD = 'word'
DIFF_MODES = (MODE_LINE, MODE_WORD)

FORMAT_HIGHLIGHT = 'highlight'
FORMAT_PLAIN = 'plain'
FORMAT_MODES = (FORMAT_HIGHLIGHT, FORMAT_PLAIN)

SIDE_LEFT = 'left'
SIDE_RIGHT = 'right'


@dataclass(frozen=True)
class Segment:
    """
    A maximal run of text produced by a line or word diff engine.

    Attributes:
        value: Text payload (newline-terminated lines for the line engine)
        added: Present only in the right input
        removed: Present only in the left input

    Both flags false means the text is common to both inputs.
    """
    value: str
    added: bool = False
    removed: bool = False

    @classmethod
    def equal(cls, value: str) -> 'Segment':
        return cls(value)

    @classmethod
    def inserted(cls, value: str) -> 'Segment':
        return cls(value, added=True)

    @classmethod
    def deleted(cls, value: str) -> 'Segment':
        return cls(value, removed=True)

    @property
    def kind(self) -> str:
        if self.added:
            return KIND_ADDED
        if self.removed:
            return KIND_REMOVED
        return KIND_UNCHANGED

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'value': self.value,
            'added': self.added,
            'removed': self.removed
        }


@dataclass(frozen=True)
class DiffRow:
    """
    A single row in the side-by-side view.

    Rows are aligned between panels: an added line has no left text,
    a removed line has no right text.

    Attributes:
        kind: Row status ('unchanged', 'removed', 'added', 'modified')
        left_text: Original line (None for additions)
        right_text: Updated line (None for removals)
        left_line_number: 1-based line number in the original text
        right_line_number: 1-based line number in the updated text
    """
    kind: str
    left_text: Optional[str] = None
    right_text: Optional[str] = None
    left_line_number: Optional[int] = None
    right_line_number: Optional[int] = None

    def __post_init__(self):
        if self.kind not in ROW_KINDS:
            raise ValueError(f"Unknown row kind '{self.kind}'. Must be one of: {', '.join(ROW_KINDS)}")

    @property
    def is_change(self) -> bool:
        return self.kind != KIND_UNCHANGED

    def text_for(self, side: str) -> Optional[str]:
        return self.left_text if side == SIDE_LEFT else self.right_text

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'kind': self.kind,
            'left_text': self.left_text,
            'right_text': self.right_text,
            'left_line_number': self.left_line_number,
            'right_line_number': self.right_line_number,
            'is_change': self.is_change
        }


@dataclass(frozen=True)
class Span:
    """One highlighted chunk of one side of a row."""
    text: str
    kind: str = KIND_UNCHANGED

    def to_dict(self) -> Dict[str, Any]:
        return {'text': self.text, 'kind': self.kind}


@dataclass
class DiffResult:
    """
    Complete comparison result for one (left, right, mode) input.

    Attributes:
        mode: Diff granularity used for highlighting ('line' or 'word')
        segments: Line-level segments from the line diff engine
        rows: Aligned rows for side-by-side rendering
        has_changes: True when any row is not unchanged
        plain_lines: Aggregate plain form, one entry per output line
        stats: Statistics dictionary with counts
    """
    mode: str
    segments: List[Segment] = field(default_factory=list)
    rows: List[DiffRow] = field(default_factory=list)
    has_changes: bool = False
    plain_lines: List[str] = field(default_factory=list)
    stats: Dict[str, int] = field(default_factory=dict)

    def __post_init__(self):
        """Initialize stats if not provided."""
        if not self.stats:
            self.stats = {
                'total_rows': 0,
                'unchanged': 0,
                'removed': 0,
                'added': 0,
                'modified': 0,
                'left_lines': 0,
                'right_lines': 0,
                'left_chars': 0,
                'right_chars': 0
            }

    @property
    def plain_text(self) -> str:
        """Aggregate plain form as a single string (copy/export)."""
        return '\n'.join(self.plain_lines)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'mode': self.mode,
            'rows': [r.to_dict() for r in self.rows],
            'segments': [s.to_dict() for s in self.segments],
            'has_changes': self.has_changes,
            'plain_text': self.plain_text,
            'stats': dict(self.stats)
        }
