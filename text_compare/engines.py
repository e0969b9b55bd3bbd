"""
Diff Engines v1.0.0
===================
Line-level and word-level diff computation.

Uses diff-match-patch for line and word matching, with
difflib.SequenceMatcher engines selectable through configuration.
Every engine returns an ordered list of Segments covering both inputs:
joining the non-removed values rebuilds the right text and joining the
non-added values rebuilds the left text.
"""

import re
import difflib
from typing import List, Tuple

from diff_match_patch import diff_match_patch

from config_logging import get_logger, ValidationError, DEFAULT_DMP_TIMEOUT
from .models import Segment

logger = get_logger('text_compare.engines')

# Words and the whitespace between them are separate tokens
WORD_TOKEN_RE = re.compile(r'\S+|\s+')
# Lines keep their LF terminator; a final unterminated line is its own token
LINE_TOKEN_RE = re.compile(r"[^\n]*\n|[^\n]+")


def tokenize_words(text: str) -> List[str]:
    """Tokenize text into alternating words and whitespace runs."""
    return WORD_TOKEN_RE.findall(text)


def _segments_from_dmp(diffs) -> List[Segment]:
    segments = []
    for op, text in diffs:
        if not text:
            continue
        if op == diff_match_patch.DIFF_INSERT:
            segments.append(Segment.inserted(text))
        elif op == diff_match_patch.DIFF_DELETE:
            segments.append(Segment.deleted(text))
        else:
            segments.append(Segment.equal(text))
    return segments


def _segments_from_opcodes(
    old_tokens: List[str],
    new_tokens: List[str]
) -> List[Segment]:
    matcher = difflib.SequenceMatcher(None, old_tokens, new_tokens, autojunk=False)
    segments = []

    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == 'equal':
            segments.append(Segment.equal(''.join(old_tokens[i1:i2])))
            continue
        # A replace is a deleted run followed by an inserted run
        if tag in ('delete', 'replace'):
            segments.append(Segment.deleted(''.join(old_tokens[i1:i2])))
        if tag in ('insert', 'replace'):
            segments.append(Segment.inserted(''.join(new_tokens[j1:j2])))

    return segments


class DiffEngine:
    """Base class for segment-producing diff engines."""

    name = 'base'

    def diff(self, old_text: str, new_text: str) -> List[Segment]:
        """
        Compare two strings.

        Args:
            old_text: Left (original) text
            new_text: Right (updated) text

        Returns:
            Ordered list of Segments
        """
        if not old_text and not new_text:
            return []
        return self._diff(old_text, new_text)

    def _diff(self, old_text: str, new_text: str) -> List[Segment]:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class _DmpEngine(DiffEngine):
    """Shared diff-match-patch setup."""

    name = 'dmp'

    def __init__(self, timeout: float = DEFAULT_DMP_TIMEOUT):
        self.dmp = diff_match_patch()
        self.dmp.Diff_Timeout = timeout


class DmpLineEngine(_DmpEngine):
    """
    Line diff using diff-match-patch line mode.

    Each line, including its terminator, is encoded as a single character,
    so a last line without a newline differs from the same line with one.
    """

    def _diff(self, old_text: str, new_text: str) -> List[Segment]:
        old_chars, new_chars, line_array = self.dmp.diff_linesToChars(old_text, new_text)
        diffs = self.dmp.diff_main(old_chars, new_chars, False)
        self.dmp.diff_charsToLines(diffs, line_array)
        return _segments_from_dmp(diffs)


class DmpWordEngine(_DmpEngine):
    """
    Word diff using diff-match-patch over encoded word tokens.

    Every distinct word or whitespace run maps to one character so the
    character diff works at token granularity.
    """

    def _encode(self, old_tokens: List[str], new_tokens: List[str]) -> Tuple[str, str, List[str]]:
        token_array = ['']  # index 0 is never emitted
        token_index = {}

        def encode(tokens: List[str]) -> str:
            chars = []
            for token in tokens:
                if token not in token_index:
                    token_index[token] = len(token_array)
                    token_array.append(token)
                chars.append(chr(token_index[token]))
            return ''.join(chars)

        return encode(old_tokens), encode(new_tokens), token_array

    def _diff(self, old_text: str, new_text: str) -> List[Segment]:
        old_chars, new_chars, token_array = self._encode(
            tokenize_words(old_text), tokenize_words(new_text)
        )
        diffs = self.dmp.diff_main(old_chars, new_chars, False)
        self.dmp.diff_cleanupSemantic(diffs)
        decoded = [
            (op, ''.join(token_array[ord(ch)] for ch in chars))
            for op, chars in diffs
        ]
        return _segments_from_dmp(decoded)


class SequenceMatcherLineEngine(DiffEngine):
    """Line diff using difflib.SequenceMatcher over LF-terminated lines."""

    name = 'difflib'

    def _diff(self, old_text: str, new_text: str) -> List[Segment]:
        return _segments_from_opcodes(
            LINE_TOKEN_RE.findall(old_text),
            LINE_TOKEN_RE.findall(new_text)
        )


class SequenceMatcherWordEngine(DiffEngine):
    """Word diff using difflib.SequenceMatcher over word/whitespace tokens."""

    name = 'difflib'

    def _diff(self, old_text: str, new_text: str) -> List[Segment]:
        return _segments_from_opcodes(
            tokenize_words(old_text),
            tokenize_words(new_text)
        )


LINE_ENGINES = {
    'dmp': DmpLineEngine,
    'difflib': SequenceMatcherLineEngine,
}

WORD_ENGINES = {
    'dmp': DmpWordEngine,
    'difflib': SequenceMatcherWordEngine,
}


def _build_engine(registry: dict, name: str, kind: str, timeout: float) -> DiffEngine:
    key = (name or '').lower()
    if key not in registry:
        raise ValidationError(
            f"Unknown {kind} engine '{name}'. Available: {', '.join(sorted(registry))}",
            field=f'{kind}_engine'
        )
    engine_cls = registry[key]
    if issubclass(engine_cls, _DmpEngine):
        engine = engine_cls(timeout=timeout)
    else:
        engine = engine_cls()
    logger.debug(f"Created {kind} engine {engine!r}")
    return engine


def get_line_engine(name: str = 'dmp', timeout: float = DEFAULT_DMP_TIMEOUT) -> DiffEngine:
    """Create the line diff engine registered under ``name``."""
    return _build_engine(LINE_ENGINES, name, 'line', timeout)


def get_word_engine(name: str = 'dmp', timeout: float = DEFAULT_DMP_TIMEOUT) -> DiffEngine:
    """Create the word diff engine registered under ``name``."""
    return _build_engine(WORD_ENGINES, name, 'word', timeout)
