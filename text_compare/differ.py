"""
Text Differ v1.0.0
==================
Line-level alignment with word-level diff highlighting.

Pipeline: normalize newlines -> line diff engine -> row aligner, with the
plain aggregate form computed from the same segments. Results are cached
for the most recent (left, right, mode) input only.
"""

import threading
from typing import Dict, Any, List, Optional, Tuple

from config_logging import get_config, get_logger, handle_errors, ValidationError, AppConfig
from .aligner import build_aligned_rows, has_changes
from .engines import DiffEngine, get_line_engine, get_word_engine
from .formatter import format_plain_diff, format_plain_split
from .models import (
    DiffResult, DiffRow,
    KIND_UNCHANGED, KIND_REMOVED, KIND_ADDED, KIND_MODIFIED,
    DIFF_MODES, FORMAT_MODES, FORMAT_HIGHLIGHT, MODE_LINE,
    SIDE_LEFT, SIDE_RIGHT
)
from .renderer import render_side_html
from .text_utils import normalize_newlines

logger = get_logger('text_compare.differ')

CacheKey = Tuple[str, str, str]


def _validate_choice(value: str, allowed: tuple, field: str) -> str:
    if value not in allowed:
        raise ValidationError(
            f"Invalid {field} '{value}'. Must be one of: {', '.join(allowed)}",
            field=field
        )
    return value


class TextDiffer:
    """
    Text comparison engine with line-level alignment
    and word-level diff highlighting.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        line_engine: Optional[DiffEngine] = None,
        word_engine: Optional[DiffEngine] = None,
        cache_enabled: Optional[bool] = None
    ):
        """
        Initialize the differ.

        Args:
            config: Application config (global config if None)
            line_engine: Line diff engine (configured engine if None)
            word_engine: Word diff engine (configured engine if None)
            cache_enabled: Override the configured size-one result cache
        """
        self.config = config or get_config()
        self.line_engine = line_engine or get_line_engine(
            self.config.line_engine, self.config.dmp_timeout
        )
        self.word_engine = word_engine or get_word_engine(
            self.config.word_engine, self.config.dmp_timeout
        )
        self.cache_enabled = self.config.cache_enabled if cache_enabled is None else cache_enabled

        self._cache_lock = threading.Lock()
        self._cache_key: Optional[CacheKey] = None
        self._cache_value: Optional[DiffResult] = None

    @handle_errors(logger)
    def compare(self, left: str, right: str, mode: str = MODE_LINE) -> DiffResult:
        """
        Compare two texts.

        Args:
            left: Original text
            right: Updated text
            mode: Highlight granularity ('line' or 'word')

        Returns:
            DiffResult with aligned rows, plain form and statistics
        """
        _validate_choice(mode, DIFF_MODES, 'mode')
        left = normalize_newlines(left or '')
        right = normalize_newlines(right or '')
        key = (left, right, mode)

        if self.cache_enabled:
            with self._cache_lock:
                if self._cache_key == key:
                    logger.debug("Diff cache hit", mode=mode)
                    return self._cache_value

        result = self._compute(left, right, mode)

        if self.cache_enabled:
            with self._cache_lock:
                self._cache_key = key
                self._cache_value = result

        return result

    def _compute(self, left: str, right: str, mode: str) -> DiffResult:
        logger.debug(f"Text lengths: left={len(left)}, right={len(right)}")

        with logger.log_operation('line_diff', engine=self.line_engine.name):
            segments = self.line_engine.diff(left, right)

        rows = build_aligned_rows(segments)
        stats = self._compute_stats(rows, left, right)

        logger.info(
            f"Diff complete: {stats['total_rows']} rows "
            f"(+{stats['added']}, -{stats['removed']}, ~{stats['modified']})",
            mode=mode
        )

        return DiffResult(
            mode=mode,
            segments=segments,
            rows=rows,
            has_changes=has_changes(rows),
            plain_lines=format_plain_diff(segments),
            stats=stats
        )

    @staticmethod
    def _compute_stats(rows: List[DiffRow], left: str, right: str) -> Dict[str, int]:
        return {
            'total_rows': len(rows),
            'unchanged': sum(1 for r in rows if r.kind == KIND_UNCHANGED),
            'removed': sum(1 for r in rows if r.kind == KIND_REMOVED),
            'added': sum(1 for r in rows if r.kind == KIND_ADDED),
            'modified': sum(1 for r in rows if r.kind == KIND_MODIFIED),
            'left_lines': sum(1 for r in rows if r.left_text is not None),
            'right_lines': sum(1 for r in rows if r.right_text is not None),
            'left_chars': len(left),
            'right_chars': len(right)
        }

    def render(self, result: DiffResult, display_format: str = FORMAT_HIGHLIGHT) -> Dict[str, Any]:
        """
        Build the split-view payload for a result.

        Args:
            result: Result from compare()
            display_format: 'highlight' for HTML spans, 'plain' for prefixed text

        Returns:
            Result dict extended with a 'highlight' or 'plain' pane mapping
        """
        _validate_choice(display_format, FORMAT_MODES, 'format')
        payload = result.to_dict()
        payload['format'] = display_format

        if display_format == FORMAT_HIGHLIGHT:
            payload['highlight'] = {
                SIDE_LEFT: render_side_html(result.rows, SIDE_LEFT, result.mode, self.word_engine),
                SIDE_RIGHT: render_side_html(result.rows, SIDE_RIGHT, result.mode, self.word_engine)
            }
        else:
            payload['plain'] = format_plain_split(result.rows)

        return payload

    def clear_cache(self):
        """Drop the cached result."""
        with self._cache_lock:
            self._cache_key = None
            self._cache_value = None

    @property
    def cache_info(self) -> Dict[str, Any]:
        with self._cache_lock:
            return {
                'enabled': self.cache_enabled,
                'populated': self._cache_key is not None
            }


# Convenience function
def compute_diff(left: str, right: str, mode: str = MODE_LINE) -> DiffResult:
    """
    Compare two texts with a throwaway differ.

    Args:
        left: Original text
        right: Updated text
        mode: Highlight granularity ('line' or 'word')

    Returns:
        DiffResult with aligned rows
    """
    return TextDiffer(cache_enabled=False).compare(left, right, mode)
