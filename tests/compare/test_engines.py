"""
Tests for Diff Engines
======================
Segment coverage and granularity of the line and word engines.
"""

import pytest

from config_logging import ValidationError
from text_compare.engines import (
    DmpLineEngine, DmpWordEngine,
    SequenceMatcherLineEngine, SequenceMatcherWordEngine,
    get_line_engine, get_word_engine, tokenize_words
)
from text_compare.models import Segment


PAIRS = [
    ("line1\nline2", "line1\nmodified"),
    ("a\nb\nc\n", "a\nc\n"),
    ("", "only right\n"),
    ("only left", ""),
    ("same\n", "same\n"),
    ("The quick brown fox", "The slow brown dog jumps"),
]


def _left(segments):
    return ''.join(s.value for s in segments if not s.added)


def _right(segments):
    return ''.join(s.value for s in segments if not s.removed)


@pytest.fixture(params=[DmpLineEngine, SequenceMatcherLineEngine, DmpWordEngine, SequenceMatcherWordEngine])
def engine(request):
    """Every engine implementation."""
    return request.param()


class TestEngineContract:
    """Tests shared by every engine."""

    def test_both_empty(self, engine):
        assert engine.diff("", "") == []

    @pytest.mark.parametrize("left, right", PAIRS)
    def test_coverage(self, engine, left, right):
        segments = engine.diff(left, right)
        assert _left(segments) == left
        assert _right(segments) == right

    @pytest.mark.parametrize("left, right", PAIRS)
    def test_never_both_tags(self, engine, left, right):
        for segment in engine.diff(left, right):
            assert not (segment.added and segment.removed)

    @pytest.mark.parametrize("left, right", PAIRS)
    def test_equal_runs_are_maximal(self, engine, left, right):
        segments = engine.diff(left, right)
        for prev, cur in zip(segments, segments[1:]):
            assert not (prev.kind == 'unchanged' and cur.kind == 'unchanged')

    def test_identical_text_is_one_equal_segment(self, engine):
        assert engine.diff("x\ny\n", "x\ny\n") == [Segment.equal("x\ny\n")]


class TestLineEngines:
    """Line granularity specifics."""

    @pytest.mark.parametrize("engine_cls", [DmpLineEngine, SequenceMatcherLineEngine])
    def test_changed_last_line(self, engine_cls):
        segments = engine_cls().diff("line1\nline2", "line1\nline3")
        assert segments == [
            Segment.equal("line1\n"),
            Segment.deleted("line2"),
            Segment.inserted("line3"),
        ]

    @pytest.mark.parametrize("engine_cls", [DmpLineEngine, SequenceMatcherLineEngine])
    def test_terminator_is_part_of_the_line(self, engine_cls):
        """Test that 'line1' and 'line1\\n' are different lines."""
        segments = engine_cls().diff("line1", "line1\nline2")
        assert segments == [
            Segment.deleted("line1"),
            Segment.inserted("line1\nline2"),
        ]

    @pytest.mark.parametrize("engine_cls", [DmpLineEngine, SequenceMatcherLineEngine])
    def test_segments_end_on_line_boundaries(self, engine_cls):
        segments = engine_cls().diff("a\nb\nc\nd\n", "a\nx\nc\ny\nz\n")
        for segment in segments:
            assert segment.value.endswith("\n")


class TestWordEngines:
    """Word granularity specifics."""

    def test_tokenize_words(self):
        assert tokenize_words("a  bc\td") == ["a", "  ", "bc", "\t", "d"]
        assert tokenize_words("") == []

    @pytest.mark.parametrize("engine_cls", [DmpWordEngine, SequenceMatcherWordEngine])
    def test_single_word_change(self, engine_cls):
        segments = engine_cls().diff("hello world", "hello there")
        assert segments == [
            Segment.equal("hello "),
            Segment.deleted("world"),
            Segment.inserted("there"),
        ]

    @pytest.mark.parametrize("engine_cls", [DmpWordEngine, SequenceMatcherWordEngine])
    def test_whole_words_only(self, engine_cls):
        """Test that a changed word is never split into characters."""
        segments = engine_cls().diff("cat", "cart")
        assert segments == [Segment.deleted("cat"), Segment.inserted("cart")]


class TestEngineFactory:
    """Tests for get_line_engine / get_word_engine."""

    def test_named_engines(self):
        assert isinstance(get_line_engine('dmp'), DmpLineEngine)
        assert isinstance(get_line_engine('DIFFLIB'), SequenceMatcherLineEngine)
        assert isinstance(get_word_engine('dmp'), DmpWordEngine)
        assert isinstance(get_word_engine('difflib'), SequenceMatcherWordEngine)

    def test_timeout_applied(self):
        engine = get_line_engine('dmp', timeout=0.5)
        assert engine.dmp.Diff_Timeout == 0.5

    def test_unknown_engine(self):
        with pytest.raises(ValidationError) as excinfo:
            get_line_engine('myers')
        assert excinfo.value.details['field'] == 'line_engine'
