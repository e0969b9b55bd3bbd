"""
Tests for Row Aligner
=====================
Index pairing, independent line numbering and the fold reducer.
"""

import pytest

from text_compare.aligner import AlignState, align_step, build_aligned_rows, flush, has_changes
from text_compare.engines import get_line_engine
from text_compare.models import Segment, DiffRow
from text_compare.text_utils import normalize_newlines, split_lines_no_trailing_empty


ENGINE_NAMES = ['dmp', 'difflib']

SAMPLE_PAIRS = [
    ("", ""),
    ("a", ""),
    ("", "a\nb\n"),
    ("line1\nline2", "line1\nmodified"),
    ("line1\nline2\nline3", "line1\nmodified\nline3\nline4"),
    ("a\r\nb\r\nc\r\n", "a\nc\nd\n"),
    ("one\n\ntwo\n\nthree", "one\ntwo\n\n\nthree\nfour"),
    ("x\ny\nz", "z\ny\nx"),
]


@pytest.fixture(params=ENGINE_NAMES)
def line_engine(request):
    """Each line engine in turn."""
    return get_line_engine(request.param)


def _align(engine, left, right):
    return build_aligned_rows(engine.diff(normalize_newlines(left), normalize_newlines(right)))


class TestBuildAlignedRows:
    """Tests for build_aligned_rows on hand-built segments."""

    def test_empty_input(self):
        assert build_aligned_rows([]) == []

    def test_unchanged_rows(self):
        rows = build_aligned_rows([Segment.equal("a\nb\n")])
        assert rows == [
            DiffRow('unchanged', 'a', 'a', 1, 1),
            DiffRow('unchanged', 'b', 'b', 2, 2),
        ]

    def test_modified_pairing_by_index(self):
        rows = build_aligned_rows([
            Segment.equal("keep\n"),
            Segment.deleted("old1\nold2\nold3\n"),
            Segment.inserted("new1\n"),
            Segment.equal("tail\n"),
        ])
        assert rows == [
            DiffRow('unchanged', 'keep', 'keep', 1, 1),
            DiffRow('modified', 'old1', 'new1', 2, 2),
            DiffRow('removed', 'old2', None, 3, None),
            DiffRow('removed', 'old3', None, 4, None),
            DiffRow('unchanged', 'tail', 'tail', 5, 3),
        ]

    def test_more_added_than_removed(self):
        rows = build_aligned_rows([
            Segment.deleted("x\n"),
            Segment.inserted("p\nq\n"),
        ])
        assert rows == [
            DiffRow('modified', 'x', 'p', 1, 1),
            DiffRow('added', None, 'q', None, 2),
        ]

    def test_insert_before_delete_in_same_block(self):
        """Test that order within a changed block does not matter."""
        rows = build_aligned_rows([
            Segment.inserted("new\n"),
            Segment.deleted("old\n"),
        ])
        assert rows == [DiffRow('modified', 'old', 'new', 1, 1)]

    def test_interleaved_runs_accumulate(self):
        rows = build_aligned_rows([
            Segment.deleted("a\n"),
            Segment.inserted("b\n"),
            Segment.deleted("c\n"),
            Segment.inserted("d\n"),
        ])
        assert [(r.left_text, r.right_text) for r in rows] == [('a', 'b'), ('c', 'd')]

    def test_equal_texts_may_pair_as_modified(self):
        rows = build_aligned_rows([
            Segment.deleted("same\n"),
            Segment.inserted("same"),
        ])
        assert rows == [DiffRow('modified', 'same', 'same', 1, 1)]

    def test_pairing_ignores_similarity(self):
        """Test that unrelated lines are still paired positionally."""
        rows = build_aligned_rows([
            Segment.deleted("alpha beta\nzzz\n"),
            Segment.inserted("qqq\nalpha beta gamma\n"),
        ])
        assert [(r.kind, r.left_text, r.right_text) for r in rows] == [
            ('modified', 'alpha beta', 'qqq'),
            ('modified', 'zzz', 'alpha beta gamma'),
        ]

    def test_empty_unchanged_segment_still_flushes(self):
        rows = build_aligned_rows([
            Segment.deleted("a\n"),
            Segment.equal(""),
            Segment.inserted("b\n"),
        ])
        assert rows == [
            DiffRow('removed', 'a', None, 1, None),
            DiffRow('added', None, 'b', None, 1),
        ]

    def test_crlf_in_segment_values(self):
        rows = build_aligned_rows([Segment.equal("a\r\nb\r\n")])
        assert [r.left_text for r in rows] == ['a', 'b']


class TestAlignStep:
    """Tests for the fold reducer."""

    def test_removed_segment_only_buffers(self):
        state, rows = align_step(AlignState.initial(), Segment.deleted("a\nb\n"))
        assert rows == []
        assert state.pending_removed == ('a', 'b')
        assert state.pending_added == ()
        assert (state.left_counter, state.right_counter) == (1, 1)

    def test_added_segment_only_buffers(self):
        state, rows = align_step(AlignState.initial(), Segment.inserted("c"))
        assert rows == []
        assert state.pending_added == ('c',)

    def test_unchanged_segment_flushes_then_emits(self):
        state = AlignState(pending_removed=('r',), left_counter=4, right_counter=7)
        state, rows = align_step(state, Segment.equal("u\n"))
        assert rows == [
            DiffRow('removed', 'r', None, 4, None),
            DiffRow('unchanged', 'u', 'u', 5, 7),
        ]
        assert not state.has_pending
        assert (state.left_counter, state.right_counter) == (6, 8)

    def test_step_does_not_mutate_input_state(self):
        start = AlignState.initial()
        align_step(start, Segment.deleted("x\n"))
        assert start == AlignState.initial()

    def test_flush_empty_state(self):
        state, rows = flush(AlignState(left_counter=3, right_counter=2))
        assert rows == []
        assert (state.left_counter, state.right_counter) == (3, 2)


class TestAlignmentProperties:
    """Properties that hold for any conforming line engine."""

    def test_changed_last_line_pairs_as_modified(self, line_engine):
        rows = _align(line_engine, "line1\nline2", "line1\nmodified")
        assert rows == [
            DiffRow('unchanged', 'line1', 'line1', 1, 1),
            DiffRow('modified', 'line2', 'modified', 2, 2),
        ]

    @pytest.mark.parametrize("text", ["", "a", "a\n", "a\nb\n\nc", "x\r\ny\r\n"])
    def test_identical_inputs_are_unchanged(self, line_engine, text):
        rows = _align(line_engine, text, text)
        lines = split_lines_no_trailing_empty(text)
        assert [r.kind for r in rows] == ['unchanged'] * len(lines)
        assert [r.left_line_number for r in rows] == list(range(1, len(lines) + 1))
        assert all(r.left_line_number == r.right_line_number for r in rows)
        assert not has_changes(rows)

    @pytest.mark.parametrize("left, right", SAMPLE_PAIRS)
    def test_sides_reconstruct_inputs(self, line_engine, left, right):
        rows = _align(line_engine, left, right)
        left_lines = [r.left_text for r in rows if r.left_text is not None]
        right_lines = [r.right_text for r in rows if r.right_text is not None]
        assert '\n'.join(left_lines) == '\n'.join(split_lines_no_trailing_empty(normalize_newlines(left)))
        assert '\n'.join(right_lines) == '\n'.join(split_lines_no_trailing_empty(normalize_newlines(right)))

    @pytest.mark.parametrize("left, right", SAMPLE_PAIRS)
    def test_row_invariants(self, line_engine, left, right):
        rows = _align(line_engine, left, right)
        for row in rows:
            if row.kind == 'unchanged':
                assert row.left_text == row.right_text
                assert row.left_line_number and row.right_line_number
            elif row.kind == 'removed':
                assert row.left_text is not None and row.left_line_number
                assert row.right_text is None and row.right_line_number is None
            elif row.kind == 'added':
                assert row.right_text is not None and row.right_line_number
                assert row.left_text is None and row.left_line_number is None
            else:
                assert row.kind == 'modified'
                assert None not in (row.left_text, row.right_text,
                                    row.left_line_number, row.right_line_number)

        left_numbers = [r.left_line_number for r in rows if r.left_line_number]
        right_numbers = [r.right_line_number for r in rows if r.right_line_number]
        assert left_numbers == list(range(1, len(left_numbers) + 1))
        assert right_numbers == list(range(1, len(right_numbers) + 1))

    @pytest.mark.parametrize("left, right", SAMPLE_PAIRS)
    def test_has_changes_matches_rows(self, line_engine, left, right):
        rows = _align(line_engine, left, right)
        assert has_changes(rows) == any(r.kind != 'unchanged' for r in rows)
        assert has_changes(rows) == (normalize_newlines(left) != normalize_newlines(right))
