"""
Tests for File Ingestion and Export
===================================
"""

from io import BytesIO

from text_compare.differ import compute_diff
from text_compare.io_utils import LoadedText, read_text_file, build_export


class BrokenStream:
    """Binary stream whose read always fails."""

    def read(self):
        raise OSError("device not ready")


class TestReadTextFile:
    """Tests for read_text_file."""

    def test_bytes(self):
        loaded = read_text_file("héllo\nworld".encode('utf-8'), 'notes.txt')
        assert loaded == LoadedText(text="héllo\nworld", filename='notes.txt')
        assert loaded.ok

    def test_stream(self):
        loaded = read_text_file(BytesIO(b"abc"), 'a.txt')
        assert loaded.text == "abc"

    def test_bom_dropped(self):
        loaded = read_text_file(b"\xef\xbb\xbfabc", 'bom.txt')
        assert loaded.text == "abc"

    def test_invalid_utf8_is_reported(self):
        loaded = read_text_file(b"\xff\xfeabc", 'binary.bin')
        assert not loaded.ok
        assert loaded.text == ''
        assert loaded.error.startswith("Failed to read file: ")

    def test_read_error_is_reported(self):
        loaded = read_text_file(BrokenStream(), 'x.txt')
        assert loaded.error == "Failed to read file: device not ready"

    def test_filename_sanitized(self):
        loaded = read_text_file(b"x", '../../etc/passwd')
        assert '/' not in loaded.filename

    def test_to_dict(self):
        assert read_text_file(b"x", 'a.txt').to_dict() == {
            'success': True, 'text': 'x', 'filename': 'a.txt'
        }
        failed = read_text_file(b"\xff", 'a.txt').to_dict()
        assert failed['success'] is False
        assert failed['error']['code'] == 'FILE_ERROR'


class TestBuildExport:
    """Tests for build_export."""

    def test_export(self):
        body, filename, mimetype = build_export(compute_diff("line1\nline2", "line1\nline3"))
        assert body == "  line1\n- line2\n+ line3"
        assert filename == 'text-diff.txt'
        assert mimetype == 'text/plain'

    def test_export_without_differences(self):
        body, _, _ = build_export(compute_diff("", ""))
        assert body == "No differences"
