#!/usr/bin/env python3
"""
Text Compare Test Suite v1.0.0
==============================
Validates API endpoints, error handling and configuration.

Run with: python -m pytest tests.py -v
Or standalone: python tests.py
"""

import os
import sys
import json
import unittest
from pathlib import Path
from unittest.mock import patch
from io import BytesIO

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from app import app
from config_logging import (
    AppConfig, VERSION, ValidationError, FileError, ProcessingError,
    TextCompareError, get_config, reset_config, sanitize_filename
)
from text_compare.routes import reset_differ


class FlaskTestCase(unittest.TestCase):
    """Base class with a test client."""

    def setUp(self):
        """Set up test client."""
        app.config['TESTING'] = True
        reset_differ()
        self.client = app.test_client()
        self.ctx = app.app_context()
        self.ctx.push()

    def tearDown(self):
        """Clean up."""
        self.ctx.pop()
        reset_differ()

    def post_json(self, path, payload):
        return self.client.post(path, data=json.dumps(payload), content_type='application/json')


class TestAPIEndpoints(FlaskTestCase):
    """Test API endpoint functionality."""

    def test_health_endpoint(self):
        """
        Test health endpoint returns healthy status.

        Expects: 200 response with status='healthy', version, and timestamp.
        """
        response = self.client.get('/api/health')
        self.assertEqual(response.status_code, 200)
        data = json.loads(response.data)
        self.assertEqual(data['status'], 'healthy')
        self.assertEqual(data['version'], VERSION)
        self.assertIn('timestamp', data)

    def test_version_endpoint(self):
        """Test version endpoint returns app and module versions."""
        response = self.client.get('/api/version')
        self.assertEqual(response.status_code, 200)
        data = json.loads(response.data)
        self.assertEqual(data['app_version'], VERSION)
        self.assertIn('text_compare_version', data)

    def test_compare_health_endpoint(self):
        """Test module health reports engines and cache state."""
        response = self.client.get('/api/compare/health')
        self.assertEqual(response.status_code, 200)
        data = json.loads(response.data)
        self.assertTrue(data['success'])
        self.assertIn(data['engines']['line'], ('dmp', 'difflib'))
        self.assertIn('enabled', data['cache'])

    def test_diff_highlight(self):
        """
        Test diff endpoint in highlight format.

        Expects: rows with line numbers, has_changes, and one HTML line per row per side.
        """
        response = self.post_json('/api/compare/diff', {
            'left': 'line1\nline2', 'right': 'line1\nmodified'
        })
        self.assertEqual(response.status_code, 200)
        diff = json.loads(response.data)['diff']
        self.assertTrue(diff['has_changes'])
        self.assertEqual(diff['mode'], 'line')
        self.assertEqual(diff['format'], 'highlight')
        self.assertEqual(diff['rows'][1], {
            'kind': 'modified',
            'left_text': 'line2',
            'right_text': 'modified',
            'left_line_number': 2,
            'right_line_number': 2,
            'is_change': True
        })
        self.assertEqual(len(diff['highlight']['left']), 2)
        self.assertIn('chunk removed', diff['highlight']['left'][1])
        self.assertIn('chunk added', diff['highlight']['right'][1])

    def test_diff_plain_word_mode(self):
        """Test diff endpoint with word mode and plain format."""
        response = self.post_json('/api/compare/diff', {
            'left': 'line1\nline2', 'right': 'line1\nline3',
            'mode': 'word', 'format': 'plain'
        })
        self.assertEqual(response.status_code, 200)
        diff = json.loads(response.data)['diff']
        self.assertEqual(diff['plain'], {
            'left': ['  line1', '- line2'],
            'right': ['  line1', '+ line3']
        })
        self.assertEqual(diff['plain_text'], '  line1\n- line2\n+ line3')

    def test_diff_empty_body(self):
        """Test that a missing body compares two empty texts."""
        response = self.client.post('/api/compare/diff')
        self.assertEqual(response.status_code, 200)
        diff = json.loads(response.data)['diff']
        self.assertEqual(diff['rows'], [])
        self.assertFalse(diff['has_changes'])
        self.assertEqual(diff['plain_text'], 'No differences')

    def test_export_endpoint(self):
        """
        Test export returns a text/plain attachment.

        Expects: text-diff.txt filename and the aggregate plain form as body.
        """
        response = self.post_json('/api/compare/export', {
            'left': 'line1\nline2', 'right': 'line1\nline3'
        })
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.mimetype.startswith('text/plain'))
        self.assertIn('text-diff.txt', response.headers['Content-Disposition'])
        self.assertEqual(response.get_data(as_text=True), '  line1\n- line2\n+ line3')

    def test_upload_endpoint(self):
        """Test uploading a UTF-8 file returns its text."""
        response = self.client.post(
            '/api/compare/upload',
            data={'file': (BytesIO('naïve\n'.encode('utf-8')), 'draft.txt')},
            content_type='multipart/form-data'
        )
        self.assertEqual(response.status_code, 200)
        data = json.loads(response.data)
        self.assertTrue(data['success'])
        self.assertEqual(data['text'], 'naïve\n')
        self.assertEqual(data['filename'], 'draft.txt')

    def test_upload_invalid_utf8(self):
        """
        Test that undecodable uploads become a status message.

        Expects: 400 with FILE_ERROR and a 'Failed to read file' message.
        """
        response = self.client.post(
            '/api/compare/upload',
            data={'file': (BytesIO(b'\xff\xfe\x00bad'), 'blob.bin')},
            content_type='multipart/form-data'
        )
        self.assertEqual(response.status_code, 400)
        data = json.loads(response.data)
        self.assertFalse(data['success'])
        self.assertEqual(data['error']['code'], 'FILE_ERROR')
        self.assertTrue(data['error']['message'].startswith('Failed to read file'))

    def test_upload_without_file(self):
        """Test upload without a file part is a validation error."""
        response = self.client.post('/api/compare/upload', data={},
                                    content_type='multipart/form-data')
        self.assertEqual(response.status_code, 400)
        data = json.loads(response.data)
        self.assertEqual(data['error']['code'], 'VALIDATION_ERROR')

    def test_repeat_request_uses_cache(self):
        """Test that an identical request reuses the cached result."""
        payload = {'left': 'a\nb', 'right': 'a\nc'}
        self.post_json('/api/compare/diff', payload)
        with patch('text_compare.differ.TextDiffer._compute') as compute:
            response = self.post_json('/api/compare/diff', payload)
        self.assertEqual(response.status_code, 200)
        compute.assert_not_called()


class TestErrorHandling(FlaskTestCase):
    """Test error handling and responses."""

    def test_oversize_requests_return_413(self):
        """
        Test bodies over MAX_CONTENT_LENGTH are rejected as JSON 413s.

        Expects: 413 with REQUEST_ENTITY_TOO_LARGE for both /diff and /upload.
        """
        original = app.config['MAX_CONTENT_LENGTH']
        app.config['MAX_CONTENT_LENGTH'] = 100
        try:
            diff_response = self.post_json('/api/compare/diff', {'left': 'x' * 500, 'right': ''})
            upload_response = self.client.post(
                '/api/compare/upload',
                data={'file': (BytesIO(b'y' * 500), 'big.txt')},
                content_type='multipart/form-data'
            )
        finally:
            app.config['MAX_CONTENT_LENGTH'] = original

        for response in (diff_response, upload_response):
            self.assertEqual(response.status_code, 413)
            data = json.loads(response.data)
            self.assertFalse(data['success'])
            self.assertIn(data['error']['code'], ('REQUEST_ENTITY_TOO_LARGE', 'CONTENT_TOO_LARGE'))

    def test_404_returns_json(self):
        """
        Test 404 errors return JSON response.

        Expects: 404 status with success=False and error message.
        """
        response = self.client.get('/api/nonexistent')
        self.assertEqual(response.status_code, 404)
        data = json.loads(response.data)
        self.assertFalse(data['success'])
        self.assertEqual(data['error']['code'], 'NOT_FOUND')

    def test_invalid_mode(self):
        """Test unknown diff mode is rejected."""
        response = self.post_json('/api/compare/diff', {'left': 'a', 'right': 'b', 'mode': 'char'})
        self.assertEqual(response.status_code, 400)
        data = json.loads(response.data)
        self.assertEqual(data['error']['code'], 'VALIDATION_ERROR')
        self.assertIn('correlation_id', data['error'])

    def test_invalid_format(self):
        """Test unknown display format is rejected."""
        response = self.post_json('/api/compare/diff', {'left': 'a', 'right': 'b', 'format': 'pdf'})
        self.assertEqual(response.status_code, 400)

    def test_non_string_text(self):
        """Test that non-string inputs are rejected."""
        response = self.post_json('/api/compare/diff', {'left': ['a'], 'right': 'b'})
        self.assertEqual(response.status_code, 400)

    def test_invalid_json(self):
        """Test malformed JSON returns INVALID_JSON."""
        response = self.client.post('/api/compare/diff', data='{not json',
                                    content_type='application/json')
        self.assertEqual(response.status_code, 400)
        data = json.loads(response.data)
        self.assertEqual(data['error']['code'], 'INVALID_JSON')

    def test_security_headers_present(self):
        """Test that security and correlation headers are added to responses."""
        response = self.client.get('/api/health', headers={'X-Correlation-ID': 'abc123'})
        self.assertEqual(response.headers.get('X-Content-Type-Options'), 'nosniff')
        self.assertEqual(response.headers.get('X-Frame-Options'), 'DENY')
        self.assertEqual(response.headers.get('X-Correlation-ID'), 'abc123')

    def test_validation_error_structure(self):
        """
        Test ValidationError has correct structure.

        Expects: status_code=400, code=VALIDATION_ERROR, proper to_dict().
        """
        err = ValidationError("Test error", field="test_field")
        self.assertEqual(err.status_code, 400)
        self.assertEqual(err.code, "VALIDATION_ERROR")

        error_dict = err.to_dict()
        self.assertFalse(error_dict['success'])
        self.assertEqual(error_dict['error']['code'], 'VALIDATION_ERROR')
        self.assertEqual(error_dict['error']['details']['field'], 'test_field')

    def test_error_hierarchy(self):
        """Test custom errors share the TextCompareError base."""
        for err in (FileError("x"), ProcessingError("y")):
            self.assertIsInstance(err, TextCompareError)
        self.assertEqual(FileError("x").status_code, 400)
        self.assertEqual(ProcessingError("y").status_code, 500)


class TestConfigDefaults(unittest.TestCase):
    """Test configuration defaults and environment loading."""

    def tearDown(self):
        reset_config()

    def test_defaults_valid(self):
        """Test the default configuration validates."""
        is_valid, errors = AppConfig().validate()
        self.assertTrue(is_valid, errors)

    def test_from_env(self):
        """Test TCMP_* environment variables are honoured."""
        env = {
            'TCMP_PORT': '6000',
            'TCMP_LINE_ENGINE': 'DIFFLIB',
            'TCMP_WORD_ENGINE': 'difflib',
            'TCMP_CACHE': 'false',
            'TCMP_DMP_TIMEOUT': '0.5',
            'TCMP_LOG_FORMAT': 'text',
        }
        with patch.dict(os.environ, env):
            cfg = AppConfig.from_env()
        self.assertEqual(cfg.port, 6000)
        self.assertEqual(cfg.line_engine, 'difflib')
        self.assertEqual(cfg.word_engine, 'difflib')
        self.assertFalse(cfg.cache_enabled)
        self.assertEqual(cfg.dmp_timeout, 0.5)
        self.assertEqual(cfg.log_format, 'text')

    def test_invalid_engine_reported(self):
        """Test validate() flags unknown engines."""
        is_valid, errors = AppConfig(line_engine='myers').validate()
        self.assertFalse(is_valid)
        self.assertTrue(any('line_engine' in e for e in errors))

    def test_get_config_is_cached(self):
        """Test get_config returns the same instance until reset."""
        reset_config()
        self.assertIs(get_config(), get_config())

    def test_sanitize_filename(self):
        """Test path separators and leading dots are removed."""
        self.assertEqual(sanitize_filename('../secret.txt'), 'secret.txt')
        self.assertEqual(sanitize_filename(''), 'unnamed')


if __name__ == '__main__':
    unittest.main(verbosity=2)
