"""
Text Comparison Flask Routes
============================
API endpoints for text comparison functionality.

v1.0.0: Diff, export, upload and health endpoints
"""

import json
import time
import threading
from functools import wraps
from typing import Optional
from flask import Blueprint, Response, request, jsonify, g
from werkzeug.exceptions import HTTPException

from config_logging import get_logger, ValidationError, ProcessingError, TextCompareError

from .differ import TextDiffer
from .io_utils import read_text_file, build_export
from .models import MODE_LINE, FORMAT_HIGHLIGHT

logger = get_logger('text_compare')

# Create blueprint
tc_blueprint = Blueprint('text_compare', __name__)

_differ: Optional[TextDiffer] = None
_differ_lock = threading.Lock()


def get_differ() -> TextDiffer:
    """Get or create the shared differ (holds the size-one result cache)."""
    global _differ
    with _differ_lock:
        if _differ is None:
            _differ = TextDiffer()
        return _differ


def reset_differ():
    """Reset the shared differ (for testing)."""
    global _differ
    with _differ_lock:
        _differ = None


# =============================================================================
# STANDARDIZED ERROR HANDLING DECORATOR
# =============================================================================

def _error_response(code: str, message: str, status: int):
    return jsonify({
        'success': False,
        'error': {
            'code': code,
            'message': message,
            'correlation_id': getattr(g, 'correlation_id', 'unknown')
        }
    }), status


def handle_tc_errors(f):
    """
    Decorator for standardized API error handling in Text Compare routes.
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        start_time = time.time()
        try:
            result = f(*args, **kwargs)

            elapsed = time.time() - start_time
            if elapsed > 5.0:
                logger.warning(f"Slow TC API call: {f.__name__} took {elapsed:.1f}s")

            return result

        except ValidationError as e:
            logger.warning(f"Validation error in {f.__name__}: {e}")
            return _error_response(e.code, e.message, e.status_code)
        except ProcessingError as e:
            logger.error(f"Processing error in {f.__name__}: {e}")
            return _error_response(e.code, e.message, e.status_code)
        except TextCompareError as e:
            logger.warning(f"{e.code} in {f.__name__}: {e}")
            return _error_response(e.code, e.message, e.status_code)
        except json.JSONDecodeError as e:
            logger.warning(f"Invalid JSON in {f.__name__}: {e}")
            return _error_response('INVALID_JSON', f'Invalid JSON format: {e}', 400)
        except HTTPException:
            # 413 and friends are answered by the app-level handler
            raise
        except Exception as e:
            logger.exception(f"Unexpected error in {f.__name__}: {e}")
            return _error_response('INTERNAL_ERROR', 'An unexpected error occurred', 500)

    return decorated


def _read_diff_request():
    """Pull (left, right, mode, format) out of a JSON body."""
    data = request.get_json(silent=True)
    if data is None:
        raw = request.get_data(as_text=True)
        if raw.strip():
            # Surface the parser error instead of treating the body as empty
            json.loads(raw)
        data = {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")

    left = data.get('left', '')
    right = data.get('right', '')
    if not isinstance(left, str) or not isinstance(right, str):
        raise ValidationError("'left' and 'right' must be strings", field='left/right')

    mode = data.get('mode') or MODE_LINE
    display_format = data.get('format') or FORMAT_HIGHLIGHT
    return left, right, mode, display_format


# =============================================================================
# API ENDPOINTS
# =============================================================================

@tc_blueprint.route('/diff', methods=['POST'])
@handle_tc_errors
def compute_diff():
    """
    Compare two texts and return aligned rows with highlighting.

    Request body:
        { left: str, right: str, mode?: 'line'|'word', format?: 'highlight'|'plain' }

    Returns:
        {
            success: true,
            diff: {
                mode, format, rows: [...], segments: [...],
                has_changes, plain_text, stats,
                highlight: { left: [...], right: [...] }   (format=highlight)
                plain: { left: [...], right: [...] }       (format=plain)
            }
        }
    """
    left, right, mode, display_format = _read_diff_request()

    differ = get_differ()
    result = differ.compare(left, right, mode)
    payload = differ.render(result, display_format)

    return jsonify({
        'success': True,
        'diff': payload
    })


@tc_blueprint.route('/export', methods=['POST'])
@handle_tc_errors
def export_diff():
    """
    Download the aggregate plain form as a .txt attachment.

    Request body:
        { left: str, right: str }
    """
    left, right, mode, _ = _read_diff_request()
    result = get_differ().compare(left, right, mode)
    body, filename, mimetype = build_export(result)

    logger.info(f"Exported diff ({len(result.plain_lines)} lines)")

    response = Response(body, mimetype=mimetype)
    response.headers['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response


@tc_blueprint.route('/upload', methods=['POST'])
@handle_tc_errors
def upload_text():
    """
    Read an uploaded file as UTF-8 text.

    Returns:
        { success: true, text, filename } or
        { success: false, filename, error: { code: 'FILE_ERROR', message } }
    """
    if 'file' not in request.files:
        raise ValidationError("No file part in request", field='file')

    upload = request.files['file']
    if not upload.filename:
        raise ValidationError("No file selected", field='file')

    loaded = read_text_file(upload.stream, upload.filename)
    return jsonify(loaded.to_dict()), (200 if loaded.ok else 400)


@tc_blueprint.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint with engine diagnostics."""
    differ = get_differ()
    return jsonify({
        'success': True,
        'module': 'text_compare',
        'version': '1.0.0',
        'status': 'healthy',
        'engines': {
            'line': differ.line_engine.name,
            'word': differ.word_engine.name
        },
        'cache': differ.cache_info
    })
