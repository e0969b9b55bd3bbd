"""
Text Compare - Main Flask Application
Paste or upload two texts and get a side-by-side diff
"""
from datetime import datetime, timezone
from flask import Flask, request, jsonify, g
from werkzeug.exceptions import HTTPException

from config_logging import (
    get_config, get_logger, StructuredLogger, VERSION, APP_NAME
)
from text_compare import tc_blueprint, __version__ as TC_VERSION

config = get_config()
logger = get_logger('app')

app = Flask(__name__)
app.config['MAX_CONTENT_LENGTH'] = config.max_content_length

app.register_blueprint(tc_blueprint, url_prefix='/api/compare')


@app.before_request
def assign_correlation_id():
    """Tag every request with a correlation id for log lines and error bodies."""
    g.correlation_id = request.headers.get('X-Correlation-ID') or StructuredLogger.new_correlation_id()
    StructuredLogger.set_correlation_id(g.correlation_id)


@app.after_request
def add_security_headers(response):
    """Add security headers and echo the correlation id."""
    response.headers['X-Content-Type-Options'] = 'nosniff'
    response.headers['X-Frame-Options'] = 'DENY'
    response.headers['Referrer-Policy'] = 'no-referrer'
    response.headers['X-Correlation-ID'] = getattr(g, 'correlation_id', '')
    return response


@app.errorhandler(HTTPException)
def handle_http_error(error):
    """Return JSON for 404, 405, 413 and friends."""
    code = (error.name or 'HTTP_ERROR').upper().replace(' ', '_')
    if error.code >= 500:
        logger.error(f"HTTP {error.code} on {request.path}")
    return jsonify({
        'success': False,
        'error': {
            'code': code,
            'message': error.description,
            'correlation_id': getattr(g, 'correlation_id', 'unknown')
        }
    }), error.code


@app.route('/api/health', methods=['GET'])
def health():
    """Service health"""
    return jsonify({
        'status': 'healthy',
        'version': VERSION,
        'timestamp': datetime.now(timezone.utc).isoformat()
    })


@app.route('/api/version', methods=['GET'])
def version():
    """Application and module versions"""
    return jsonify({
        'app_name': APP_NAME,
        'app_version': VERSION,
        'text_compare_version': TC_VERSION
    })


if __name__ == '__main__':
    _, errors = config.validate()
    for message in errors:
        logger.warning(f"Config problem: {message}")
    print("=" * 60)
    print(f"  {APP_NAME} {VERSION}")
    print(f"  Starting server at http://{config.host}:{config.port}")
    print("=" * 60)
    app.run(host=config.host, port=config.port, debug=config.debug)
