#!/usr/bin/env python3
"""
Text Compare Configuration & Logging Module
===========================================
Centralized configuration, structured logging, and error types.

Version: reads from version.json (module v1.0)
"""

import os
import sys
import json
import logging
import uuid
import time
import functools
from datetime import datetime, timezone
from typing import Optional, Dict, Any, Callable
from pathlib import Path
from dataclasses import dataclass, field
from contextlib import contextmanager
import threading

# =============================================================================
# CONFIGURATION CONSTANTS
# =============================================================================
DEFAULT_MAX_UPLOAD_MB = 10          # Default max upload size in megabytes
MAX_SAFE_UPLOAD_MB = 100            # Maximum safe upload limit in megabytes
DEFAULT_DMP_TIMEOUT = 2.0           # Seconds diff-match-patch may spend per diff
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024  # 5MB max per log file
LOG_BACKUP_COUNT = 5                # Number of log backup files to keep

DEFAULT_MAX_UPLOAD_BYTES = DEFAULT_MAX_UPLOAD_MB * 1024 * 1024
MAX_SAFE_UPLOAD_BYTES = MAX_SAFE_UPLOAD_MB * 1024 * 1024

KNOWN_ENGINES = ('dmp', 'difflib')

# =============================================================================
# VERSION - Read from version.json (Single Source of Truth)
# =============================================================================
def _load_version():
    """Load version from version.json file."""
    version_file = Path(__file__).parent / 'version.json'
    try:
        with open(version_file, 'r', encoding='utf-8') as f:
            return json.load(f).get('version', '1.0.0')
    except (OSError, ValueError):
        return '1.0.0'

__version__ = _load_version()
VERSION = __version__
APP_NAME = "TextCompare"


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() == 'true'


# =============================================================================
# ENVIRONMENT CONFIGURATION
# =============================================================================

@dataclass
class AppConfig:
    """Application configuration with secure defaults."""

    # Server settings
    host: str = "127.0.0.1"  # Localhost only by default
    port: int = 5060
    debug: bool = False

    # Uploads
    max_content_length: int = DEFAULT_MAX_UPLOAD_BYTES

    # Diff engines
    line_engine: str = "dmp"
    word_engine: str = "dmp"
    dmp_timeout: float = DEFAULT_DMP_TIMEOUT
    cache_enabled: bool = True

    # Paths
    base_dir: Path = field(default_factory=lambda: Path(__file__).parent)
    log_dir: Path = field(default_factory=lambda: Path(__file__).parent / 'logs')

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"  # Options: json, text
    log_to_file: bool = False
    log_to_console: bool = True

    def __post_init__(self):
        """Normalize configuration values."""
        self.line_engine = self.line_engine.lower()
        self.word_engine = self.word_engine.lower()

        if self.log_to_file:
            self.log_dir.mkdir(exist_ok=True)

        # Force debug=False in production environment
        if os.environ.get('TCMP_ENV', 'development').lower() == 'production':
            self.debug = False
            self.log_level = "WARNING"

    @classmethod
    def from_env(cls) -> 'AppConfig':
        """Load configuration from environment variables."""
        return cls(
            host=os.environ.get('TCMP_HOST', '127.0.0.1'),
            port=int(os.environ.get('TCMP_PORT', '5060')),
            debug=_env_flag('TCMP_DEBUG', 'false'),
            max_content_length=int(os.environ.get('TCMP_MAX_UPLOAD', str(DEFAULT_MAX_UPLOAD_BYTES))),
            line_engine=os.environ.get('TCMP_LINE_ENGINE', 'dmp'),
            word_engine=os.environ.get('TCMP_WORD_ENGINE', 'dmp'),
            dmp_timeout=float(os.environ.get('TCMP_DMP_TIMEOUT', str(DEFAULT_DMP_TIMEOUT))),
            cache_enabled=_env_flag('TCMP_CACHE', 'true'),
            log_level=os.environ.get('TCMP_LOG_LEVEL', 'INFO'),
            log_format=os.environ.get('TCMP_LOG_FORMAT', 'json'),
            log_to_file=_env_flag('TCMP_LOG_TO_FILE', 'false'),
        )

    def validate(self) -> tuple:
        """Validate configuration and return (is_valid, errors)."""
        errors = []

        if self.debug and os.environ.get('TCMP_ENV') == 'production':
            errors.append("Debug mode cannot be enabled in production")

        if self.max_content_length > MAX_SAFE_UPLOAD_BYTES:
            errors.append(f"Max content length exceeds safe limit ({MAX_SAFE_UPLOAD_MB}MB)")

        if self.line_engine not in KNOWN_ENGINES:
            errors.append(f"Invalid line_engine: {self.line_engine}. Must be one of {', '.join(KNOWN_ENGINES)}")

        if self.word_engine not in KNOWN_ENGINES:
            errors.append(f"Invalid word_engine: {self.word_engine}. Must be one of {', '.join(KNOWN_ENGINES)}")

        if self.dmp_timeout < 0:
            errors.append("dmp_timeout must be zero (unlimited) or positive")

        if self.log_format not in ('json', 'text'):
            errors.append(f"Invalid log_format: {self.log_format}")

        return (len(errors) == 0, errors)


# Global config instance
_config: Optional[AppConfig] = None

def get_config() -> AppConfig:
    """Get or create the global configuration."""
    global _config
    if _config is None:
        _config = AppConfig.from_env()
    return _config


def reset_config():
    """Reset the global configuration (for testing)."""
    global _config
    _config = None


# =============================================================================
# STRUCTURED LOGGING
# =============================================================================

class StructuredLogger:
    """Thread-safe structured logger with correlation IDs."""

    _local = threading.local()

    def __init__(self, name: str, config: Optional[AppConfig] = None):
        self.name = name
        self.config = config or get_config()
        self._setup_logger()

    def _setup_logger(self):
        """Configure the underlying Python logger."""
        self.logger = logging.getLogger(self.name)
        self.logger.setLevel(getattr(logging, self.config.log_level.upper(), logging.INFO))
        self.logger.handlers.clear()
        self.logger.propagate = False

        if self.config.log_format == 'json':
            formatter = JsonFormatter()
        else:
            formatter = logging.Formatter(
                '%(asctime)s [%(levelname)s] %(name)s - %(message)s'
            )

        if self.config.log_to_console:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setFormatter(formatter)
            self.logger.addHandler(console_handler)

        # Rotating file handler keeps the log directory bounded
        if self.config.log_to_file:
            from logging.handlers import RotatingFileHandler
            log_file = self.config.log_dir / f"{self.name.lower()}.log"
            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_BACKUP_COUNT,
                encoding='utf-8'
            )
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

    @classmethod
    def set_correlation_id(cls, correlation_id: str):
        """Set correlation ID for current thread."""
        cls._local.correlation_id = correlation_id

    @classmethod
    def get_correlation_id(cls) -> str:
        """Get correlation ID for current thread."""
        correlation_id = getattr(cls._local, 'correlation_id', None)
        if correlation_id is None:
            correlation_id = cls.new_correlation_id()
        return correlation_id

    @classmethod
    def new_correlation_id(cls) -> str:
        """Generate and set a new correlation ID."""
        correlation_id = str(uuid.uuid4())[:12]
        cls.set_correlation_id(correlation_id)
        return correlation_id

    def _log(self, level: int, message: str, exc_info: bool = False, **kwargs):
        extra = {'correlation_id': self.get_correlation_id(), **kwargs}
        self.logger.log(level, message, exc_info=exc_info, extra=extra)

    def debug(self, message: str, **kwargs):
        """Log debug message."""
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs):
        """Log info message."""
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message."""
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, exc_info: bool = False, **kwargs):
        """Log error message with optional exception info."""
        self._log(logging.ERROR, message, exc_info=exc_info, **kwargs)

    def exception(self, message: str, **kwargs):
        """Log exception with full traceback."""
        self.error(message, exc_info=True, **kwargs)

    def critical(self, message: str, **kwargs):
        """Log critical message."""
        self._log(logging.CRITICAL, message, **kwargs)

    @contextmanager
    def log_operation(self, operation: str, **context):
        """Context manager for logging operation start/end with timing."""
        start_time = time.time()
        self.debug(f"{operation} started", operation=operation, status='started', **context)
        try:
            yield
            duration_ms = (time.time() - start_time) * 1000
            self.debug(f"{operation} completed", operation=operation, status='completed',
                       duration_ms=round(duration_ms, 2), **context)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            self.error(f"{operation} failed: {e}", operation=operation, status='failed',
                       duration_ms=round(duration_ms, 2), exc_info=True, **context)
            raise


# LogRecord attributes that are not user-supplied extra fields
_RESERVED_RECORD_KEYS = frozenset((
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'pathname', 'process', 'processName', 'relativeCreated',
    'stack_info', 'thread', 'threadName', 'exc_info', 'exc_text',
    'message', 'taskName',
))


class JsonFormatter(logging.Formatter):
    """JSON log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        if record.exc_info:
            log_data['traceback'] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_KEYS:
                log_data[key] = value

        return json.dumps(log_data, default=str)


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger instance."""
    return StructuredLogger(name, get_config())


# =============================================================================
# ERROR HANDLING UTILITIES
# =============================================================================

class TextCompareError(Exception):
    """Base exception for Text Compare."""

    def __init__(self, message: str, code: str = "UNKNOWN_ERROR",
                 status_code: int = 500, details: Optional[Dict] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to API response dict."""
        return {
            'success': False,
            'error': {
                'code': self.code,
                'message': self.message,
                'details': self.details
            }
        }


class ValidationError(TextCompareError):
    """Input validation error."""
    def __init__(self, message: str, field: Optional[str] = None, **kwargs):
        super().__init__(message, code="VALIDATION_ERROR", status_code=400,
                         details={'field': field, **kwargs})


class FileError(TextCompareError):
    """File handling error."""
    def __init__(self, message: str, filename: Optional[str] = None, **kwargs):
        super().__init__(message, code="FILE_ERROR", status_code=400,
                         details={'filename': filename, **kwargs})


class ProcessingError(TextCompareError):
    """Diff processing error."""
    def __init__(self, message: str, stage: Optional[str] = None, **kwargs):
        super().__init__(message, code="PROCESSING_ERROR", status_code=500,
                         details={'stage': stage, **kwargs})


def handle_errors(logger: Optional[StructuredLogger] = None):
    """Decorator translating stray exceptions into TextCompareError types."""
    def decorator(func: Callable):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            _logger = logger or get_logger(func.__module__)
            try:
                return func(*args, **kwargs)
            except TextCompareError:
                raise
            except FileNotFoundError as e:
                _logger.error(f"File not found: {e}", exc_info=True)
                raise FileError(f"File not found: {e}") from e
            except PermissionError as e:
                _logger.error(f"Permission denied: {e}", exc_info=True)
                raise FileError(f"Permission denied: {e}") from e
            except ValueError as e:
                _logger.error(f"Validation error: {e}", exc_info=True)
                raise ValidationError(str(e)) from e
            except Exception as e:
                _logger.exception(f"Unexpected error in {func.__name__}: {e}")
                raise ProcessingError(f"An unexpected error occurred: {type(e).__name__}") from e
        return wrapper
    return decorator


# =============================================================================
# FILENAME UTILITIES
# =============================================================================

def sanitize_filename(filename: str) -> str:
    """Sanitize a filename to prevent path traversal attacks."""
    import re
    # Remove path separators and null bytes
    filename = filename.replace('/', '').replace('\\', '').replace('\x00', '')
    # Remove leading dots (hidden files)
    filename = filename.lstrip('.')
    # Keep only safe characters
    filename = re.sub(r'[^\w\-_\. ]', '_', filename)
    if len(filename) > 255:
        name, ext = os.path.splitext(filename)
        filename = name[:255-len(ext)] + ext
    return filename or 'unnamed'
