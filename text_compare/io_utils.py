"""
File ingestion and export helpers.

Read failures never propagate into the diff: they come back as a
status message on the LoadedText result.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union, BinaryIO

from config_logging import get_logger, sanitize_filename
from .models import DiffResult

logger = get_logger('text_compare.io')

EXPORT_FILENAME = 'text-diff.txt'
EXPORT_MIMETYPE = 'text/plain'


@dataclass(frozen=True)
class LoadedText:
    """Outcome of reading one user-selected file."""
    text: str = ''
    filename: str = ''
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self):
        if self.ok:
            return {'success': True, 'text': self.text, 'filename': self.filename}
        return {
            'success': False,
            'filename': self.filename,
            'error': {'code': 'FILE_ERROR', 'message': self.error}
        }


def read_text_file(source: Union[bytes, BinaryIO], filename: str = '') -> LoadedText:
    """
    Decode an uploaded file as UTF-8 text (a leading BOM is dropped).

    Args:
        source: Raw bytes or a binary stream
        filename: Name reported by the client

    Returns:
        LoadedText with the text, or with an error message on failure
    """
    name = sanitize_filename(filename) if filename else ''
    try:
        data = source if isinstance(source, bytes) else source.read()
        text = data.decode('utf-8-sig')
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Failed to read uploaded file: {e}", upload_name=name)
        return LoadedText(filename=name, error=f"Failed to read file: {e}")

    logger.debug(f"Loaded {len(text)} chars", upload_name=name)
    return LoadedText(text=text, filename=name)


def build_export(result: DiffResult) -> Tuple[str, str, str]:
    """Export body, download filename and MIME type for a result."""
    return result.plain_text, EXPORT_FILENAME, EXPORT_MIMETYPE
