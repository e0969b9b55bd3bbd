"""
Newline normalization and line splitting shared by the aligner,
the formatter and the diff engines.
"""

from typing import List


def normalize_newlines(text: str) -> str:
    """Replace every CRLF pair with LF. Lone CR characters are kept."""
    return text.replace('\r\n', '\n')


def split_lines_no_trailing_empty(text: str) -> List[str]:
    """
    Split text into lines on LF.

    A trailing line terminator does not produce a final empty line, but
    interior empty lines are preserved:

        'a\\nb\\n' -> ['a', 'b']
        'a\\n\\nb' -> ['a', '', 'b']
        ''        -> []
    """
    lines = normalize_newlines(text).split('\n')
    if lines[-1] == '':
        lines.pop()
    return lines
