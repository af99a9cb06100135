"""
Reading note versions from disk.

Note exports come from different editors and platforms, so the
encoding is detected from the raw bytes rather than assumed.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

import chardet


logger = logging.getLogger(__name__)

DEFAULT_ENCODING = 'utf-8'
MIN_CONFIDENCE = 0.7


def detect_encoding(content: bytes, default: str = DEFAULT_ENCODING) -> str:
    """Detect encoding of content."""
    if not content:
        return default

    result = chardet.detect(content)

    if result['confidence'] > MIN_CONFIDENCE and result['encoding']:
        encoding = result['encoding'].lower()
        if encoding == 'ascii':
            return 'utf-8'  # ASCII is subset of UTF-8
        return encoding

    return default


def read_note(path: Union[Path, str], encoding: Optional[str] = None) -> str:
    """
    Read a note version as text.

    Args:
        path: Path to the file
        encoding: Force specific encoding (auto-detect if None)

    Returns:
        Decoded content; undecodable bytes are replaced

    Raises:
        OSError: If the file cannot be read
    """
    path = Path(path)
    raw = path.read_bytes()

    encoding = encoding or detect_encoding(raw)
    logger.debug(f"FileIO - Reading {path} ({len(raw)} bytes) as {encoding}")

    try:
        return raw.decode(encoding, errors='replace')
    except LookupError:
        logger.warning(f"FileIO - Unknown encoding {encoding!r} for {path}, using {DEFAULT_ENCODING}")
        return raw.decode(DEFAULT_ENCODING, errors='replace')
