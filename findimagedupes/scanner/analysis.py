"""
Image analysis module for the scanner package.

Provides single-image analysis: decode, collect metadata and compute the
fingerprint, turning decode failures into a SourceRecord error.
"""

from __future__ import annotations

import os
from pathlib import Path

from ..models import SourceRecord
from .dependencies import _logger
from .fingerprint import DecodeError, decode_image, fingerprint_image


def analyze_image(filepath: str | Path) -> SourceRecord:
    """
    Fingerprint an image file and extract metadata.

    Only decode failures are recorded on the returned record. Pipeline
    contract failures (ColorModelError) propagate to the caller.

    Args:
        filepath: Path to the image file

    Returns:
        SourceRecord with the fingerprint, or with error set if the file
        could not be decoded
    """
    filepath = str(filepath)
    record = SourceRecord(path=filepath)

    try:
        record.file_size = os.path.getsize(filepath)
        image = decode_image(filepath)
    except OSError as e:
        record.error = f"File not readable: {e}"
        return record
    except DecodeError as e:
        record.error = e.reason
        return record

    record.width = image.width
    record.height = image.height
    record.format = image.format or ""
    record.fingerprint = fingerprint_image(image)

    _logger.debug(f"Fingerprinted {filepath}: {record.fingerprint}")
    return record


__all__ = ['analyze_image']
