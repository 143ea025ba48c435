"""
Dependency initialization for the scanner package.

Imports Pillow and numpy, registers the optional HEIC/HEIF opener, applies
the decompression bomb limit and wraps the optional tqdm progress bars.
"""

from __future__ import annotations

import warnings
import logging
from typing import Optional, Any

from ..config import MAX_IMAGE_PIXELS

# Module-level logger
_logger = logging.getLogger(__name__)

# Check for required dependencies
try:
    from PIL import Image, UnidentifiedImageError
    import numpy as np
except ImportError:
    raise ImportError(
        "Required packages not found!\n"
        "Install with: pip install Pillow numpy"
    )

# Register HEIC/HEIF support via pillow-heif
# This must be done before opening any HEIC files
HAS_HEIF_SUPPORT = False
try:
    from pillow_heif import register_heif_opener
    register_heif_opener()
    HAS_HEIF_SUPPORT = True
    _logger.debug("HEIC/HEIF support enabled via pillow-heif")
except ImportError:
    _logger.debug(
        "pillow-heif not installed - .heic/.heif files will be skipped. "
        "Install with: pip install pillow-heif"
    )

# Optional: tqdm for progress bars
HAS_TQDM = False
_tqdm_class: Optional[Any] = None

try:
    from tqdm import tqdm as _tqdm_import
    HAS_TQDM = True
    _tqdm_class = _tqdm_import
except ImportError:
    pass


def set_pixel_limit(limit: Optional[int]) -> None:
    """
    Apply Pillow's decompression bomb limit.

    Images above the limit fail to decode with DecompressionBombError, which
    the fingerprinter reports as a decode failure. A limit of 0 or None
    disables the check.
    """
    Image.MAX_IMAGE_PIXELS = limit or None
    _logger.debug(f"Decompression bomb limit: {limit or 'disabled'}")


def progress_bar(total: int, desc: str, unit: str, enabled: bool = True) -> Optional[Any]:
    """
    Create a tqdm progress bar, or None if disabled or tqdm is missing.

    Callers must close() the returned bar.
    """
    if not (enabled and HAS_TQDM and _tqdm_class is not None):
        return None
    return _tqdm_class(total=total, desc=desc, unit=unit, ncols=80)


set_pixel_limit(MAX_IMAGE_PIXELS)

# Oversized images either decode or fail outright; the in-between warning is noise
warnings.filterwarnings("ignore", category=Image.DecompressionBombWarning)


__all__ = [
    'Image',
    'UnidentifiedImageError',
    'np',
    'HAS_HEIF_SUPPORT',
    'HAS_TQDM',
    'set_pixel_limit',
    'progress_bar',
    '_logger',
]
