"""
Scanner package for findimagedupes.

Provides image discovery, perceptual fingerprinting and similarity
clustering.

Public API:
- find_image_files: Discover image files in directories
- parse_extensions: Normalize an extension allow-list
- decode_image: Decode an image file, file object or bytes
- fingerprint_image: Reduce a decoded image to a 256-bit Fingerprint
- fingerprint_file: Decode and fingerprint in one step
- analyze_image: Fingerprint one file into a SourceRecord
- analyze_images_parallel: Fingerprint many files in parallel
- diff_bits: Hamming distance between two fingerprints
- build_adjacency / find_equivalent / build_clusters: Cluster builder
- find_similar_images: Cluster the results of a scan
- has_heif_support: Check if HEIC/HEIF support is available
"""

from __future__ import annotations

# Import public functions from submodules
from .file_discovery import find_image_files, parse_extensions
from .transforms import (
    ColorModelError,
    resample,
    resample_gray,
    grayscale,
    blur,
    normalize,
    equalize,
    threshold,
)
from .fingerprint import (
    DecodeError,
    decode_image,
    pack_bits,
    fingerprint_image,
    fingerprint_file,
)
from .analysis import analyze_image
from .parallel import analyze_images_parallel, ScanCancelled
from .clustering import (
    diff_bits,
    threshold_bits,
    build_adjacency,
    find_equivalent,
    build_clusters,
    find_similar_images,
)

# Import dependencies for has_heif_support function
from .dependencies import HAS_HEIF_SUPPORT


def has_heif_support() -> bool:
    """Check if HEIC/HEIF support is available."""
    return HAS_HEIF_SUPPORT


# Public API exports
__all__ = [
    # File discovery
    'find_image_files',
    'parse_extensions',
    # Pixel transforms
    'ColorModelError',
    'resample',
    'resample_gray',
    'grayscale',
    'blur',
    'normalize',
    'equalize',
    'threshold',
    # Fingerprinting
    'DecodeError',
    'decode_image',
    'pack_bits',
    'fingerprint_image',
    'fingerprint_file',
    # Image analysis
    'analyze_image',
    'analyze_images_parallel',
    'ScanCancelled',
    # Clustering
    'diff_bits',
    'threshold_bits',
    'build_adjacency',
    'find_equivalent',
    'build_clusters',
    'find_similar_images',
    # Feature detection
    'has_heif_support',
]
