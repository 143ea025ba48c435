"""
findimagedupes
==============
Finds visually similar or duplicate images.

Every image is reduced to a 256-bit perceptual fingerprint by a fixed
pipeline of pixel transforms. Images whose fingerprints differ in fewer
than a threshold number of bits are linked, and linked images are grouped
transitively into clusters of possible matches.

Features:
- Deterministic 256-bit fingerprints, compatible with imagehash.ImageHash
- Configurable threshold as a percentage of the fingerprint bits
- Parallel fingerprinting of large collections
- Union-Find clustering for large collections
- CLI with txt/csv/json export
- JSON web API
"""

__version__ = "1.0.0"

from .models import Fingerprint, SourceRecord, Cluster, ScanConfig, threshold_bits
from .config import DEFAULT_EXTENSIONS, DEFAULT_THRESHOLD_PERCENT, UNION_FIND_AUTO_THRESHOLD
from .scanner import (
    ColorModelError,
    DecodeError,
    decode_image,
    fingerprint_image,
    fingerprint_file,
    analyze_image,
    analyze_images_parallel,
    find_image_files,
    diff_bits,
    build_clusters,
    find_similar_images,
)

__all__ = [
    "Fingerprint",
    "SourceRecord",
    "Cluster",
    "ScanConfig",
    "threshold_bits",
    "DEFAULT_EXTENSIONS",
    "DEFAULT_THRESHOLD_PERCENT",
    "UNION_FIND_AUTO_THRESHOLD",
    "ColorModelError",
    "DecodeError",
    "decode_image",
    "fingerprint_image",
    "fingerprint_file",
    "analyze_image",
    "analyze_images_parallel",
    "find_image_files",
    "diff_bits",
    "build_clusters",
    "find_similar_images",
]
