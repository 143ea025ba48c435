"""
Configuration constants for findimagedupes.

This module contains all configurable settings including:
- Default file extensions considered during traversal
- Fingerprint pipeline geometry
- Matching threshold and worker defaults
"""

# Extensions scanned by default (case-insensitive, compared without the dot)
DEFAULT_EXTENSIONS = ('jpg', 'jpeg', 'gif', 'png')

# Formats that need the optional pillow-heif plugin
HEIF_EXTENSIONS = {'.heic', '.heif'}

# Default match threshold, as a percentage of the fingerprint bits.
# 10% of 256 bits rounds to 26 bits.
DEFAULT_THRESHOLD_PERCENT = 10.0

# Default number of parallel workers for fingerprinting
DEFAULT_WORKERS = 4

# Fingerprint geometry. These sizes, the blur radius and the stage order
# in scanner.fingerprint decide which images converge to the same bits;
# changing any of them changes matching behaviour.
INTERMEDIATE_SIZE = 160
FINGERPRINT_SIZE = 16
FINGERPRINT_BITS = FINGERPRINT_SIZE * FINGERPRINT_SIZE
FINGERPRINT_BYTES = FINGERPRINT_BITS // 8
BLUR_RADIUS = 3

# Luminance cut-off used by the threshold stage and by bit packing
MIDPOINT = 128

# Switch clustering to the disjoint-set implementation at this many images.
# Output is identical either way; only the running time differs.
UNION_FIND_AUTO_THRESHOLD = 2000

# Decompression bomb limit handed to Pillow (pixels)
MAX_IMAGE_PIXELS = 500_000_000

# User configuration file location
import os
CONFIG_DIR = os.path.join(os.path.expanduser('~'), '.findimagedupes')
