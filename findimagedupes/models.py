"""
Data models for findimagedupes.

Contains the fingerprint value type, the per-file source record, the
reported cluster and the explicit scan configuration.
"""

from dataclasses import dataclass, field
from typing import Optional
import math
import os

import imagehash
import numpy as np

from .config import (
    DEFAULT_EXTENSIONS,
    DEFAULT_THRESHOLD_PERCENT,
    DEFAULT_WORKERS,
    FINGERPRINT_BITS,
    FINGERPRINT_BYTES,
    FINGERPRINT_SIZE,
    UNION_FIND_AUTO_THRESHOLD,
)


def format_size(size_bytes: int) -> str:
    """Format file size in human-readable form."""
    for unit in ['B', 'KB', 'MB', 'GB']:
        if size_bytes < 1024:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024
    return f"{size_bytes:.1f} TB"


def threshold_bits(percent: float) -> int:
    """
    Convert a match threshold percentage into a bit count.

    Rounds half away from zero, so 10% of 256 bits is 26.

    Args:
        percent: Threshold as a percentage of the fingerprint bits (0-100)

    Returns:
        Number of differing bits below which two images match

    Raises:
        ValueError: If percent is outside 0-100
    """
    if not 0.0 <= percent <= 100.0:
        raise ValueError(f"Threshold must be between 0 and 100 percent, got {percent}")
    return int(math.floor(FINGERPRINT_BITS * percent / 100.0 + 0.5))


@dataclass(frozen=True)
class Fingerprint:
    """
    A 256-bit perceptual signature of one image.

    The 16x16 binarized grid is stored row-major in 32 bytes: row y lives in
    bytes 2y and 2y+1 and bit 7-j of each byte is column j of that half-row.
    A set bit marks a black pixel.
    """
    data: bytes

    def __post_init__(self):
        data = bytes(self.data)
        if len(data) != FINGERPRINT_BYTES:
            raise ValueError(
                f"Fingerprint must be {FINGERPRINT_BYTES} bytes, got {len(data)}"
            )
        object.__setattr__(self, 'data', data)

    def diffbits(self, other: 'Fingerprint') -> int:
        """Count the bits by which two fingerprints differ."""
        x = int.from_bytes(self.data, 'big') ^ int.from_bytes(other.data, 'big')
        return bin(x).count('1')

    @property
    def hex(self) -> str:
        """Lowercase hex form, identical to str() of the matching ImageHash."""
        return self.data.hex()

    def __str__(self) -> str:
        return self.hex

    def to_hash(self) -> imagehash.ImageHash:
        """Return the fingerprint as a 16x16 imagehash.ImageHash."""
        bits = np.unpackbits(np.frombuffer(self.data, dtype=np.uint8))
        return imagehash.ImageHash(bits.reshape(FINGERPRINT_SIZE, FINGERPRINT_SIZE).astype(bool))

    @classmethod
    def from_hash(cls, image_hash: imagehash.ImageHash) -> 'Fingerprint':
        """Build a fingerprint from a 16x16 imagehash.ImageHash."""
        grid = np.asarray(image_hash.hash, dtype=bool)
        if grid.shape != (FINGERPRINT_SIZE, FINGERPRINT_SIZE):
            raise ValueError(
                f"Expected a {FINGERPRINT_SIZE}x{FINGERPRINT_SIZE} hash, got shape {grid.shape}"
            )
        return cls(np.packbits(grid.flatten()).tobytes())

    @classmethod
    def from_hex(cls, hexstr: str) -> 'Fingerprint':
        """Parse the 64-digit hex form."""
        hexstr = hexstr.strip().lower()
        if len(hexstr) != FINGERPRINT_BYTES * 2:
            raise ValueError(
                f"Fingerprint hex must be {FINGERPRINT_BYTES * 2} digits, got {len(hexstr)}"
            )
        try:
            int(hexstr, 16)
        except ValueError:
            raise ValueError(f"Invalid fingerprint hex: {hexstr!r}")
        return cls.from_hash(imagehash.hex_to_hash(hexstr))


@dataclass
class SourceRecord:
    """
    Pairs a fingerprint with the image file it was computed from.

    Attributes:
        path: Full path (or other identifier) of the image
        fingerprint: Computed fingerprint, None if decoding failed
        file_size: Size in bytes
        width: Decoded width in pixels
        height: Decoded height in pixels
        format: Decoder format name (PNG, JPEG, etc.)
        error: Error message if the image could not be decoded
    """
    path: str
    fingerprint: Optional[Fingerprint] = None
    file_size: int = 0
    width: int = 0
    height: int = 0
    format: str = ""
    error: Optional[str] = None

    def __hash__(self):
        return hash(str(self.path))

    def __eq__(self, other):
        if not isinstance(other, SourceRecord):
            return False
        return str(self.path) == str(other.path)

    @property
    def filename(self) -> str:
        """Return just the filename portion of the path."""
        return os.path.basename(self.path)

    @property
    def directory(self) -> str:
        """Return the directory containing this image."""
        return os.path.dirname(self.path)

    @property
    def resolution(self) -> str:
        """Return resolution as 'WxH' string."""
        return f"{self.width}x{self.height}"

    @property
    def file_size_formatted(self) -> str:
        """Return human-readable file size."""
        return format_size(self.file_size)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'path': self.path,
            'filename': self.filename,
            'directory': self.directory,
            'fingerprint': self.fingerprint.hex if self.fingerprint else None,
            'file_size': self.file_size,
            'file_size_formatted': self.file_size_formatted,
            'width': self.width,
            'height': self.height,
            'resolution': self.resolution,
            'format': self.format,
            'error': self.error,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'SourceRecord':
        """Create SourceRecord from dictionary."""
        fingerprint = data.get('fingerprint')
        return cls(
            path=data['path'],
            fingerprint=Fingerprint.from_hex(fingerprint) if fingerprint else None,
            file_size=data.get('file_size', 0),
            width=data.get('width', 0),
            height=data.get('height', 0),
            format=data.get('format', ''),
            error=data.get('error'),
        )


@dataclass
class Cluster:
    """
    A group of possibly duplicate images.

    Attributes:
        id: Identifier for this cluster, numbered in discovery order
        indices: Ascending indices of the members in the clustered sequence
        records: SourceRecord objects, in the same order as indices
    """
    id: int
    indices: list = field(default_factory=list)
    records: list = field(default_factory=list)

    @property
    def paths(self) -> list:
        """Member paths in index order."""
        return [record.path for record in self.records]

    @property
    def image_count(self) -> int:
        """Number of images in this cluster."""
        return len(self.records)

    @property
    def max_diff_bits(self) -> int:
        """Largest pairwise bit difference between members."""
        prints = [r.fingerprint for r in self.records if r.fingerprint is not None]
        widest = 0
        for i in range(len(prints)):
            for j in range(i + 1, len(prints)):
                widest = max(widest, prints[i].diffbits(prints[j]))
        return widest

    @property
    def total_size(self) -> int:
        """Combined file size of the members."""
        return sum(record.file_size for record in self.records)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'id': self.id,
            'image_count': self.image_count,
            'indices': list(self.indices),
            'paths': self.paths,
            'images': [record.to_dict() for record in self.records],
            'max_diff_bits': self.max_diff_bits,
            'total_size': self.total_size,
            'total_size_formatted': format_size(self.total_size),
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Cluster':
        """Create Cluster from dictionary."""
        records = [SourceRecord.from_dict(r) for r in data.get('images', [])]
        return cls(
            id=data['id'],
            indices=list(data.get('indices', [])),
            records=records,
        )


@dataclass
class ScanConfig:
    """
    Explicit settings for one scan.

    Attributes:
        threshold_percent: Match threshold as a percentage of 256 bits
        extensions: File extensions to consider (without the dot)
        recursive: Whether to descend into subdirectories
        workers: Number of parallel fingerprinting workers
        use_union_find: Force the disjoint-set clustering path on or off,
            or None to choose by collection size
        union_find_auto_threshold: Collection size at which the disjoint-set
            path is chosen automatically
    """
    threshold_percent: float = DEFAULT_THRESHOLD_PERCENT
    extensions: tuple = DEFAULT_EXTENSIONS
    recursive: bool = True
    workers: int = DEFAULT_WORKERS
    use_union_find: Optional[bool] = None
    union_find_auto_threshold: int = UNION_FIND_AUTO_THRESHOLD

    @property
    def threshold_bits(self) -> int:
        """Threshold converted once into a bit count."""
        return threshold_bits(self.threshold_percent)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'threshold_percent': self.threshold_percent,
            'threshold_bits': self.threshold_bits,
            'extensions': list(self.extensions),
            'recursive': self.recursive,
            'workers': self.workers,
            'use_union_find': self.use_union_find,
            'union_find_auto_threshold': self.union_find_auto_threshold,
        }
