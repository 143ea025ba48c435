"""
Fingerprint generation for the scanner package.

Decodes an image and reduces it to a 256-bit Fingerprint through a fixed
pipeline of pixel transforms:

1. resample to 160x160 (colour, nearest-neighbour)
2. grayscale
3. blur (radius 3)
4. normalize contrast
5. equalize histogram
6. resample to 16x16 (grayscale, nearest-neighbour)
7. threshold at the midpoint
8. pack the 16x16 grid into 32 bytes

Stage order and sizes are what make independently recompressed copies of
one image converge on nearly identical bits.
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import BinaryIO, Union

from ..config import FINGERPRINT_SIZE, INTERMEDIATE_SIZE, MIDPOINT
from ..models import Fingerprint
from .dependencies import Image, UnidentifiedImageError, np, _logger
from .transforms import (
    GRAY_MODE,
    ColorModelError,
    blur,
    equalize,
    grayscale,
    normalize,
    resample,
    resample_gray,
    threshold,
)

ImageSource = Union[str, Path, bytes, BinaryIO]


class DecodeError(Exception):
    """Raised when an image source cannot be read or decoded."""

    def __init__(self, source: str, reason: str):
        super().__init__(f"Error decoding image {source}: {reason}")
        self.source = source
        self.reason = reason


def _describe(source: ImageSource) -> str:
    if isinstance(source, (str, Path)):
        return str(source)
    if isinstance(source, (bytes, bytearray)):
        return f"<{len(source)} bytes>"
    return getattr(source, 'name', repr(source))


def decode_image(source: ImageSource) -> Image.Image:
    """
    Decode an image from a path, a binary file object or raw bytes.

    The image is fully loaded so truncated or corrupt files fail here rather
    than half-way through the pipeline.

    Args:
        source: Path, open binary file or bytes holding an encoded image

    Returns:
        Loaded PIL image (first frame for animated formats)

    Raises:
        DecodeError: If the source cannot be read or is not a decodable image
    """
    name = _describe(source)
    if isinstance(source, (bytes, bytearray)):
        source = io.BytesIO(source)

    try:
        with Image.open(source) as img:
            img.load()
            # Float images have no direct colour conversion
            decoded = img.convert('L') if img.mode == 'F' else img.copy()
            decoded.format = img.format
            return decoded
    except UnidentifiedImageError as e:
        raise DecodeError(name, f"not a valid image file ({e})") from e
    except Image.DecompressionBombError as e:
        raise DecodeError(name, f"image too large ({e})") from e
    except (OSError, ValueError, SyntaxError, EOFError) as e:
        # Missing/unreadable files, truncated data and broken headers
        raise DecodeError(name, str(e) or type(e).__name__) from e


def pack_bits(image: Image.Image) -> Fingerprint:
    """
    Pack a 16x16 grayscale grid into a Fingerprint.

    A bit is set for every pixel darker than the midpoint. Rows are packed
    in order, two bytes per row, most significant bit first.
    """
    if image.mode != GRAY_MODE:
        raise ColorModelError(f"pack_bits only implemented for grayscale ('L') images, got {image.mode!r}")
    if image.size != (FINGERPRINT_SIZE, FINGERPRINT_SIZE):
        raise ColorModelError(
            f"pack_bits expects a {FINGERPRINT_SIZE}x{FINGERPRINT_SIZE} image, got {image.width}x{image.height}"
        )
    black = np.asarray(image) < MIDPOINT
    return Fingerprint(np.packbits(black, axis=1).tobytes())


def fingerprint_image(image: Image.Image) -> Fingerprint:
    """
    Compute the 256-bit fingerprint of a decoded image.

    Args:
        image: Decoded PIL image of any size and mode

    Returns:
        Fingerprint of the image
    """
    im = resample(image, INTERMEDIATE_SIZE, INTERMEDIATE_SIZE)
    im = grayscale(im)
    im = blur(im)
    im = normalize(im)
    im = equalize(im)
    im = resample_gray(im, FINGERPRINT_SIZE, FINGERPRINT_SIZE)
    im = threshold(im)
    return pack_bits(im)


def fingerprint_file(source: ImageSource) -> Fingerprint:
    """
    Decode an image source and compute its fingerprint.

    Raises:
        DecodeError: If the source cannot be decoded
    """
    image = decode_image(source)
    _logger.debug(f"Decoded {_describe(source)} ({image.width}x{image.height}, mode={image.mode})")
    return fingerprint_image(image)


__all__ = [
    'DecodeError',
    'ImageSource',
    'decode_image',
    'pack_bits',
    'fingerprint_image',
    'fingerprint_file',
]
