"""
Pixel transform library for the scanner package.

A fixed catalog of deterministic image-to-image operations used by the
fingerprint pipeline. Every operation takes a PIL image and returns a new
one; the input is never modified.

Colour images are mode 'RGBA' (or 'RGB'); grayscale images are mode 'L'.
Passing an image of the wrong colour domain raises ColorModelError, which
signals a pipeline-ordering bug rather than bad input.
"""

from __future__ import annotations

from ..config import BLUR_RADIUS, MIDPOINT
from .dependencies import Image, np

GRAY_MODE = 'L'
COLOR_MODES = ('RGB', 'RGBA')

# 16-bit and 32-bit integer luminance modes Pillow produces for deep PNGs
_WIDE_GRAY_MODES = ('I', 'I;16', 'I;16B', 'I;16L', 'I;16N')

# Modes Pillow converts to 'RGBA' in one step
_DIRECT_MODES = ('1', 'L', 'LA', 'La', 'P', 'PA', 'RGB', 'RGBa', 'RGBX')

# ITU-R BT.709 luma weights
LUMA_WEIGHTS = (0.2126, 0.7152, 0.0722)


class ColorModelError(AssertionError):
    """Raised when a transform receives an image of the wrong colour domain."""


def _require_gray(image: Image.Image, operation: str) -> None:
    if image.mode != GRAY_MODE:
        raise ColorModelError(
            f"{operation} only implemented for grayscale ('L') images, got {image.mode!r}"
        )


def _require_color(image: Image.Image, operation: str) -> None:
    if image.mode not in COLOR_MODES:
        raise ColorModelError(
            f"{operation} only implemented for colour ('RGB'/'RGBA') images, got {image.mode!r}"
        )


def _round_half_up(values):
    # Non-negative inputs only; matches round-half-away-from-zero there
    return np.floor(values + 0.5)


def _to_image(pixels) -> Image.Image:
    return Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8))


def _sample_positions(source: int, target: int):
    """Nearest-neighbour source coordinate for every destination coordinate."""
    positions = _round_half_up(np.arange(target, dtype=np.float64) * source / target)
    return np.clip(positions.astype(np.intp), 0, source - 1)


def _to_rgba(image: Image.Image) -> Image.Image:
    if image.mode == 'RGBA':
        return image
    if image.mode in _WIDE_GRAY_MODES:
        levels = np.clip(np.asarray(image).astype(np.float64), 0, 65535)
        image = _to_image(_round_half_up(levels / 257.0))
    elif image.mode not in _DIRECT_MODES:
        image = image.convert('RGB')
    return image.convert('RGBA')


def _check_size(cols: int, rows: int) -> None:
    if cols < 1 or rows < 1:
        raise ValueError(f"Target size must be at least 1x1, got {cols}x{rows}")


def resample(image: Image.Image, cols: int, rows: int) -> Image.Image:
    """
    Resize an image using nearest-neighbour sampling.

    No interpolation is done, so no colour values are introduced that were
    not already in the source. Accepts any decoded image mode and always
    returns an 'RGBA' image of exactly cols x rows.

    Args:
        image: Source image
        cols: Target width in pixels
        rows: Target height in pixels

    Returns:
        New 'RGBA' image
    """
    _check_size(cols, rows)
    pixels = np.asarray(_to_rgba(image))
    xs = _sample_positions(image.width, cols)
    ys = _sample_positions(image.height, rows)
    return _to_image(pixels[ys[:, None], xs[None, :]])


def resample_gray(image: Image.Image, cols: int, rows: int) -> Image.Image:
    """Nearest-neighbour resize of a grayscale image; returns an 'L' image."""
    _require_gray(image, 'resample_gray')
    _check_size(cols, rows)
    pixels = np.asarray(image)
    xs = _sample_positions(image.width, cols)
    ys = _sample_positions(image.height, rows)
    return _to_image(pixels[ys[:, None], xs[None, :]])


def grayscale(image: Image.Image) -> Image.Image:
    """
    Convert a colour image to grayscale.

    Alpha is premultiplied (transparent areas read as black), then luminance
    is 0.2126 R + 0.7152 G + 0.0722 B, rounded and clamped to 0-255.
    """
    _require_color(image, 'grayscale')
    pixels = np.asarray(image).astype(np.int64)
    rgb = pixels[..., :3]
    if image.mode == 'RGBA':
        # Widen to 16 bits, premultiply, keep the high byte
        rgb = (rgb * 257 * pixels[..., 3:4] // 255) >> 8

    wr, wg, wb = LUMA_WEIGHTS
    luma = wr * rgb[..., 0] + wg * rgb[..., 1] + wb * rgb[..., 2]
    return _to_image(np.clip(_round_half_up(luma), 0, 255))


def blur(image: Image.Image, radius: int = BLUR_RADIUS) -> Image.Image:
    """
    Blur each pixel with the integer mean of its (2r+1)^2 neighbourhood.

    Neighbours outside the image are left out of both the sum and the count,
    so border pixels are softened without being pulled towards black. With
    the default radius this behaves much like a high-sigma Gaussian blur.
    """
    _require_gray(image, 'blur')
    pixels = np.asarray(image).astype(np.int64)
    height, width = pixels.shape

    padded = np.pad(pixels, radius)
    present = np.pad(np.ones_like(pixels), radius)
    total = np.zeros_like(pixels)
    count = np.zeros_like(pixels)

    span = 2 * radius + 1
    for dy in range(span):
        for dx in range(span):
            total += padded[dy:dy + height, dx:dx + width]
            count += present[dy:dy + height, dx:dx + width]

    return _to_image(total // count)


def normalize(image: Image.Image) -> Image.Image:
    """
    Stretch contrast of a grayscale image.

    Levels are mapped linearly from [min, max] onto [0.02 * min, 0.99 * max].
    A flat image (min == max) has no range to stretch and is returned as an
    unchanged copy.
    """
    _require_gray(image, 'normalize')
    pixels = np.asarray(image).astype(np.float64)
    low = float(pixels.min())
    high = float(pixels.max())
    if low == high:
        return image.copy()

    new_low = 0.02 * low
    new_high = 0.99 * high
    scale = (new_high - new_low) / (high - low)

    stretched = _round_half_up((pixels - low) * scale + new_low)
    return _to_image(np.clip(stretched, 0, 255))


def equalize(image: Image.Image) -> Image.Image:
    """
    Equalize the histogram of a grayscale image.

    Each level i maps to round((cdf[i] - cdf_min) / (total - cdf_min) * 255),
    where cdf_min is the smallest non-zero cumulative count. An image holding
    a single level maps every pixel to 0.
    """
    _require_gray(image, 'equalize')
    pixels = np.asarray(image)
    total = pixels.size

    cdf = np.cumsum(np.bincount(pixels.ravel(), minlength=256))
    cdf_min = int(cdf[cdf > 0].min())

    if total == cdf_min:
        lut = np.zeros(256, dtype=np.uint8)
    else:
        levels = _round_half_up((cdf - cdf_min) / float(total - cdf_min) * 255.0)
        lut = np.clip(levels, 0, 255).astype(np.uint8)

    return _to_image(lut[pixels])


def threshold(image: Image.Image) -> Image.Image:
    """Split a grayscale image at the midpoint: below 128 is 0, the rest 255."""
    _require_gray(image, 'threshold')
    pixels = np.asarray(image)
    return _to_image(np.where(pixels < MIDPOINT, 0, 255))


__all__ = [
    'ColorModelError',
    'GRAY_MODE',
    'COLOR_MODES',
    'resample',
    'resample_gray',
    'grayscale',
    'blur',
    'normalize',
    'equalize',
    'threshold',
]
