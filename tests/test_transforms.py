"""
Unit tests for the pixel transform library.
"""

import numpy as np
import pytest
from PIL import Image

from findimagedupes.scanner.transforms import (
    ColorModelError,
    resample,
    resample_gray,
    grayscale,
    blur,
    normalize,
    equalize,
    threshold,
)


def gray(values):
    """Build an 'L' image from a nested list of levels."""
    return Image.fromarray(np.array(values, dtype=np.uint8))


def levels(image):
    return np.asarray(image).tolist()


class TestResample:
    """Test nearest-neighbour resampling."""

    def test_output_size_and_mode(self, sample_image):
        out = resample(sample_image, 160, 160)
        assert out.size == (160, 160)
        assert out.mode == 'RGBA'

    def test_single_pixel_upscale(self):
        img = Image.new('RGB', (1, 1), color=(200, 10, 30))
        out = resample(img, 16, 16)
        pixels = np.asarray(out)
        assert pixels.shape == (16, 16, 4)
        assert (pixels == [200, 10, 30, 255]).all()

    @pytest.mark.parametrize('mode', ['L', 'P', '1', 'LA', 'CMYK', 'I', 'I;16'])
    def test_accepts_any_decoded_mode(self, mode):
        img = Image.new(mode, (8, 6))
        out = resample(img, 4, 4)
        assert out.mode == 'RGBA'
        assert out.size == (4, 4)

    def test_downscale_picks_nearest(self):
        img = gray(np.arange(16).reshape(4, 4)).convert('RGB')
        out = np.asarray(resample(img, 2, 2))[..., 0]
        assert out.tolist() == [[0, 2], [8, 10]]

    def test_introduces_no_new_colors(self, sample_image):
        source = {tuple(p) for p in np.asarray(sample_image.convert('RGBA')).reshape(-1, 4)}
        out = {tuple(p) for p in np.asarray(resample(sample_image, 97, 53)).reshape(-1, 4)}
        assert out <= source

    def test_does_not_modify_input(self, sample_image):
        before = np.asarray(sample_image).copy()
        resample(sample_image, 10, 10)
        assert (np.asarray(sample_image) == before).all()

    def test_rejects_empty_target(self):
        img = Image.new('RGB', (4, 4))
        with pytest.raises(ValueError):
            resample(img, 0, 4)


class TestResampleGray:
    """Test grayscale nearest-neighbour resampling."""

    def test_downscale(self):
        img = gray(np.arange(16).reshape(4, 4))
        assert levels(resample_gray(img, 2, 2)) == [[0, 2], [8, 10]]

    def test_upscale_clamps_to_last_pixel(self):
        img = gray([[10, 20]])
        assert levels(resample_gray(img, 4, 1)) == [[10, 20, 20, 20]]

    def test_output_mode(self):
        out = resample_gray(gray([[1, 2], [3, 4]]), 16, 16)
        assert out.mode == 'L'
        assert out.size == (16, 16)

    def test_rejects_color(self):
        with pytest.raises(ColorModelError):
            resample_gray(Image.new('RGB', (4, 4)), 2, 2)


class TestGrayscale:
    """Test luminance conversion."""

    @pytest.mark.parametrize('color,expected', [
        ((255, 255, 255), 255),
        ((0, 0, 0), 0),
        ((255, 0, 0), 54),
        ((0, 255, 0), 182),
        ((0, 0, 255), 18),
        ((200, 200, 200), 200),
    ])
    def test_luma(self, color, expected):
        img = Image.new('RGB', (2, 2), color=color)
        assert (np.asarray(grayscale(img)) == expected).all()

    def test_transparent_reads_as_black(self):
        img = Image.new('RGBA', (2, 2), color=(255, 255, 255, 0))
        assert (np.asarray(grayscale(img)) == 0).all()

    def test_half_transparent(self):
        img = Image.new('RGBA', (1, 1), color=(255, 255, 255, 128))
        # (255 * 257 * 128 // 255) >> 8 = 128
        assert levels(grayscale(img)) == [[128]]

    @pytest.mark.parametrize('value,expected', [
        (200, 157),
        (100, 39),
        (255, 255),
        (1, 0),
    ])
    def test_premultiplied_at_16_bits(self, value, expected):
        img = Image.new('RGBA', (1, 1), color=(value, value, value, value))
        assert levels(grayscale(img)) == [[expected]]

    def test_output_mode(self, sample_image):
        out = grayscale(resample(sample_image, 20, 20))
        assert out.mode == 'L'
        assert out.size == (20, 20)

    def test_rejects_gray(self):
        with pytest.raises(ColorModelError):
            grayscale(gray([[1]]))

    def test_contract_error_is_assertion(self):
        with pytest.raises(AssertionError):
            grayscale(gray([[1]]))


class TestBlur:
    """Test box blur with border-aware averaging."""

    def test_uniform_image_unchanged(self):
        img = Image.new('L', (12, 9), color=77)
        assert (np.asarray(blur(img)) == 77).all()

    def test_corner_ignores_missing_neighbours(self):
        pixels = np.zeros((10, 10), dtype=np.uint8)
        pixels[0, 0] = 255
        out = np.asarray(blur(Image.fromarray(pixels)))
        # Corner neighbourhood holds 4x4 = 16 real pixels
        assert out[0, 0] == 255 // 16

    def test_interior_uses_full_window(self):
        pixels = np.zeros((11, 11), dtype=np.uint8)
        pixels[5, 5] = 255
        out = np.asarray(blur(Image.fromarray(pixels)))
        assert out[5, 5] == 255 // 49
        assert out[5, 9] == 0

    def test_custom_radius(self):
        pixels = np.zeros((5, 5), dtype=np.uint8)
        pixels[2, 2] = 90
        out = np.asarray(blur(Image.fromarray(pixels), radius=1))
        assert out[2, 2] == 10
        assert out[0, 0] == 0

    def test_preserves_size(self):
        img = Image.new('L', (7, 3))
        out = blur(img)
        assert out.size == (7, 3)
        assert out.mode == 'L'

    def test_rejects_color(self):
        with pytest.raises(ColorModelError):
            blur(Image.new('RGBA', (4, 4)))


class TestNormalize:
    """Test contrast stretching."""

    def test_stretch(self):
        out = normalize(gray([[0, 100, 200]]))
        assert levels(out) == [[0, 99, 198]]

    def test_flat_image_unchanged_copy(self):
        img = Image.new('L', (4, 4), color=42)
        out = normalize(img)
        assert out is not img
        assert (np.asarray(out) == 42).all()

    def test_rejects_color(self):
        with pytest.raises(ColorModelError):
            normalize(Image.new('RGB', (2, 2)))


class TestEqualize:
    """Test histogram equalization."""

    def test_two_levels(self):
        out = equalize(gray([[10, 10], [200, 200]]))
        assert levels(out) == [[0, 0], [255, 255]]

    def test_single_level_maps_to_zero(self):
        out = equalize(Image.new('L', (5, 5), color=130))
        assert (np.asarray(out) == 0).all()

    def test_spreads_levels(self):
        out = equalize(gray([[50, 51, 52, 53]]))
        assert levels(out) == [[0, 85, 170, 255]]

    def test_monotonic(self, sample_image):
        g = grayscale(resample(sample_image, 40, 40))
        before = np.asarray(g).ravel()
        after = np.asarray(equalize(g)).ravel()
        order = np.argsort(before, kind='stable')
        assert (np.diff(after[order].astype(int)) >= 0).all()

    def test_rejects_color(self):
        with pytest.raises(ColorModelError):
            equalize(Image.new('RGB', (2, 2)))


class TestThreshold:
    """Test binarization at the midpoint."""

    def test_split(self):
        assert levels(threshold(gray([[0, 127, 128, 255]]))) == [[0, 0, 255, 255]]

    def test_output_is_binary(self, sample_image):
        g = grayscale(resample(sample_image, 30, 30))
        assert set(np.unique(np.asarray(threshold(g)))) <= {0, 255}

    def test_rejects_color(self):
        with pytest.raises(ColorModelError):
            threshold(Image.new('RGBA', (2, 2)))
