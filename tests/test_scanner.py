"""
Unit tests for scanner module functions.
"""

import pytest
from pathlib import Path
from PIL import Image

from findimagedupes.scanner import (
    find_image_files,
    parse_extensions,
    analyze_image,
    analyze_images_parallel,
    ScanCancelled,
    ColorModelError,
)
from findimagedupes.scanner import analysis


class TestParseExtensions:
    """Test parse_extensions function."""

    def test_string(self):
        assert parse_extensions("jpg, PNG,.gif") == {'.jpg', '.png', '.gif'}

    def test_iterable(self):
        assert parse_extensions(['JPEG', '', ' webp ']) == {'.jpeg', '.webp'}


class TestFindImageFiles:
    """Test find_image_files function."""

    def test_default_extensions(self, sample_images, temp_dir):
        """Test finding default image types but not other files."""
        files = find_image_files(temp_dir)
        names = [Path(f).name for f in files]
        assert names == sorted(['copy.jpg', 'corrupted.jpg', 'inverted.png', 'original.png', 'resized.png'])

    def test_extension_filter(self, sample_images, temp_dir):
        files = find_image_files(temp_dir, extensions="png")
        assert all(f.endswith('.png') for f in files)
        assert len(files) == 3

    def test_case_insensitive(self, temp_dir):
        Image.new('RGB', (4, 4)).save(temp_dir / "UPPER.PNG", 'PNG')
        files = find_image_files(temp_dir, extensions=['png'])
        assert [Path(f).name for f in files] == ["UPPER.PNG"]

    def test_recursive_search(self, temp_dir):
        """Test recursive directory search."""
        subdir = temp_dir / "subdir"
        subdir.mkdir()
        Image.new('RGB', (10, 10), color='green').save(subdir / "test.png")

        files = find_image_files(temp_dir, recursive=True)
        assert str((subdir / "test.png").resolve()) in files

        files_non_recursive = find_image_files(temp_dir, recursive=False)
        assert str((subdir / "test.png").resolve()) not in files_non_recursive

    def test_roots_in_given_order(self, temp_dir):
        first = temp_dir / "b_first"
        second = temp_dir / "a_second"
        first.mkdir()
        second.mkdir()
        Image.new('RGB', (4, 4)).save(first / "z.png")
        Image.new('RGB', (4, 4)).save(second / "a.png")

        files = find_image_files([first, second])
        assert [Path(f).name for f in files] == ["z.png", "a.png"]

    def test_duplicate_roots_listed_once(self, sample_images, temp_dir):
        once = find_image_files(temp_dir)
        twice = find_image_files([temp_dir, temp_dir])
        assert once == twice

    def test_file_root(self, sample_images):
        files = find_image_files(sample_images['original'])
        assert files == [str(Path(sample_images['original']).resolve())]

    def test_empty_directory(self, temp_dir):
        """Test scanning empty directory."""
        empty_dir = temp_dir / "empty"
        empty_dir.mkdir()
        assert find_image_files(empty_dir) == []


class TestAnalyzeImage:
    """Test analyze_image function."""

    def test_valid_image(self, sample_images):
        record = analyze_image(sample_images['original'])
        assert record.error is None
        assert record.fingerprint is not None
        assert record.width == 240
        assert record.height == 180
        assert record.format == 'PNG'
        assert record.file_size > 0

    def test_corrupted_image(self, sample_images):
        record = analyze_image(sample_images['corrupted'])
        assert record.fingerprint is None
        assert record.error

    def test_nonexistent_file(self):
        record = analyze_image("/nonexistent/file.jpg")
        assert record.fingerprint is None
        assert record.error.startswith("File not readable")

    def test_contract_errors_propagate(self, sample_images, monkeypatch):
        def broken_pipeline(image):
            raise ColorModelError("blur only implemented for grayscale ('L') images")

        monkeypatch.setattr(analysis, 'fingerprint_image', broken_pipeline)
        with pytest.raises(AssertionError):
            analyze_image(sample_images['original'])


class TestAnalyzeImagesParallel:
    """Test analyze_images_parallel function."""

    def test_results_in_input_order(self, sample_images):
        paths = [
            sample_images['inverted'],
            sample_images['corrupted'],
            sample_images['original'],
            sample_images['copy'],
        ]
        records = analyze_images_parallel(paths, max_workers=4, show_progress=False)
        assert [r.path for r in records] == paths
        assert records[1].error
        assert all(r.fingerprint is not None for i, r in enumerate(records) if i != 1)

    def test_matches_sequential(self, sample_images):
        paths = [sample_images['original'], sample_images['copy'], sample_images['resized']]
        parallel = analyze_images_parallel(paths, max_workers=3, show_progress=False)
        sequential = [analyze_image(p) for p in paths]
        assert [r.fingerprint for r in parallel] == [r.fingerprint for r in sequential]

    def test_empty_list(self):
        assert analyze_images_parallel([], show_progress=False) == []

    def test_progress_callback(self, sample_images):
        calls = []
        paths = [sample_images['original'], sample_images['copy']]
        analyze_images_parallel(
            paths,
            max_workers=2,
            show_progress=False,
            progress_callback=lambda cur, total: calls.append((cur, total)),
        )
        assert calls[-1] == (2, 2)

    def test_cancel(self, sample_images):
        paths = [sample_images['original'], sample_images['copy']]
        with pytest.raises(ScanCancelled):
            analyze_images_parallel(paths, show_progress=False, cancel_check=lambda: True)
