"""
End-to-end tests for the command-line interface.
"""

import csv
import json
from pathlib import Path

import pytest

from findimagedupes.cli import main, parse_arguments
from findimagedupes.__main__ import main as package_main


def report_blocks(output):
    """Split CLI output into lists of paths, one list per cluster."""
    blocks = []
    for chunk in output.split("Possible matches:\n")[1:]:
        blocks.append([line for line in chunk.splitlines() if line])
    return blocks


class TestParseArguments:
    """Test argument parsing defaults and flags."""

    def test_defaults(self):
        args = parse_arguments(['/photos'])
        assert args.directories == [Path('/photos')]
        assert args.threshold == 10.0
        assert args.workers == 4
        assert args.extensions == "jpg,jpeg,gif,png"
        assert args.no_recursive is False
        assert args.export_format == 'txt'

    def test_union_find_flags_exclusive(self):
        with pytest.raises(SystemExit):
            parse_arguments(['/photos', '--union-find', '--no-union-find'])

    def test_default_threshold_from_environment(self, monkeypatch):
        monkeypatch.setenv('FINDIMAGEDUPES_THRESHOLD', '3')
        assert parse_arguments([]).threshold == 3.0


class TestMain:
    """Test the complete CLI workflow."""

    def test_no_directories(self, capsys):
        assert main([]) == 0
        assert capsys.readouterr().out == ""

    def test_reports_matches(self, sample_images, temp_dir, capsys):
        assert main([str(temp_dir), '--no-progress']) == 0
        blocks = report_blocks(capsys.readouterr().out)

        assert len(blocks) == 1
        assert blocks[0] == [
            sample_images['copy'],
            sample_images['original'],
            sample_images['resized'],
        ]

    def test_output_format(self, sample_images, temp_dir, capsys):
        main([str(temp_dir), '--no-progress'])
        out = capsys.readouterr().out
        assert out.startswith("Possible matches:\n")
        assert out.endswith("\n\n")

    def test_union_find_same_output(self, sample_images, temp_dir, capsys):
        main([str(temp_dir), '--no-progress'])
        closure = capsys.readouterr().out
        main([str(temp_dir), '--no-progress', '--union-find'])
        assert capsys.readouterr().out == closure

    def test_zero_threshold_reports_nothing(self, sample_images, temp_dir, capsys):
        assert main([str(temp_dir), '-t', '0', '--no-progress']) == 0
        assert capsys.readouterr().out == ""

    def test_undecodable_file_never_clustered(self, sample_images, temp_dir, capsys):
        assert main([str(temp_dir), '-t', '100', '--no-progress']) == 0
        blocks = report_blocks(capsys.readouterr().out)
        assert blocks
        assert all(sample_images['corrupted'] not in block for block in blocks)

    def test_extension_filter(self, sample_images, temp_dir, capsys):
        main([str(temp_dir), '-e', 'png', '--no-progress'])
        blocks = report_blocks(capsys.readouterr().out)
        assert blocks == [[sample_images['original'], sample_images['resized']]]

    def test_missing_directory(self, temp_dir):
        assert main([str(temp_dir / "missing")]) == 1

    def test_invalid_threshold(self, temp_dir):
        assert main([str(temp_dir), '-t', '150']) == 1

    def test_invalid_workers(self, temp_dir):
        assert main([str(temp_dir), '-w', '0']) == 1

    def test_no_images(self, temp_dir, capsys):
        assert main([str(temp_dir), '--no-progress']) == 0
        assert capsys.readouterr().out == ""

    def test_image_files_as_arguments(self, sample_image, temp_dir, capsys):
        first = temp_dir / "a.png"
        second = temp_dir / "b.png"
        sample_image.save(first)
        sample_image.save(second)

        assert main([str(first), str(second), '--no-progress']) == 0
        out = capsys.readouterr().out
        assert out.startswith("Possible matches:\n")
        assert report_blocks(out) == [[str(first), str(second)]]

    def test_file_and_directory_mixed(self, sample_images, temp_dir, capsys):
        other = temp_dir / "elsewhere"
        other.mkdir()
        assert main([str(other), sample_images['original'], sample_images['copy'], '--no-progress']) == 0
        assert report_blocks(capsys.readouterr().out) == [
            [sample_images['original'], sample_images['copy']],
        ]

    def test_missing_file_argument(self, temp_dir):
        assert main([str(temp_dir / "missing.png")]) == 1


class TestExport:
    """Test exporting results from the CLI."""

    def test_export_txt(self, sample_images, temp_dir, capsys):
        output = temp_dir / "out" / "matches.txt"
        output.parent.mkdir()
        assert main([str(temp_dir), '--no-progress', '-o', str(output)]) == 0
        assert output.read_text() == capsys.readouterr().out

    def test_export_csv(self, sample_images, temp_dir):
        output = temp_dir / "matches.csv"
        main([str(temp_dir), '--no-progress', '-e', 'png,jpg', '-o', str(output), '--export-format', 'csv'])
        with open(output, newline='') as f:
            rows = list(csv.DictReader(f))
        assert [row['path'] for row in rows] == [
            sample_images['copy'],
            sample_images['original'],
            sample_images['resized'],
        ]
        assert {row['cluster_id'] for row in rows} == {'1'}
        assert all(len(row['fingerprint']) == 64 for row in rows)

    def test_export_json(self, sample_images, temp_dir):
        output = temp_dir / "matches.json"
        main([str(temp_dir), '--no-progress', '-o', str(output), '--export-format', 'json'])
        data = json.loads(output.read_text())
        assert len(data) == 1
        assert data[0]['id'] == 1
        assert data[0]['image_count'] == 3

    def test_export_unwritable(self, sample_images, temp_dir):
        output = temp_dir / "no" / "such" / "dir" / "matches.txt"
        assert main([str(temp_dir), '--no-progress', '-o', str(output)]) == 1


class TestPackageMain:
    """Test python -m findimagedupes dispatch."""

    def test_defaults_to_cli(self, capsys):
        assert package_main([]) == 0

    def test_config_show(self, capsys):
        assert package_main(['config']) == 0
        out = capsys.readouterr().out
        assert "default_threshold: 10.0" in out
        assert "not found" in out

    def test_config_init(self, isolated_user_config, capsys):
        assert package_main(['config', '--init']) == 0
        assert isolated_user_config.config_file_path.exists()
