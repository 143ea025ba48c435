"""
Export functionality for findimagedupes.

Provides functions to export clustering results to TXT, CSV and JSON files.
"""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import TextIO

from ..models import Cluster

EXPORT_FORMATS = ('txt', 'csv', 'json')


def format_cluster_text(cluster: Cluster) -> str:
    """
    Render one cluster in the plain report format.

    Examples:
        >>> print(format_cluster_text(cluster), end='')
        Possible matches:
        /photos/a.jpg
        /photos/b.jpg
        <BLANKLINE>
    """
    return "Possible matches:\n" + "\n".join(cluster.paths) + "\n\n"


def _export_txt(clusters: list[Cluster], file_handle: TextIO) -> None:
    """Export clusters in the same format the CLI prints."""
    for cluster in clusters:
        file_handle.write(format_cluster_text(cluster))


def _export_csv(clusters: list[Cluster], file_handle: TextIO) -> None:
    """
    Export clusters to CSV format.

    Notes:
        CSV includes: cluster_id, path, fingerprint, width, height, file_size
    """
    writer = csv.writer(file_handle, lineterminator='\n')
    writer.writerow(['cluster_id', 'path', 'fingerprint', 'width', 'height', 'file_size'])
    for cluster in clusters:
        for record in cluster.records:
            writer.writerow([
                cluster.id,
                record.path,
                record.fingerprint.hex if record.fingerprint else '',
                record.width,
                record.height,
                record.file_size,
            ])


def _export_json(clusters: list[Cluster], file_handle: TextIO) -> None:
    """Export clusters as a JSON list of cluster dicts."""
    json.dump([cluster.to_dict() for cluster in clusters], file_handle, indent=2)
    file_handle.write("\n")


def export_results(
    clusters: list[Cluster],
    output_path: Path,
    export_format: str = 'txt'
) -> None:
    """
    Export clustering results to a file.

    Args:
        clusters: Clusters to export
        output_path: Path to output file
        export_format: Export format ('txt', 'csv' or 'json'). Default: 'txt'

    Raises:
        ValueError: If export_format is not supported
        OSError: If file cannot be written
    """
    if export_format not in EXPORT_FORMATS:
        raise ValueError(
            f"Unsupported export format: {export_format}. Use one of: {', '.join(EXPORT_FORMATS)}."
        )

    with open(output_path, 'w', encoding='utf-8', newline='') as f:
        if export_format == 'txt':
            _export_txt(clusters, f)
        elif export_format == 'csv':
            _export_csv(clusters, f)
        else:
            _export_json(clusters, f)


__all__ = ['export_results', 'format_cluster_text', 'EXPORT_FORMATS']
