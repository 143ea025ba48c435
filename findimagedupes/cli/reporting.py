"""
Report formatting and display for the CLI interface.

Prints each cluster as a "Possible matches:" block, one path per line,
followed by a blank line, and logs a short summary.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

from ..models import Cluster, format_size
from ..utils.exporters import format_cluster_text


def _calculate_statistics(clusters: list[Cluster]) -> dict[str, int]:
    """
    Calculate statistics for clusters.

    Returns:
        Dictionary with statistics:
        - total_clusters: Number of clusters
        - total_images: Number of images in any cluster
        - total_size: Combined file size of clustered images (bytes)
    """
    return {
        'total_clusters': len(clusters),
        'total_images': sum(c.image_count for c in clusters),
        'total_size': sum(c.total_size for c in clusters),
    }


def print_cluster_report(
    clusters: list[Cluster],
    logger: Optional[logging.Logger] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Print the clusters of possible matches.

    Args:
        clusters: Clusters in discovery order
        logger: Optional logger for the closing summary
        stream: Output stream (default: sys.stdout)
    """
    stream = stream or sys.stdout

    for cluster in clusters:
        stream.write(format_cluster_text(cluster))
    stream.flush()

    if logger:
        stats = _calculate_statistics(clusters)
        logger.info(
            f"Found {stats['total_clusters']:,} groups of possible matches "
            f"covering {stats['total_images']:,} files ({format_size(stats['total_size'])})"
        )
        for cluster in clusters:
            logger.debug(
                f"Group {cluster.id}: {cluster.image_count} files, "
                f"widest difference {cluster.max_diff_bits} bits"
            )


__all__ = ['print_cluster_report']
