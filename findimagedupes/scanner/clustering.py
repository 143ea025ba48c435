"""
Clustering module for the scanner package.

Compares every pair of fingerprints by Hamming distance and collapses the
resulting "close enough" relation into disjoint clusters by transitive
closure, so chains of near-matches are reported as one group.

Two equivalent implementations are provided: the fixed-point closure over
an adjacency map, and a Union-Find structure that is picked automatically
for large collections. Both report clusters in ascending order of their
smallest member, with members in ascending index order.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Optional, Callable, Sequence

from ..config import UNION_FIND_AUTO_THRESHOLD
from ..models import Cluster, Fingerprint, ScanConfig, SourceRecord, threshold_bits
from .dependencies import progress_bar

AdjacencyMap = dict[int, list[int]]


def diff_bits(a: Fingerprint, b: Fingerprint) -> int:
    """Number of bits by which two fingerprints differ (0-256)."""
    return a.diffbits(b)


def _iter_close_pairs(
    fingerprints: Sequence[Fingerprint],
    bits: int,
    progress_callback: Optional[Callable[[int, int], None]] = None,
    show_progress: bool = False,
):
    """Yield every (i, j), i < j, whose fingerprints differ by fewer than bits."""
    n = len(fingerprints)
    total_comparisons = (n * (n - 1)) // 2

    pbar = progress_bar(total_comparisons, "Cross-matching", "cmp", show_progress and total_comparisons > 1000)

    # Compare as plain integers; popcount of the XOR is the distance
    values = [int.from_bytes(fp.data, 'big') for fp in fingerprints]

    comparison_count = 0
    try:
        for i in range(n):
            a = values[i]
            for j in range(i + 1, n):
                if bin(a ^ values[j]).count('1') < bits:
                    yield i, j

            row = n - i - 1
            comparison_count += row
            if pbar is not None and row:
                pbar.update(row)
            if progress_callback and row:
                progress_callback(comparison_count, total_comparisons)
    finally:
        if pbar is not None:
            pbar.close()


def build_adjacency(
    fingerprints: Sequence[Fingerprint],
    bits: int,
    progress_callback: Optional[Callable[[int, int], None]] = None,
    show_progress: bool = False,
) -> AdjacencyMap:
    """
    Build the symmetric "similar enough" relation over all pairs.

    Args:
        fingerprints: Fingerprints in index order
        bits: Threshold in bits; pairs differing by fewer bits are linked
        progress_callback: Optional callback(current, total) for progress
        show_progress: Whether to show tqdm progress bar

    Returns:
        Map from index to ascending list of linked indices. Indices with no
        links are absent.
    """
    matches: AdjacencyMap = {}
    for i, j in _iter_close_pairs(fingerprints, bits, progress_callback, show_progress):
        matches.setdefault(i, []).append(j)
        matches.setdefault(j, []).append(i)
    return matches


def find_equivalent(adjacency: AdjacencyMap, start: int) -> list[int]:
    """
    Find everything reachable from start through the adjacency map.

    Repeats full passes over the map until a pass adds nothing.

    Returns:
        Ascending list of indices in start's component, start included
    """
    equiv = {start}
    modified = True
    while modified:
        modified = False
        for node in sorted(adjacency):
            if node not in equiv:
                continue
            for neighbour in adjacency[node]:
                if neighbour not in equiv:
                    equiv.add(neighbour)
                    modified = True
    return sorted(equiv)


def _closure_components(adjacency: AdjacencyMap, n: int) -> list[list[int]]:
    remaining = {k: list(v) for k, v in adjacency.items()}
    components = []
    for i in range(n):
        if i not in remaining:
            continue
        members = find_equivalent(remaining, i)
        for j in members:
            remaining.pop(j, None)
        components.append(members)
    return components


def _union_find_components(
    fingerprints: Sequence[Fingerprint],
    bits: int,
    progress_callback: Optional[Callable[[int, int], None]] = None,
    show_progress: bool = False,
) -> list[list[int]]:
    parent = list(range(len(fingerprints)))
    rank = [0] * len(fingerprints)
    linked = set()

    def find(x: int) -> int:
        root = x
        while parent[root] != root:
            root = parent[root]
        # Path compression
        while parent[x] != root:
            next_x = parent[x]
            parent[x] = root
            x = next_x
        return root

    def union(x: int, y: int) -> None:
        px, py = find(x), find(y)
        if px != py:
            # Union by rank
            if rank[px] < rank[py]:
                parent[px] = py
            elif rank[px] > rank[py]:
                parent[py] = px
            else:
                parent[py] = px
                rank[px] += 1

    for i, j in _iter_close_pairs(fingerprints, bits, progress_callback, show_progress):
        linked.add(i)
        linked.add(j)
        union(i, j)

    # Ascending iteration keeps groups ordered by their smallest member
    groups: dict[int, list[int]] = defaultdict(list)
    for i in range(len(fingerprints)):
        if i in linked:
            groups[find(i)].append(i)
    return list(groups.values())


def build_clusters(
    records: Sequence[SourceRecord],
    bits: int,
    use_union_find: Optional[bool] = None,
    start_id: int = 1,
    progress_callback: Optional[Callable[[int, int], None]] = None,
    show_progress: bool = False,
    logger: Optional[logging.Logger] = None,
    auto_threshold: int = UNION_FIND_AUTO_THRESHOLD,
) -> list[Cluster]:
    """
    Group records whose fingerprints are chained together within threshold.

    Args:
        records: SourceRecords with fingerprints, in discovery order
        bits: Threshold in bits (pairs must differ by fewer bits)
        use_union_find: Force Union-Find on/off, or None to auto-select
            based on collection size
        start_id: Starting ID for clusters
        progress_callback: Optional callback(current, total) for progress
        show_progress: Whether to show tqdm progress bar
        logger: Optional logger for status messages
        auto_threshold: Collection size at which Union-Find is auto-selected

    Returns:
        Disjoint clusters of two or more records, in ascending order of
        their smallest index
    """
    fingerprints = []
    for record in records:
        if record.fingerprint is None:
            raise ValueError(f"Record has no fingerprint: {record.path}")
        fingerprints.append(record.fingerprint)

    if len(fingerprints) < 2:
        return []

    if use_union_find is None:
        use_union_find = len(fingerprints) >= auto_threshold
        if use_union_find and logger:
            logger.info(f"Using Union-Find grouping for {len(fingerprints):,} images")

    if use_union_find:
        components = _union_find_components(fingerprints, bits, progress_callback, show_progress)
    else:
        adjacency = build_adjacency(fingerprints, bits, progress_callback, show_progress)
        if logger:
            edges = sum(len(v) for v in adjacency.values()) // 2
            logger.debug(f"Found {edges:,} matching pairs among {len(fingerprints):,} images")
        components = _closure_components(adjacency, len(fingerprints))

    return [
        Cluster(
            id=start_id + k,
            indices=members,
            records=[records[i] for i in members],
        )
        for k, members in enumerate(components)
    ]


def find_similar_images(
    records: Sequence[SourceRecord],
    config: ScanConfig,
    start_id: int = 1,
    progress_callback: Optional[Callable[[int, int], None]] = None,
    show_progress: bool = False,
    logger: Optional[logging.Logger] = None,
) -> list[Cluster]:
    """
    Cluster the successfully fingerprinted records of a scan.

    Records with a decode error are left out entirely.

    Args:
        records: SourceRecords in discovery order
        config: Scan configuration supplying the threshold
        start_id: Starting ID for clusters
        progress_callback: Optional callback(current, total) for progress
        show_progress: Whether to show tqdm progress bar
        logger: Optional logger for status messages

    Returns:
        List of Cluster objects
    """
    candidates = [r for r in records if r.error is None and r.fingerprint is not None]
    if logger:
        logger.info(
            f"Cross-matching {len(candidates):,} files "
            f"(threshold {config.threshold_percent:g}% = {config.threshold_bits} bits)"
        )
    return build_clusters(
        candidates,
        config.threshold_bits,
        use_union_find=config.use_union_find,
        start_id=start_id,
        progress_callback=progress_callback,
        show_progress=show_progress,
        logger=logger,
        auto_threshold=config.union_find_auto_threshold,
    )


__all__ = [
    'AdjacencyMap',
    'diff_bits',
    'threshold_bits',
    'build_adjacency',
    'find_equivalent',
    'build_clusters',
    'find_similar_images',
]
