"""
Parallel processing module for the scanner package.

Provides parallel fingerprinting with progress tracking, callback support
and cancellation at the decode boundary. Results always come back in the
order the files were given, never in completion order, so clustering
output stays reproducible.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Optional, Callable

from ..config import DEFAULT_WORKERS
from ..models import SourceRecord
from .analysis import analyze_image
from .dependencies import progress_bar


class ScanCancelled(Exception):
    """Raised when a scan is cancelled before fingerprinting finished."""


def analyze_images_parallel(
    filepaths: list[str],
    max_workers: int = DEFAULT_WORKERS,
    progress_callback: Optional[Callable[[int, int], None]] = None,
    show_progress: bool = True,
    logger: Optional[logging.Logger] = None,
    cancel_check: Optional[Callable[[], bool]] = None,
) -> list[SourceRecord]:
    """
    Fingerprint multiple images in parallel.

    Args:
        filepaths: List of image paths, in discovery order
        max_workers: Number of parallel workers
        progress_callback: Optional callback(current, total) for progress updates
        show_progress: Whether to show tqdm progress bar
        logger: Optional logger for status messages
        cancel_check: Optional callable polled as files complete; returning
            True cancels the remaining work

    Returns:
        List of SourceRecord objects in the same order as filepaths

    Raises:
        ScanCancelled: If cancel_check requested cancellation
    """
    if not filepaths:
        return []

    results: list[Optional[SourceRecord]] = [None] * len(filepaths)

    pbar = progress_bar(len(filepaths), "Fingerprinting images", "img", show_progress)

    # Batch progress callbacks to reduce overhead (every 1000 files or 1 second)
    last_callback_time = time.time()
    callback_batch_size = 1000
    callback_interval = 1.0  # seconds

    start = time.time()
    try:
        with ThreadPoolExecutor(max_workers=max(1, max_workers)) as executor:
            futures = {
                executor.submit(analyze_image, path): index
                for index, path in enumerate(filepaths)
            }

            for done, future in enumerate(as_completed(futures), 1):
                if cancel_check is not None and cancel_check():
                    for pending in futures:
                        pending.cancel()
                    raise ScanCancelled(f"Scan cancelled after {done - 1:,} of {len(filepaths):,} files")

                results[futures[future]] = future.result()

                if pbar is not None:
                    pbar.update(1)

                if progress_callback:
                    current_time = time.time()
                    should_callback = (
                        done % callback_batch_size == 0 or
                        current_time - last_callback_time >= callback_interval or
                        done == len(filepaths)  # Always callback on last item
                    )
                    if should_callback:
                        progress_callback(done, len(filepaths))
                        last_callback_time = current_time
    finally:
        if pbar is not None:
            pbar.close()

    if logger:
        elapsed = time.time() - start
        failed = sum(1 for r in results if r is not None and r.error)
        logger.debug(
            f"Fingerprinted {len(filepaths) - failed:,} of {len(filepaths):,} files "
            f"in {elapsed:.1f}s ({failed:,} failed)"
        )

    return results


__all__ = ['analyze_images_parallel', 'ScanCancelled']
