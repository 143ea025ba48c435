"""
Scan orchestration for the findimagedupes web API.

Provides the ScanOrchestrator class that runs file discovery,
fingerprinting and clustering in the background while keeping the shared
ScanState up to date.
"""

from __future__ import annotations

import time
import logging
from datetime import datetime
from typing import Optional

from ..models import ScanConfig, SourceRecord
from ..scanner import (
    find_image_files,
    analyze_images_parallel,
    find_similar_images,
    ScanCancelled,
)
from ..state import ScanState
from ..utils import formatters

# Module logger
_logger = logging.getLogger(__name__)


class ProgressTracker:
    """
    Turns fingerprinting and comparison callbacks into ScanState updates.

    Fingerprinting covers 0-80% of the overall progress, comparison the rest.
    """

    def __init__(self, scan_state: ScanState):
        self.scan_state = scan_state
        self.started = time.time()

    def update_analysis_progress(self, current: int, total: int) -> None:
        """Record fingerprinting progress with a rate-based ETA."""
        elapsed = time.time() - self.started
        rate = current / elapsed if elapsed > 0 else 0
        message = (
            f'Fingerprinting images: {formatters.format_number(current)}/'
            f'{formatters.format_number(total)}'
        )
        if rate > 0 and current < total:
            eta = formatters.format_time_estimate((total - current) / rate)
            message += f' ({int(rate)}/sec, ~{eta} remaining)'

        self.scan_state.update(
            analyzed=current,
            progress=int(current / total * 80),
            message=message,
        )

    def update_comparison_progress(self, current: int, total: int) -> None:
        """Record pairwise comparison progress."""
        self.scan_state.update(
            progress=80 + int(current / max(1, total) * 20),
            message=(
                f'Cross-matching: {formatters.format_number(current)}/'
                f'{formatters.format_number(total)} comparisons'
            ),
        )


class ScanOrchestrator:
    """
    Orchestrates one background scan.

    Call prepare() from the request thread so the state reads as running
    before the worker thread starts, then run() in the worker thread.
    """

    def __init__(self, scan_state: ScanState, directories: list[str], config: ScanConfig):
        """
        Initialize the scan orchestrator.

        Args:
            scan_state: Shared scan state object
            directories: Directories to scan, in order
            config: Explicit scan configuration
        """
        self.scan_state = scan_state
        self.directories = list(directories)
        self.config = config

    def prepare(self) -> None:
        """Reset the shared state and mark the scan as started."""
        self.scan_state.reset()
        self.scan_state.update(
            status='scanning',
            message='Scanning for image files...',
            directories=self.directories,
            settings=self.config.to_dict(),
            started_at=datetime.now().isoformat(),
        )

    def run(self) -> None:
        """
        Execute the complete scan process.

        This is the main entry point that orchestrates all scan phases.
        """
        try:
            # Phase 1: Find images
            image_files = self._find_images()
            if image_files is None:
                return  # Cancelled or no images found

            # Phase 2: Fingerprint images
            records = self._analyze_images(image_files)

            # Phase 3: Cluster
            self._cluster(records)

        except ScanCancelled as e:
            _logger.info(str(e))
            self.scan_state.update(status='cancelled', message='Scan cancelled')
        except Exception as e:
            self.scan_state.update(status='error', message=f'Error: {e}')
            _logger.exception(f"Scan error: {e}")

    def _find_images(self) -> Optional[list[str]]:
        """
        Phase 1: Find image files in the directories.

        Returns:
            List of image paths, or None if cancelled or nothing was found
        """
        image_files = find_image_files(
            self.directories,
            extensions=self.config.extensions,
            recursive=self.config.recursive,
        )

        if self.scan_state.cancel_requested:
            raise ScanCancelled("Scan cancelled after file discovery")

        if not image_files:
            self.scan_state.update(status='complete', progress=100, message='No images found')
            return None

        self.scan_state.update(
            status='fingerprinting',
            total_files=len(image_files),
            message=f'Found {formatters.format_number(len(image_files))} images',
        )
        _logger.info(f"Found {len(image_files):,} image files")
        return image_files

    def _analyze_images(self, image_files: list[str]) -> list[SourceRecord]:
        """Phase 2: Fingerprint images in parallel."""
        tracker = ProgressTracker(self.scan_state)
        records = analyze_images_parallel(
            image_files,
            max_workers=self.config.workers,
            progress_callback=tracker.update_analysis_progress,
            show_progress=False,
            logger=_logger,
            cancel_check=lambda: self.scan_state.cancel_requested,
        )

        errors = [r for r in records if r.error]
        for record in errors:
            _logger.warning(f"Error decoding image {record.path}; ignoring. {record.error}")

        self.scan_state.update(error_records=errors)
        return records

    def _cluster(self, records: list[SourceRecord]) -> None:
        """Phase 3: Cluster fingerprints and publish the results."""
        tracker = ProgressTracker(self.scan_state)
        self.scan_state.update(status='comparing', message='Cross-matching fingerprints...')

        clusters = find_similar_images(
            records,
            self.config,
            progress_callback=tracker.update_comparison_progress,
            logger=_logger,
        )

        self.scan_state.update(
            status='complete',
            progress=100,
            clusters=clusters,
            message=f'Found {formatters.format_number(len(clusters))} groups of possible matches',
        )


__all__ = ['ScanOrchestrator', 'ProgressTracker']
