"""
CLI workflow orchestration for findimagedupes.

Provides the CLIOrchestrator class that coordinates the CLI workflow from
argument parsing through fingerprinting, clustering and reporting.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..models import ScanConfig
from ..scanner import (
    find_image_files,
    analyze_images_parallel,
    find_similar_images,
)
from ..scanner.dependencies import set_pixel_limit
from ..user_config import get_user_config
from ..utils.exporters import export_results
from ..utils.formatters import format_threshold
from ..utils.validators import validate_scan_root, validate_threshold, validate_workers, validate_extensions
from .arg_parser import parse_arguments
from .reporting import print_cluster_report


def setup_logging(verbose: bool = False) -> logging.Logger:
    """
    Configure logging for the CLI.

    Args:
        verbose: Enable verbose (DEBUG level) logging

    Returns:
        Configured logger instance
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    return logging.getLogger(__name__)


class CLIOrchestrator:
    """
    Orchestrates the CLI scanning workflow.

    Manages the complete lifecycle from argument parsing through
    fingerprinting, clustering and reporting.
    """

    def __init__(self, argv: Optional[list[str]] = None):
        """
        Initialize the orchestrator.

        Args:
            argv: Argument list to parse instead of sys.argv
        """
        self.argv = argv
        self.logger = None
        self.args = None
        self.config: Optional[ScanConfig] = None
        self.image_files = []
        self.records = []
        self.clusters = []

    def run(self) -> int:
        """
        Execute the complete CLI workflow.

        Returns:
            Exit code (0 for success, 1 for error)

        Workflow phases:
        1. Setup & argument parsing
        2. Validation
        3. Configuration
        4. File scanning
        5. Fingerprinting
        6. Clustering
        7. Reporting & export
        """
        # Phase 1: Setup
        self._setup_phase()

        # Nothing to scan is not an error
        if not self.args.directories:
            return 0

        # Phase 2: Validation
        exit_code = self._validate_phase()
        if exit_code != 0:
            return exit_code

        # Phase 3: Configuration
        self._configure_phase()

        # Phase 4: Scanning
        self._scan_phase()
        if not self.image_files:
            return 0

        # Phase 5: Fingerprinting
        self._analyze_phase()

        # Phase 6: Clustering
        self._cluster_phase()

        # Phase 7: Reporting
        return self._report_phase()

    def _setup_phase(self) -> None:
        """Phase 1: Parse arguments and setup logging."""
        self.args = parse_arguments(self.argv)
        self.logger = setup_logging(self.args.verbose)

    def _validate_phase(self) -> int:
        """
        Phase 2: Validate arguments.

        Returns:
            0 for success, 1 for validation error
        """
        for root in self.args.directories:
            is_valid, error = validate_scan_root(root)
            if not is_valid:
                self.logger.error(error)
                return 1

        checks = (
            validate_threshold(self.args.threshold),
            validate_workers(self.args.workers),
            validate_extensions(self.args.extensions),
        )
        for is_valid, error in checks:
            if not is_valid:
                self.logger.error(error)
                return 1

        return 0

    def _configure_phase(self) -> None:
        """Phase 3: Build the explicit scan configuration."""
        user_config = get_user_config()
        set_pixel_limit(user_config.max_image_pixels)

        use_union_find = None  # Auto-select by default
        if self.args.force_union_find:
            use_union_find = True
            self.logger.info("Union-Find grouping forced on")
        elif self.args.no_union_find:
            use_union_find = False
            self.logger.info("Union-Find grouping disabled")

        self.config = user_config.scan_config(
            threshold_percent=self.args.threshold,
            extensions=self.args.extensions,
            recursive=not self.args.no_recursive,
            workers=self.args.workers,
            use_union_find=use_union_find,
        )
        self.show_progress = not self.args.no_progress

        self.logger.debug(f"Scanning for extensions: {' '.join(self.config.extensions)}")
        self.logger.debug(f"Match threshold: {format_threshold(self.config.threshold_percent)}")

    def _scan_phase(self) -> None:
        """Phase 4: Scan for image files."""
        for directory in self.args.directories:
            self.logger.debug(f"Scanning {directory}")

        self.image_files = find_image_files(
            self.args.directories,
            extensions=self.config.extensions,
            recursive=self.config.recursive,
        )
        self.logger.info(f"Found {len(self.image_files):,} image files")

        if not self.image_files:
            self.logger.info("No images found. Exiting.")

    def _analyze_phase(self) -> None:
        """Phase 5: Fingerprint images in parallel and drop undecodable files."""
        self.logger.info("Fingerprinting images...")
        self.records = analyze_images_parallel(
            self.image_files,
            max_workers=self.config.workers,
            show_progress=self.show_progress,
            logger=self.logger,
        )

        for record in self.records:
            if record.error:
                self.logger.warning(f"Error decoding image {record.path}; ignoring. {record.error}")

        failed = sum(1 for record in self.records if record.error)
        if failed:
            self.logger.warning(f"Could not decode {failed:,} files")

    def _cluster_phase(self) -> None:
        """Phase 6: Group similar fingerprints."""
        self.clusters = find_similar_images(
            self.records,
            self.config,
            show_progress=self.show_progress,
            logger=self.logger,
        )

    def _report_phase(self) -> int:
        """
        Phase 7: Print the report and handle exports.

        Returns:
            0 for success, 1 if the export could not be written
        """
        print_cluster_report(self.clusters, self.logger)

        if self.args.export:
            try:
                export_results(self.clusters, self.args.export, self.args.export_format)
            except OSError as e:
                self.logger.error(f"Could not write export file {self.args.export}: {e}")
                return 1
            self.logger.info(f"Results exported to: {self.args.export}")

        return 0


__all__ = ['CLIOrchestrator', 'setup_logging']
