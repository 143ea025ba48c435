"""
Utilities package for findimagedupes.

Provides:
- formatters: Human-readable formatting for numbers, time, and file sizes
- validators: Input validation for scan parameters
- exporters: Export clustering results to files
"""

from __future__ import annotations

# Import submodules for convenient access
from . import formatters
from . import validators
from . import exporters

# Export commonly used functions and classes
from .formatters import format_number, format_time_estimate, format_size, format_threshold
from .validators import (
    validate_directory,
    validate_scan_root,
    validate_threshold,
    validate_workers,
    validate_extensions,
    validate_scan_params,
)
from .exporters import export_results, format_cluster_text, EXPORT_FORMATS

__all__ = [
    # Submodules
    'formatters',
    'validators',
    'exporters',
    # Formatters
    'format_number',
    'format_time_estimate',
    'format_size',
    'format_threshold',
    # Validators
    'validate_directory',
    'validate_scan_root',
    'validate_threshold',
    'validate_workers',
    'validate_extensions',
    'validate_scan_params',
    # Exporters
    'export_results',
    'format_cluster_text',
    'EXPORT_FORMATS',
]
