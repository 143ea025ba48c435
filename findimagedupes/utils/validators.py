"""
Input validation for findimagedupes.

Provides validators for scan directories, the match threshold, worker
counts and extension lists. Each returns an (is_valid, error_message) tuple.
"""

from __future__ import annotations

import os
from typing import Iterable, Optional, Union


def validate_directory(directory: str, require_absolute: bool = False) -> tuple[bool, str]:
    """
    Validate that a directory exists and is accessible.

    Args:
        directory: Directory path to validate
        require_absolute: Reject relative paths (used by the web API)

    Returns:
        Tuple of (is_valid, error_message)

    Examples:
        >>> validate_directory('/nonexistent/directory')
        (False, 'Directory not found: /nonexistent/directory')
    """
    if not directory:
        return False, "Directory path is required"

    directory = str(directory)

    if require_absolute and not os.path.isabs(directory):
        return False, "Directory must be an absolute path"

    if not os.path.exists(directory):
        return False, f"Directory not found: {directory}"

    if not os.path.isdir(directory):
        return False, f"Path is not a directory: {directory}"

    if not os.access(directory, os.R_OK):
        return False, f"Cannot read directory (permission denied): {directory}"

    return True, ""


def validate_scan_root(path: str) -> tuple[bool, str]:
    """
    Validate a command-line scan root, which may be a directory or a file.

    Examples:
        >>> validate_scan_root('/nonexistent/photo.jpg')
        (False, 'Path not found: /nonexistent/photo.jpg')
    """
    if not path:
        return False, "Path is required"

    path = str(path)

    if not os.path.exists(path):
        return False, f"Path not found: {path}"

    if not os.access(path, os.R_OK):
        return False, f"Cannot read path (permission denied): {path}"

    return True, ""


def validate_threshold(threshold: float) -> tuple[bool, str]:
    """
    Validate that a threshold percentage is within acceptable range.

    Args:
        threshold: Threshold as a percentage of the fingerprint bits (0-100)

    Returns:
        Tuple of (is_valid, error_message)

    Examples:
        >>> validate_threshold(10)
        (True, '')
        >>> validate_threshold(150)
        (False, 'Threshold must be between 0 and 100 percent')
    """
    if isinstance(threshold, bool):
        return False, "Threshold must be a number"
    try:
        threshold = float(threshold)
    except (ValueError, TypeError):
        return False, "Threshold must be a number"
    if not 0.0 <= threshold <= 100.0:
        return False, "Threshold must be between 0 and 100 percent"
    return True, ""


def validate_workers(workers: int) -> tuple[bool, str]:
    """Validate a worker count (1-32)."""
    if isinstance(workers, bool):
        return False, "Workers must be an integer"
    try:
        workers = int(workers)
    except (ValueError, TypeError):
        return False, "Workers must be an integer"
    if not 1 <= workers <= 32:
        return False, "Workers must be between 1 and 32"
    return True, ""


def validate_extensions(extensions: Union[str, Iterable[str]]) -> tuple[bool, str]:
    """Validate that an extension list names at least one extension."""
    if isinstance(extensions, str):
        extensions = extensions.split(',')
    try:
        names = [str(ext).strip().lstrip('.') for ext in extensions]
    except TypeError:
        return False, "Extensions must be a list or comma-separated string"
    if not any(names):
        return False, "At least one file extension is required"
    return True, ""


def validate_scan_params(
    directories: list,
    threshold: Optional[float] = None,
    workers: Optional[int] = None,
    extensions: Optional[Union[str, Iterable[str]]] = None,
    require_absolute: bool = False,
) -> tuple[bool, str]:
    """
    Validate all scan parameters.

    Args:
        directories: Directories to scan
        threshold: Match threshold percentage (optional)
        workers: Number of worker threads (optional)
        extensions: Extension allow-list (optional)
        require_absolute: Reject relative directory paths

    Returns:
        Tuple of (is_valid, error_message)

    Examples:
        >>> validate_scan_params([], threshold=10)
        (False, 'At least one directory is required')
    """
    if not directories:
        return False, "At least one directory is required"

    for directory in directories:
        is_valid, error = validate_directory(directory, require_absolute=require_absolute)
        if not is_valid:
            return False, error

    if threshold is not None:
        is_valid, error = validate_threshold(threshold)
        if not is_valid:
            return False, error

    if workers is not None:
        is_valid, error = validate_workers(workers)
        if not is_valid:
            return False, error

    if extensions is not None:
        is_valid, error = validate_extensions(extensions)
        if not is_valid:
            return False, error

    return True, ""


__all__ = [
    'validate_directory',
    'validate_scan_root',
    'validate_threshold',
    'validate_workers',
    'validate_extensions',
    'validate_scan_params',
]
