"""
File discovery module for the scanner package.

Provides functionality to find and enumerate image files in directories,
filtered by a case-insensitive extension allow-list, in a stable order.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Union

from ..config import DEFAULT_EXTENSIONS, HEIF_EXTENSIONS
from .dependencies import HAS_HEIF_SUPPORT


def parse_extensions(value: Union[str, Iterable[str]]) -> set[str]:
    """
    Normalize an extension allow-list.

    Accepts a comma-separated string or an iterable. Entries are trimmed,
    lowercased and given a leading dot; empty entries are dropped.

    Examples:
        >>> sorted(parse_extensions("jpg, PNG,.gif"))
        ['.gif', '.jpg', '.png']
    """
    if isinstance(value, str):
        value = value.split(',')

    extensions = set()
    for ext in value:
        ext = ext.strip().lower()
        if not ext:
            continue
        if not ext.startswith('.'):
            ext = '.' + ext
        extensions.add(ext)
    return extensions


def find_image_files(
    roots: Union[str, Path, Iterable[Union[str, Path]]],
    extensions: Union[str, Iterable[str]] = DEFAULT_EXTENSIONS,
    recursive: bool = True,
) -> list[str]:
    """
    Find all image files under the given roots.

    Args:
        roots: Directory (or list of directories) to search for images
        extensions: Allowed extensions, compared case-insensitively
        recursive: If True, search subdirectories recursively

    Returns:
        List of absolute file paths as strings. Roots are walked in the
        order given and entries within a root in sorted path order.

    Notes:
        - Filters out HEIC/HEIF files if pillow-heif is not installed
        - Handles symlinks by resolving to canonical paths
        - Deduplicates files that may be encountered via multiple paths
        - A root that is a file is kept if its extension is allowed
    """
    if isinstance(roots, (str, Path)):
        roots = [roots]

    extensions_to_scan = parse_extensions(extensions)
    if not HAS_HEIF_SUPPORT:
        extensions_to_scan -= HEIF_EXTENSIONS

    images = []
    seen = set()  # Track resolved paths to avoid duplicates

    for root in roots:
        root = Path(root)
        if root.is_file():
            candidates = [root]
        else:
            # Choose iterator based on recursive flag
            iterator = root.rglob('*') if recursive else root.glob('*')
            candidates = sorted(iterator)

        for filepath in candidates:
            if filepath.is_file() and filepath.suffix.lower() in extensions_to_scan:
                # Resolve to absolute path and deduplicate
                resolved = str(filepath.resolve())
                if resolved not in seen:
                    seen.add(resolved)
                    images.append(resolved)

    return images


__all__ = ['find_image_files', 'parse_extensions']
