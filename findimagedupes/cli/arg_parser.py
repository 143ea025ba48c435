"""
Argument parsing for the CLI interface.

Provides functions to create and configure the argument parser for the
findimagedupes command-line interface. Defaults come from the user
configuration (environment and config file) so they can be tuned without
flags.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from ..user_config import get_user_config
from ..utils.exporters import EXPORT_FORMATS


def create_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance
    """
    user_config = get_user_config()
    default_threshold = user_config.default_threshold
    default_workers = user_config.default_workers
    default_extensions = user_config.default_extensions

    parser = argparse.ArgumentParser(
        prog='findimagedupes',
        description='Find visually similar or duplicate images',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s ~/Pictures
      Report groups of possible matches under ~/Pictures

  %(prog)s ~/Pictures /mnt/backup/photos --threshold 5
      Stricter matching across two directory trees

  %(prog)s ~/Pictures --extensions jpg,png,webp
      Only consider the listed extensions

  %(prog)s ~/Pictures --export matches.csv --export-format csv
      Export the groups to CSV for external review
        """
    )

    # Positional arguments
    parser.add_argument(
        'directories',
        type=Path,
        nargs='*',
        help='Directories to scan, or image files to include'
    )

    # Matching options
    parser.add_argument(
        '-t', '--threshold',
        type=float,
        default=default_threshold,
        help=f'Percentage of the 256 fingerprint bits that may differ (0-100). Default: {default_threshold:g}'
    )

    parser.add_argument(
        '-e', '--extensions',
        default=default_extensions,
        help=f'File extensions to consider, comma-separated. Default: {default_extensions}'
    )

    parser.add_argument(
        '-r', '--no-recursive',
        action='store_true',
        help='Do not scan subdirectories'
    )

    # Grouping strategy (mutually exclusive)
    grouping = parser.add_mutually_exclusive_group()
    grouping.add_argument(
        '--union-find',
        action='store_true',
        dest='force_union_find',
        help='Force Union-Find grouping (same output, faster on large collections)'
    )
    grouping.add_argument(
        '--no-union-find',
        action='store_true',
        dest='no_union_find',
        help='Force fixed-point closure grouping (disable auto-selection)'
    )

    # Performance options
    parser.add_argument(
        '-w', '--workers',
        type=int,
        default=default_workers,
        help=f'Number of parallel workers. Default: {default_workers}'
    )

    # Export options
    parser.add_argument(
        '-o', '--export',
        type=Path,
        help='Export results to file'
    )

    parser.add_argument(
        '--export-format',
        choices=list(EXPORT_FORMATS),
        default='txt',
        help='Export format. Default: txt'
    )

    # Output options
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Verbose output'
    )

    parser.add_argument(
        '--no-progress',
        action='store_true',
        help='Disable progress bars (useful for piping output)'
    )

    return parser


def parse_arguments(argv=None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        argv: List of argument strings (default: sys.argv)

    Returns:
        Parsed arguments as Namespace object

    Examples:
        >>> args = parse_arguments(['/path/to/photos', '--threshold', '5'])
        >>> args.directories
        [PosixPath('/path/to/photos')]
        >>> args.threshold
        5.0
    """
    parser = create_parser()
    return parser.parse_args(argv)


__all__ = [
    'create_parser',
    'parse_arguments',
]
