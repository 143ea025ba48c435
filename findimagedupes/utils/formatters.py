"""
Formatting utilities for findimagedupes.

Provides human-readable formatting for counts, time estimates, file sizes
and match thresholds.
"""

from __future__ import annotations

# Re-export format_size from models for convenience
from ..models import format_size, threshold_bits


def format_number(n: int) -> str:
    """
    Format large numbers with commas for readability.

    Examples:
        >>> format_number(1234567)
        '1,234,567'
    """
    return f"{n:,}"


def format_time_estimate(seconds: float) -> str:
    """
    Format seconds into a short time estimate.

    Examples:
        >>> format_time_estimate(45)
        '45s'
        >>> format_time_estimate(150)
        '2m 30s'
        >>> format_time_estimate(3665)
        '1h 1m'
    """
    if seconds < 60:
        return f"{int(seconds)}s"
    elif seconds < 3600:
        return f"{int(seconds / 60)}m {int(seconds % 60)}s"
    hours = int(seconds / 3600)
    minutes = int((seconds % 3600) / 60)
    return f"{hours}h {minutes}m"


def format_threshold(percent: float) -> str:
    """
    Describe a threshold percentage together with its bit count.

    Examples:
        >>> format_threshold(10.0)
        '10% (26 bits)'
    """
    return f"{percent:g}% ({threshold_bits(percent)} bits)"


__all__ = ['format_number', 'format_time_estimate', 'format_size', 'format_threshold']
