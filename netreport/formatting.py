"""
Number and unit formatting for report text.
"""

from __future__ import annotations

import math


# Position in the tuple is the power of 1000 the suffix stands for.
SIZE_SUFFIXES: tuple[str, ...] = ("B", "KB", "MB", "GB", "TB", "PB", "EB")


def size_log_1000(byte_count: int) -> int:
    """
    Index into SIZE_SUFFIXES for a byte count.

    Zero, negative, and counts too large for the table all map to 0 ("B").
    """
    if byte_count <= 0:
        return 0
    index = int(math.log(byte_count) / math.log(1000))
    # float log can land just below an exact power of 1000
    if 1000 ** (index + 1) <= byte_count:
        index += 1
    elif index > 0 and 1000 ** index > byte_count:
        index -= 1
    if index >= len(SIZE_SUFFIXES) or index < 0:
        return 0
    return index


def format_size(byte_count: int) -> str:
    """Format a byte count as a scaled value with two decimals, e.g. '1.50 KB'."""
    index = size_log_1000(byte_count)
    value = float(byte_count) / math.pow(1000.0, index)
    return f"{value:.2f} {SIZE_SUFFIXES[index]}"


def comma_number_string(value: int) -> str:
    """Group an integer's digits by thousands: 1234567 -> '1,234,567'."""
    return f"{int(value):,}"


def percentage(part: int, total: int) -> int:
    """Integer percentage of total, truncated toward zero; 0 when total is 0."""
    if total <= 0:
        return 0
    return int((float(part) / float(total)) * 100.0)
