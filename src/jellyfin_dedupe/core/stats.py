"""Aggregate statistics over duplicate groups, used for reporting only."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import IdentityGroup

BYTES_PER_GB = 1024 * 1024 * 1024


def total_duplicate_count(groups: Iterable[IdentityGroup]) -> int:
    """
    Count the entries that could be removed while keeping one copy per group.

    Args:
        groups: Duplicate groups from a scan

    Returns:
        Sum over groups of (member count - 1)
    """
    return sum(len(group.members) - 1 for group in groups)


def wasted_space_bytes(groups: Iterable[IdentityGroup]) -> int:
    """
    Calculate the space held by redundant copies.

    For every group this is the sum of all primary source sizes minus the
    largest one; missing sizes count as 0.

    Example:
        A group with sizes [10, 20, 30] wastes 60 - 30 = 30 bytes.
    """
    total = 0
    for group in groups:
        sizes = [entry.primary_size_bytes for entry in group.members]
        if sizes:
            total += sum(sizes) - max(sizes)
    return total


def bytes_to_gb(size_bytes: int) -> float:
    """Convert bytes to gigabytes (1024^3)."""
    return size_bytes / BYTES_PER_GB
