"""Core functionality for the Jellyfin duplicate finder."""

from .grouper import DuplicateGrouper, derive_group_key, group_entries, normalize_title
from .models import (
    CatalogEntry,
    ExternalIds,
    IdentityGroup,
    Library,
    MatchType,
    MediaSource,
    MediaStream,
    RankedGroup,
    ScanResult,
)
from .ranker import QualityRanker, pick_preferred
from .scanner import CatalogScanner, CatalogSource
from .stats import bytes_to_gb, total_duplicate_count, wasted_space_bytes

__all__ = [
    "CatalogEntry",
    "CatalogScanner",
    "CatalogSource",
    "DuplicateGrouper",
    "ExternalIds",
    "IdentityGroup",
    "Library",
    "MatchType",
    "MediaSource",
    "MediaStream",
    "QualityRanker",
    "RankedGroup",
    "ScanResult",
    "bytes_to_gb",
    "derive_group_key",
    "group_entries",
    "normalize_title",
    "pick_preferred",
    "total_duplicate_count",
    "wasted_space_bytes",
]
