"""Catalog scanning module tying a catalog source to the grouper and ranker."""

import logging
import time
from collections.abc import Sequence
from typing import Protocol

from .grouper import DuplicateGrouper
from .models import CatalogEntry, Library, ScanResult
from .ranker import QualityRanker

logger = logging.getLogger(__name__)


class ProgressCallback(Protocol):
    """Protocol for progress callback functions."""

    def __call__(self, current: int, total: int | None = None, message: str = "") -> None:
        """Called to report progress during scanning."""
        ...


class CatalogSource(Protocol):
    """Anything that can list movies and delete them, such as JellyfinClient."""

    def fetch_movies(self, parent_id: str | None = None) -> list[CatalogEntry]:
        ...

    def delete_item(self, item_id: str) -> None:
        ...


class CatalogScanner:
    """Fetches catalog snapshots and analyses them for duplicates."""

    def __init__(
        self,
        source: CatalogSource,
        grouper: DuplicateGrouper | None = None,
        ranker: QualityRanker | None = None,
    ):
        """
        Initialize the scanner.

        Args:
            source: Catalog source used to fetch and delete entries
            grouper: Duplicate grouper, defaults to DuplicateGrouper()
            ranker: Quality ranker, defaults to QualityRanker()
        """
        self.source = source
        self.grouper = grouper or DuplicateGrouper()
        self.ranker = ranker or QualityRanker()

    def analyze(
        self,
        entries: Sequence[CatalogEntry],
        title_filter: str = "",
        library: Library | None = None,
    ) -> ScanResult:
        """
        Analyse an already fetched catalog snapshot.

        Args:
            entries: Catalog entries to analyse
            title_filter: Optional case-insensitive substring to match group titles
            library: Library the entries came from, for reporting

        Returns:
            ScanResult with ranked duplicate groups
        """
        start = time.perf_counter()

        groups = self.grouper.create_duplicate_groups(entries, title_filter)
        ranked_groups = self.ranker.rank_groups(groups)

        return ScanResult(
            library_id=library.id if library else None,
            library_name=library.name if library else None,
            entries_scanned=len(entries),
            groups=ranked_groups,
            title_filter=title_filter,
            scan_duration_seconds=time.perf_counter() - start,
        )

    def scan(
        self,
        library: Library | None = None,
        title_filter: str = "",
        progress_callback: ProgressCallback | None = None,
    ) -> tuple[list[CatalogEntry], ScanResult]:
        """
        Fetch a fresh snapshot and analyse it.

        Args:
            library: Library to scan, or None for every library
            title_filter: Optional case-insensitive substring to match group titles
            progress_callback: Optional callback for progress updates

        Returns:
            The fetched snapshot and its ScanResult. Keep the snapshot to apply
            deletions locally with delete_entry().
        """
        start = time.perf_counter()
        scope = library.name if library else "all libraries"

        if progress_callback:
            progress_callback(0, None, f"Scanning {scope}...")

        logger.info(f"Fetching movies from {scope}")
        entries = self.source.fetch_movies(library.id if library else None)

        if progress_callback:
            progress_callback(len(entries), len(entries), "Identifying duplicates...")

        result = self.analyze(entries, title_filter=title_filter, library=library)
        result.scan_duration_seconds = time.perf_counter() - start

        logger.info(f"Scan complete: {result}")
        return entries, result

    def delete_entry(self, entries: Sequence[CatalogEntry], item_id: str) -> list[CatalogEntry]:
        """
        Delete an entry on the server and drop it from the snapshot.

        Args:
            entries: Current catalog snapshot
            item_id: Id of the entry to delete

        Returns:
            The snapshot without the deleted entry, ready for analyze()

        Errors raised by the source propagate and leave the snapshot unchanged.
        """
        self.source.delete_item(item_id)
        logger.info(f"Deleted entry {item_id}")
        return [entry for entry in entries if entry.id != item_id]
