"""Duplicate grouping module for clustering catalog entries by identity."""

import locale
import logging
import re
import unicodedata
from collections.abc import Iterable, Sequence

from .models import CatalogEntry, IdentityGroup

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^a-z0-9]")

NO_YEAR_TOKEN = "0000"


def normalize_title(title: str | None) -> str:
    """
    Normalize a title for name based matching.

    The title is lower-cased and every character outside [a-z0-9] is deleted,
    so "Spider-Man" and "SpiderMan" normalize identically.

    Example:
        >>> normalize_title("Spider-Man!")
        'spiderman'
    """
    return _NON_ALNUM.sub("", (title or "").lower())


def derive_group_key(entry: CatalogEntry) -> str:
    """
    Derive the identity key of a catalog entry.

    Args:
        entry: Catalog entry to derive the key for

    Returns:
        "tmdb-<id>" when a TMDB id is present, else "imdb-<id>" when an IMDb id
        is present, else "name-<normalized title>-<year or 0000>"
    """
    ids = entry.external_ids
    if ids.tmdb:
        return f"tmdb-{ids.tmdb}"
    if ids.imdb:
        return f"imdb-{ids.imdb}"
    year = entry.release_year or NO_YEAR_TOKEN
    return f"name-{normalize_title(entry.title)}-{year}"


def _fold_title(title: str) -> str:
    """Strip accents and case so "Éclair" collates next to "eclair"."""
    decomposed = unicodedata.normalize("NFKD", title)
    return "".join(c for c in decomposed if not unicodedata.combining(c)).casefold()


def _title_sort_key(group: IdentityGroup) -> tuple[str, str, str]:
    # strxfrm rejects NUL, and only breaks ties left by the folded title
    title = group.title.replace("\x00", "")
    return _fold_title(title), locale.strxfrm(title.casefold()), locale.strxfrm(title)


class DuplicateGrouper:
    """Groups catalog entries that refer to the same movie."""

    def group_by_key(self, entries: Iterable[CatalogEntry]) -> dict[str, list[CatalogEntry]]:
        """
        Partition entries by their identity key.

        Args:
            entries: Catalog entries in catalog order

        Returns:
            Dictionary mapping keys to entries, both in first-seen order

        Example:
            >>> grouper = DuplicateGrouper()
            >>> groups = grouper.group_by_key([entry1, entry2, entry3])
            >>> groups["tmdb-603"]  # [entry1, entry3]
        """
        groups: dict[str, list[CatalogEntry]] = {}

        for entry in entries:
            groups.setdefault(derive_group_key(entry), []).append(entry)

        logger.debug(f"Partitioned entries into {len(groups)} identity keys")
        return groups

    def create_duplicate_groups(
        self, entries: Sequence[CatalogEntry], title_filter: str = ""
    ) -> list[IdentityGroup]:
        """
        Create duplicate groups from a catalog snapshot.

        Args:
            entries: Catalog entries to analyse
            title_filter: Optional case-insensitive substring to match group titles

        Returns:
            Identity groups with more than one member, sorted by title

        The first entry seen for a key provides the group's title and year.
        Single entries are not considered duplicates.
        """
        duplicate_groups = []

        for key, members in self.group_by_key(entries).items():
            # Only create duplicate groups for multiple entries
            if len(members) < 2:
                continue

            first = members[0]
            duplicate_groups.append(
                IdentityGroup(
                    key=key,
                    title=first.title,
                    year=first.release_year,
                    members=tuple(members),
                )
            )
            logger.debug(f"Created duplicate group: {key} ({len(members)} entries)")

        duplicate_groups = self.filter_by_title(duplicate_groups, title_filter)
        duplicate_groups = self.sort_groups(duplicate_groups)

        logger.info(f"Grouped {len(entries)} entries into {len(duplicate_groups)} duplicate groups")
        return duplicate_groups

    @staticmethod
    def filter_by_title(groups: list[IdentityGroup], title_filter: str) -> list[IdentityGroup]:
        """
        Keep groups whose title contains the filter, ignoring case.

        An empty filter matches everything.
        """
        if not title_filter:
            return groups

        needle = title_filter.lower()
        return [group for group in groups if needle in group.title.lower()]

    @staticmethod
    def sort_groups(groups: list[IdentityGroup]) -> list[IdentityGroup]:
        """Sort groups by title with locale collation; equal titles keep their order."""
        return sorted(groups, key=_title_sort_key)


def group_entries(entries: Sequence[CatalogEntry], title_filter: str = "") -> list[IdentityGroup]:
    """Group a catalog snapshot into sorted duplicate groups."""
    return DuplicateGrouper().create_duplicate_groups(entries, title_filter)
