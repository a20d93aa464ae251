"""Quality ranking for picking the copy to keep in a duplicate group."""

import logging
from collections.abc import Iterable, Sequence
from functools import reduce

from .models import CatalogEntry, IdentityGroup, RankedGroup

logger = logging.getLogger(__name__)


def _better_of(prev: CatalogEntry, current: CatalogEntry) -> CatalogEntry:
    """
    Return the preferred entry of a pair.

    Higher primary bitrate wins; on equal bitrate the larger primary size wins.
    A full tie keeps prev, the entry seen earlier.
    """
    prev_bitrate = prev.primary_bitrate_bps
    curr_bitrate = current.primary_bitrate_bps

    if curr_bitrate > prev_bitrate:
        return current
    if curr_bitrate == prev_bitrate:
        return current if current.primary_size_bytes > prev.primary_size_bytes else prev
    return prev


def pick_preferred(members: Sequence[CatalogEntry]) -> str:
    """
    Pick the entry to keep from a group of duplicates.

    Args:
        members: Non-empty sequence of entries, in group order

    Returns:
        Id of the preferred entry

    Raises:
        ValueError: If members is empty

    Example:
        Bitrates/sizes [(5000, 10), (8000, 5), (8000, 5)] pick the entry at index 1.
    """
    if not members:
        raise ValueError("pick_preferred() requires at least one entry")
    return reduce(_better_of, members).id


class QualityRanker:
    """Selects the preferred entry of each duplicate group."""

    def rank_group(self, group: IdentityGroup) -> RankedGroup:
        """
        Rank a single group.

        Args:
            group: Identity group to rank

        Returns:
            RankedGroup carrying the group's data and the preferred entry id
        """
        preferred_id = pick_preferred(group.members)
        logger.debug(f"Preferred entry for {group.key}: {preferred_id}")
        return RankedGroup(
            key=group.key,
            title=group.title,
            year=group.year,
            members=group.members,
            preferred_id=preferred_id,
        )

    def rank_groups(self, groups: Iterable[IdentityGroup]) -> list[RankedGroup]:
        """Rank every group, keeping their order."""
        ranked = [self.rank_group(group) for group in groups]
        logger.info(f"Ranked {len(ranked)} duplicate groups")
        return ranked
