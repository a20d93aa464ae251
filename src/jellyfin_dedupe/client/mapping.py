"""Mapping of Jellyfin JSON payloads onto catalog models."""

import logging
import re
from collections.abc import Callable
from typing import Any, TypeVar

from pydantic import ValidationError

from ..core.models import CatalogEntry, ExternalIds, Library, MediaSource, MediaStream
from .errors import MalformedResponseError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Jellyfin reports 100ns precision, datetime holds microseconds
_LONG_FRACTION = re.compile(r"(\.\d{6})\d+")


def _trim_timestamp(value: str | None) -> str | None:
    if not value:
        return None
    return _LONG_FRACTION.sub(r"\1", value)


def _map_stream(data: dict[str, Any]) -> MediaStream:
    return MediaStream(
        type=data.get("Type") or "Unknown",
        codec=data.get("Codec"),
        language=data.get("Language"),
        width=data.get("Width"),
        height=data.get("Height"),
        bitrate_bps=data.get("BitRate"),
        is_default=bool(data.get("IsDefault", False)),
        channel_layout=data.get("ChannelLayout"),
    )


def _map_source(data: dict[str, Any]) -> MediaSource:
    return MediaSource(
        id=data.get("Id"),
        name=data.get("Name"),
        path=data.get("Path"),
        container=data.get("Container"),
        size_bytes=data.get("Size"),
        bitrate_bps=data.get("Bitrate"),
        streams=tuple(_map_stream(s) for s in data.get("MediaStreams") or []),
    )


def map_item(data: dict[str, Any]) -> CatalogEntry:
    """
    Map a Jellyfin item payload to a CatalogEntry.

    Args:
        data: One element of the "Items" array returned by the server

    Returns:
        CatalogEntry with provider ids, media sources and display fields

    Raises:
        MalformedResponseError: If the payload does not have the expected shape
    """
    try:
        provider_ids = data.get("ProviderIds") or {}
        image_tags = data.get("ImageTags") or {}
        return CatalogEntry(
            id=data["Id"],
            title=data.get("Name"),
            release_year=data.get("ProductionYear"),
            external_ids=ExternalIds(
                tmdb=provider_ids.get("Tmdb"),
                imdb=provider_ids.get("Imdb"),
            ),
            sources=tuple(_map_source(s) for s in data.get("MediaSources") or []),
            original_title=data.get("OriginalTitle"),
            item_type=data.get("Type"),
            date_created=_trim_timestamp(data.get("DateCreated")),
            image_tag=image_tags.get("Primary"),
            official_rating=data.get("OfficialRating"),
            runtime_ticks=data.get("RunTimeTicks"),
        )
    except (KeyError, TypeError, AttributeError, ValidationError) as e:
        raise MalformedResponseError(f"Unexpected item payload from server: {e}") from e


def map_library(data: dict[str, Any]) -> Library:
    """Map a Jellyfin view payload to a Library."""
    try:
        image_tags = data.get("ImageTags") or {}
        return Library(
            id=data["Id"],
            name=data.get("Name") or data["Id"],
            collection_type=data.get("CollectionType"),
            image_tag=image_tags.get("Primary"),
        )
    except (KeyError, TypeError, AttributeError, ValidationError) as e:
        raise MalformedResponseError(f"Unexpected library payload from server: {e}") from e


def map_items(payload: Any, mapper: Callable[[dict[str, Any]], T]) -> list[T]:
    """Map the "Items" array of a list response with the given mapper."""
    if not isinstance(payload, dict):
        raise MalformedResponseError("Expected a JSON object from server")

    items = payload.get("Items") or []
    if not isinstance(items, list):
        raise MalformedResponseError("Expected 'Items' to be a list")

    logger.debug(f"Mapping {len(items)} items from server response")
    return [mapper(item) for item in items]
