"""Pydantic models for the Jellyfin duplicate finder."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from . import stats
from .stats import BYTES_PER_GB


class MatchType(str, Enum):
    """How the members of an identity group were matched."""

    TMDB = "tmdb"
    IMDB = "imdb"
    NAME = "name"

    @property
    def label(self) -> str:
        """Human readable label for reports."""
        return {
            MatchType.TMDB: "TMDB Match",
            MatchType.IMDB: "IMDB Match",
            MatchType.NAME: "Name Match",
        }[self]


class ExternalIds(BaseModel):
    """Identifiers assigned by third-party metadata providers."""

    model_config = ConfigDict(frozen=True)

    tmdb: str | None = Field(None, description="The Movie Database identifier")
    imdb: str | None = Field(None, description="IMDb identifier")


class MediaStream(BaseModel):
    """A single stream (video, audio, subtitle) inside a media source."""

    model_config = ConfigDict(frozen=True)

    type: str = Field(..., description="Stream type as reported by the server (Video, Audio, ...)")
    codec: str | None = Field(None, description="Codec name")
    language: str | None = Field(None, description="Stream language")
    width: int | None = Field(None, ge=0, description="Frame width in pixels")
    height: int | None = Field(None, ge=0, description="Frame height in pixels")
    bitrate_bps: int | None = Field(None, ge=0, description="Stream bitrate in bits per second")
    is_default: bool = Field(default=False, description="Whether the stream is the default one")
    channel_layout: str | None = Field(None, description="Audio channel layout")


class MediaSource(BaseModel):
    """A file backing a catalog entry."""

    model_config = ConfigDict(frozen=True)

    id: str | None = Field(None, description="Source identifier")
    name: str | None = Field(None, description="Source display name")
    path: str | None = Field(None, description="Path of the file on the server")
    container: str | None = Field(None, description="Container format (mkv, mp4, ...)")
    size_bytes: int | None = Field(None, ge=0, description="File size in bytes")
    bitrate_bps: int | None = Field(None, ge=0, description="Overall bitrate in bits per second")
    streams: tuple[MediaStream, ...] = Field(default=(), description="Streams in this source")

    @property
    def video_stream(self) -> MediaStream | None:
        """First video stream of the source, if any."""
        return next((s for s in self.streams if s.type == "Video"), None)

    @property
    def effective_bitrate_bps(self) -> int:
        """Source bitrate, falling back to the video stream bitrate."""
        if self.bitrate_bps:
            return self.bitrate_bps
        video = self.video_stream
        if video and video.bitrate_bps:
            return video.bitrate_bps
        return 0

    @property
    def size_gb(self) -> float:
        """File size in gigabytes."""
        return (self.size_bytes or 0) / BYTES_PER_GB

    @property
    def bitrate_mbps(self) -> float:
        """Effective bitrate in megabits per second."""
        return self.effective_bitrate_bps / 1_000_000

    @property
    def resolution_label(self) -> str:
        """Short resolution label such as '1920p', or 'N/A'."""
        video = self.video_stream
        if video and video.width and video.height:
            return f"{video.width}p"
        return "N/A"


class CatalogEntry(BaseModel):
    """A movie in the server catalog."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Opaque unique identifier")
    title: str = Field(default="", description="Display name")
    release_year: int | None = Field(None, description="Production year")
    external_ids: ExternalIds = Field(default_factory=ExternalIds, description="Provider ids")
    sources: tuple[MediaSource, ...] = Field(default=(), description="Media sources, primary first")

    original_title: str | None = Field(None, description="Title in the original language")
    item_type: str | None = Field(None, description="Server item type")
    date_created: datetime | None = Field(None, description="When the server added the item")
    image_tag: str | None = Field(None, description="Tag of the primary image")
    official_rating: str | None = Field(None, description="Content rating")
    runtime_ticks: int | None = Field(None, ge=0, description="Runtime in 100ns ticks")

    @field_validator("title", mode="before")
    @classmethod
    def validate_title(cls, v: str | None) -> str:
        """Treat a missing title as empty."""
        return v or ""

    @property
    def primary_source(self) -> MediaSource | None:
        """The first media source, which is authoritative for ranking."""
        return self.sources[0] if self.sources else None

    @property
    def primary_size_bytes(self) -> int:
        """Size of the primary source, 0 when unknown."""
        source = self.primary_source
        return (source.size_bytes or 0) if source else 0

    @property
    def primary_bitrate_bps(self) -> int:
        """Bitrate of the primary source, 0 when unknown."""
        source = self.primary_source
        return (source.bitrate_bps or 0) if source else 0

    def __str__(self) -> str:
        year = f" ({self.release_year})" if self.release_year else ""
        return f"{self.title}{year} [{self.id}]"


class IdentityGroup(BaseModel):
    """Catalog entries that refer to the same movie."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(..., description="Grouping key, e.g. tmdb-603")
    title: str = Field(..., description="Title of the first entry seen for the key")
    year: int | None = Field(None, description="Year of the first entry seen for the key")
    members: tuple[CatalogEntry, ...] = Field(default=(), description="Entries in catalog order")

    @property
    def member_count(self) -> int:
        """Number of entries in this group."""
        return len(self.members)

    @property
    def match_type(self) -> MatchType:
        """Which identifier produced the grouping key."""
        return MatchType(self.key.split("-", 1)[0])

    @property
    def total_size_bytes(self) -> int:
        """Sum of the primary source sizes of all members."""
        return sum(entry.primary_size_bytes for entry in self.members)

    def __str__(self) -> str:
        return f"Identity group '{self.title}' ({self.key}, {self.member_count} entries)"


class RankedGroup(IdentityGroup):
    """An identity group with its preferred entry selected."""

    preferred_id: str = Field(..., description="Id of the entry recommended to keep")

    @property
    def preferred(self) -> CatalogEntry:
        """The entry recommended to keep."""
        return next(entry for entry in self.members if entry.id == self.preferred_id)

    @property
    def removal_candidates(self) -> list[CatalogEntry]:
        """Every member other than the preferred one, in member order."""
        return [entry for entry in self.members if entry.id != self.preferred_id]


class Library(BaseModel):
    """A user view (library) on the server."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Library identifier")
    name: str = Field(..., description="Library display name")
    collection_type: str | None = Field(None, description="Collection type (movies, tvshows, ...)")
    image_tag: str | None = Field(None, description="Tag of the primary image")

    def __str__(self) -> str:
        return self.name


class ScanResult(BaseModel):
    """Results from a catalog scan."""

    library_id: str | None = Field(None, description="Library that was scanned")
    library_name: str | None = Field(None, description="Display name of the scanned library")
    entries_scanned: int = Field(..., ge=0, description="Catalog entries analysed")
    groups: list[RankedGroup] = Field(default_factory=list, description="Duplicate groups")
    title_filter: str = Field(default="", description="Title filter applied to the groups")
    scan_duration_seconds: float = Field(default=0.0, ge=0, description="Time taken to scan")
    scan_timestamp: datetime = Field(
        default_factory=datetime.now, description="When the scan was performed"
    )

    @computed_field
    @property
    def duplicate_count(self) -> int:
        """Entries that could be removed while keeping one copy per group."""
        return stats.total_duplicate_count(self.groups)

    @computed_field
    @property
    def wasted_space_bytes(self) -> int:
        """Space taken by every copy except the largest one of each group."""
        return stats.wasted_space_bytes(self.groups)

    @property
    def wasted_space_gb(self) -> float:
        """Wasted space in gigabytes."""
        return self.wasted_space_bytes / BYTES_PER_GB

    def __str__(self) -> str:
        scope = self.library_name or self.library_id or "catalog"
        return (
            f"Scan of {scope}: {self.entries_scanned} movies, "
            f"{len(self.groups)} conflict groups, {self.duplicate_count} duplicates"
        )
