"""Tests for Pydantic models."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from ..models import (
    CatalogEntry,
    ExternalIds,
    IdentityGroup,
    MatchType,
    MediaSource,
    MediaStream,
    RankedGroup,
    ScanResult,
)
from ..stats import BYTES_PER_GB


class TestMediaSource:
    """Test cases for MediaSource model."""

    def test_defaults(self) -> None:
        source = MediaSource()

        assert source.size_bytes is None
        assert source.bitrate_bps is None
        assert source.streams == ()
        assert source.video_stream is None
        assert source.effective_bitrate_bps == 0
        assert source.resolution_label == "N/A"

    def test_negative_size_rejected(self) -> None:
        with pytest.raises(ValidationError):
            MediaSource(size_bytes=-1)

    def test_video_stream_is_first_video(self) -> None:
        audio = MediaStream(type="Audio", codec="aac")
        video = MediaStream(type="Video", codec="hevc", width=1920, height=1080)
        source = MediaSource(streams=(audio, video))

        assert source.video_stream == video
        assert source.resolution_label == "1920p"

    def test_effective_bitrate_falls_back_to_video_stream(self) -> None:
        video = MediaStream(type="Video", bitrate_bps=8_000_000)

        assert MediaSource(streams=(video,)).effective_bitrate_bps == 8_000_000
        assert MediaSource(bitrate_bps=5_000_000, streams=(video,)).bitrate_mbps == 5.0

    def test_size_gb(self) -> None:
        assert MediaSource(size_bytes=2 * BYTES_PER_GB).size_gb == 2.0

    def test_frozen(self) -> None:
        source = MediaSource(size_bytes=1)
        with pytest.raises(ValidationError):
            source.size_bytes = 2


class TestCatalogEntry:
    """Test cases for CatalogEntry model."""

    def test_create_entry(self) -> None:
        created = datetime(2023, 1, 1, 12, 0, 0)
        entry = CatalogEntry(
            id="abc",
            title="The Matrix",
            release_year=1999,
            external_ids=ExternalIds(tmdb="603", imdb="tt0133093"),
            sources=(MediaSource(size_bytes=100, bitrate_bps=2000),),
            date_created=created,
        )

        assert entry.id == "abc"
        assert entry.external_ids.tmdb == "603"
        assert entry.primary_size_bytes == 100
        assert entry.primary_bitrate_bps == 2000
        assert entry.date_created == created
        assert str(entry) == "The Matrix (1999) [abc]"

    def test_missing_title_becomes_empty(self) -> None:
        assert CatalogEntry(id="x", title=None).title == ""
        assert CatalogEntry(id="x").title == ""

    def test_primary_values_without_sources(self) -> None:
        entry = CatalogEntry(id="x", title="X")

        assert entry.primary_source is None
        assert entry.primary_size_bytes == 0
        assert entry.primary_bitrate_bps == 0

    def test_primary_source_is_first(self) -> None:
        first = MediaSource(size_bytes=1)
        entry = CatalogEntry(id="x", sources=(first, MediaSource(size_bytes=2)))

        assert entry.primary_source == first

    def test_id_required(self) -> None:
        with pytest.raises(ValidationError):
            CatalogEntry(title="No id")


class TestIdentityGroup:
    """Test cases for IdentityGroup model."""

    def test_match_types(self) -> None:
        assert IdentityGroup(key="tmdb-1", title="A").match_type == MatchType.TMDB
        assert IdentityGroup(key="imdb-tt1", title="A").match_type == MatchType.IMDB
        assert IdentityGroup(key="name-a-0000", title="A").match_type == MatchType.NAME
        assert MatchType.TMDB.label == "TMDB Match"
        assert MatchType.NAME.label == "Name Match"

    def test_member_count_and_total_size(self) -> None:
        members = (
            CatalogEntry(id="a", sources=(MediaSource(size_bytes=10),)),
            CatalogEntry(id="b", sources=(MediaSource(size_bytes=15),)),
        )
        group = IdentityGroup(key="tmdb-1", title="A", members=members)

        assert group.member_count == 2
        assert group.total_size_bytes == 25

    def test_frozen(self) -> None:
        group = IdentityGroup(key="tmdb-1", title="A")
        with pytest.raises(ValidationError):
            group.title = "B"


class TestScanResult:
    """Test cases for ScanResult model."""

    def create_ranked_group(self, key: str, sizes: list[int]) -> RankedGroup:
        members = tuple(
            CatalogEntry(id=f"{key}-{i}", sources=(MediaSource(size_bytes=size),))
            for i, size in enumerate(sizes)
        )
        return RankedGroup(key=f"tmdb-{key}", title=key, members=members, preferred_id=f"{key}-0")

    def test_aggregates(self) -> None:
        result = ScanResult(
            entries_scanned=10,
            groups=[
                self.create_ranked_group("a", [BYTES_PER_GB, 2 * BYTES_PER_GB]),
                self.create_ranked_group("b", [1, 1, 1]),
            ],
        )

        assert result.duplicate_count == 3
        assert result.wasted_space_bytes == BYTES_PER_GB + 2
        assert result.wasted_space_gb == pytest.approx(1.0, rel=1e-6)

    def test_empty_scan(self) -> None:
        result = ScanResult(library_name="Movies", entries_scanned=0)

        assert result.duplicate_count == 0
        assert result.wasted_space_bytes == 0
        assert str(result) == "Scan of Movies: 0 movies, 0 conflict groups, 0 duplicates"

    def test_dump_includes_aggregates(self) -> None:
        result = ScanResult(entries_scanned=2, groups=[self.create_ranked_group("a", [5, 7])])

        dumped = result.model_dump()

        assert dumped["duplicate_count"] == 1
        assert dumped["wasted_space_bytes"] == 5
