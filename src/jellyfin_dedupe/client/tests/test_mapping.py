"""Tests for mapping server payloads onto catalog models."""

from datetime import datetime, timezone

import pytest

from ..errors import MalformedResponseError
from ..mapping import map_item, map_items, map_library

FULL_ITEM = {
    "Id": "f1c2",
    "Name": "The Matrix",
    "OriginalTitle": "The Matrix",
    "ProductionYear": 1999,
    "ProviderIds": {"Tmdb": "603", "Imdb": "tt0133093"},
    "Type": "Movie",
    "ImageTags": {"Primary": "abc123"},
    "OfficialRating": "R",
    "RunTimeTicks": 81_720_000_000,
    "DateCreated": "2023-04-01T10:20:30.1234567Z",
    "MediaSources": [
        {
            "Id": "src1",
            "Name": "The Matrix 1080p",
            "Path": "/media/movies/The Matrix (1999)/The Matrix.mkv",
            "Container": "mkv",
            "Size": 8_000_000_000,
            "Bitrate": 9_500_000,
            "MediaStreams": [
                {"Type": "Video", "Codec": "hevc", "Width": 1920, "Height": 1080,
                 "BitRate": 9_000_000, "IsDefault": True},
                {"Type": "Audio", "Codec": "eac3", "Language": "eng",
                 "ChannelLayout": "5.1", "IsDefault": True},
            ],
        },
        {"Id": "src2", "Size": 2_000_000_000},
    ],
}


class TestMapItem:
    """Test cases for map_item."""

    def test_full_item(self) -> None:
        entry = map_item(FULL_ITEM)

        assert entry.id == "f1c2"
        assert entry.title == "The Matrix"
        assert entry.release_year == 1999
        assert entry.external_ids.tmdb == "603"
        assert entry.external_ids.imdb == "tt0133093"
        assert entry.item_type == "Movie"
        assert entry.image_tag == "abc123"
        assert entry.official_rating == "R"
        assert entry.runtime_ticks == 81_720_000_000
        assert entry.date_created == datetime(2023, 4, 1, 10, 20, 30, 123456, tzinfo=timezone.utc)

        assert len(entry.sources) == 2
        primary = entry.primary_source
        assert primary.container == "mkv"
        assert primary.size_bytes == 8_000_000_000
        assert primary.bitrate_bps == 9_500_000
        assert primary.video_stream.codec == "hevc"
        assert primary.resolution_label == "1920p"
        assert primary.streams[1].channel_layout == "5.1"
        assert entry.sources[1].bitrate_bps is None

    def test_minimal_item(self) -> None:
        entry = map_item({"Id": "x"})

        assert entry.title == ""
        assert entry.release_year is None
        assert entry.external_ids.tmdb is None
        assert entry.sources == ()
        assert entry.date_created is None

    def test_missing_id(self) -> None:
        with pytest.raises(MalformedResponseError):
            map_item({"Name": "No id"})

    def test_wrong_types(self) -> None:
        with pytest.raises(MalformedResponseError):
            map_item({"Id": "x", "MediaSources": [{"Size": "huge"}]})

    def test_not_an_object(self) -> None:
        with pytest.raises(MalformedResponseError):
            map_item(["Id", "x"])


class TestMapLibrary:
    """Test cases for map_library."""

    def test_library(self) -> None:
        library = map_library({"Id": "lib", "Name": "Movies", "CollectionType": "movies"})

        assert library.id == "lib"
        assert library.name == "Movies"
        assert library.collection_type == "movies"
        assert library.image_tag is None

    def test_name_falls_back_to_id(self) -> None:
        assert map_library({"Id": "lib"}).name == "lib"


class TestMapItems:
    """Test cases for map_items."""

    def test_missing_items_is_empty(self) -> None:
        assert map_items({}, map_item) == []
        assert map_items({"Items": None}, map_item) == []

    def test_uses_given_mapper(self) -> None:
        libraries = map_items({"Items": [{"Id": "a", "Name": "Movies"}]}, map_library)

        assert [library.name for library in libraries] == ["Movies"]

    def test_rejects_non_object(self) -> None:
        with pytest.raises(MalformedResponseError):
            map_items([], map_item)

    def test_rejects_non_list_items(self) -> None:
        with pytest.raises(MalformedResponseError):
            map_items({"Items": "nope"}, map_item)
