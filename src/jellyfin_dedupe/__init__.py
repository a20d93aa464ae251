"""Find duplicate movies in a Jellyfin library and pick the copy to keep."""

__version__ = "0.1.0"
