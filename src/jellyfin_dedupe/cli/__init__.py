"""Command line interface for the Jellyfin duplicate finder."""
