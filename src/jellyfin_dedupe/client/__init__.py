"""Jellyfin data access for the duplicate finder."""

from .config import ClientConfig, Credentials, normalize_url
from .errors import (
    AuthenticationError,
    ConnectionFailedError,
    JellyfinError,
    MalformedResponseError,
    NotAuthenticatedError,
    PermissionDeniedError,
)
from .jellyfin import JellyfinClient
from .mapping import map_item, map_library

__all__ = [
    "AuthenticationError",
    "ClientConfig",
    "ConnectionFailedError",
    "Credentials",
    "JellyfinClient",
    "JellyfinError",
    "MalformedResponseError",
    "NotAuthenticatedError",
    "PermissionDeniedError",
    "map_item",
    "map_library",
    "normalize_url",
]
