"""Errors raised by the Jellyfin client."""


class JellyfinError(Exception):
    """Base class for failures talking to a Jellyfin server."""


class ConnectionFailedError(JellyfinError):
    """The server could not be reached."""


class AuthenticationError(JellyfinError):
    """The server rejected the supplied credentials."""


class NotAuthenticatedError(JellyfinError):
    """An operation needing a session was called before logging in."""


class PermissionDeniedError(JellyfinError):
    """The user is not allowed to perform the operation."""


class MalformedResponseError(JellyfinError):
    """The server answered with a payload that could not be understood."""
