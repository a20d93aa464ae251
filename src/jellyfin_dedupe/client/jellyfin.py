"""HTTP client for the Jellyfin REST API."""

import logging
from typing import Any

import httpx

from ..core.models import CatalogEntry, Library
from .config import ClientConfig, Credentials, normalize_url
from .errors import (
    AuthenticationError,
    ConnectionFailedError,
    JellyfinError,
    MalformedResponseError,
    NotAuthenticatedError,
    PermissionDeniedError,
)
from .mapping import map_item, map_items, map_library

logger = logging.getLogger(__name__)

MOVIE_FIELDS = "ProviderIds,MediaSources,Path,MediaStreams,DateCreated,Width,Height"


class JellyfinClient:
    """Talks to a Jellyfin server on behalf of a single user."""

    def __init__(
        self,
        config: ClientConfig,
        credentials: Credentials | None = None,
        http_client: httpx.Client | None = None,
    ):
        """
        Initialize the client.

        Args:
            config: Client settings, including the device id
            credentials: Existing session, or None to call login() first
            http_client: httpx client to use, mostly for tests
        """
        self.config = config
        self.credentials = credentials
        self._http = http_client or httpx.Client(timeout=config.request_timeout)

    def __enter__(self) -> "JellyfinClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        self._http.close()

    def _require_credentials(self) -> Credentials:
        if self.credentials is None:
            raise NotAuthenticatedError("Not logged in. Call login() first.")
        return self.credentials

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        logger.debug(f"{method} {url}")
        try:
            return self._http.request(method, url, **kwargs)
        except httpx.RequestError as e:
            raise ConnectionFailedError(f"Connection to {url} failed: {e}") from e

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponseError(f"Server returned invalid JSON: {e}") from e

    def _session_get(self, path: str, params: dict[str, str] | None = None) -> httpx.Response:
        creds = self._require_credentials()
        return self._request(
            "GET",
            f"{creds.server_url}{path}",
            params=params,
            headers={"X-Emby-Token": creds.access_token},
        )

    def login(self, server_url: str, username: str, password: str = "") -> Credentials:
        """
        Authenticate by user name and password.

        Args:
            server_url: Base URL of the server
            username: User to log in as
            password: Password, empty for users without one

        Returns:
            Credentials for the new session, also stored on the client

        Raises:
            AuthenticationError: If the server rejects the credentials
            ConnectionFailedError: If the server cannot be reached
            JellyfinError: For any other unexpected status
        """
        base_url = normalize_url(server_url)
        response = self._request(
            "POST",
            f"{base_url}/Users/AuthenticateByName",
            json={"Username": username, "Pw": password or ""},
            headers={"X-Emby-Authorization": self.config.authorization_header},
        )

        if response.status_code == 401:
            raise AuthenticationError("Invalid username or password.")
        if not response.is_success:
            raise JellyfinError(f"Server responded with status: {response.status_code}")

        data = self._json(response)
        try:
            self.credentials = Credentials(
                server_url=base_url,
                username=data["User"]["Name"],
                access_token=data["AccessToken"],
                user_id=data["User"]["Id"],
            )
        except (KeyError, TypeError) as e:
            raise MalformedResponseError(f"Unexpected authentication response: {e}") from e

        logger.info(f"Logged in to {base_url} as {self.credentials.username}")
        return self.credentials

    def fetch_libraries(self) -> list[Library]:
        """Fetch every library (view) visible to the user."""
        creds = self._require_credentials()
        response = self._session_get(f"/Users/{creds.user_id}/Views")
        if not response.is_success:
            raise JellyfinError("Failed to fetch libraries.")

        libraries = map_items(self._json(response), map_library)
        logger.info(f"Found {len(libraries)} libraries")
        return libraries

    def fetch_movies(self, parent_id: str | None = None) -> list[CatalogEntry]:
        """
        Fetch every movie, optionally restricted to one library or folder.

        Args:
            parent_id: Id of the library or folder to scan

        Returns:
            Catalog entries sorted by the server's sort name
        """
        creds = self._require_credentials()
        params = {
            "IncludeItemTypes": "Movie",
            "Recursive": "true",
            "Fields": MOVIE_FIELDS,
            "SortBy": "SortName",
        }
        if parent_id:
            params["ParentId"] = parent_id

        response = self._session_get(f"/Users/{creds.user_id}/Items", params=params)
        if not response.is_success:
            raise JellyfinError("Failed to fetch movies.")

        movies = map_items(self._json(response), map_item)
        logger.info(f"Fetched {len(movies)} movies")
        return movies

    def delete_item(self, item_id: str) -> None:
        """
        Delete an item and its files from the server.

        Raises:
            PermissionDeniedError: If the user may not delete media
            JellyfinError: For any other failure
        """
        creds = self._require_credentials()
        response = self._request(
            "DELETE",
            f"{creds.server_url}/Items/{item_id}",
            headers={"X-Emby-Token": creds.access_token},
        )

        if response.status_code in (401, 403):
            raise PermissionDeniedError(
                'Permission denied. Ensure the user has "Allow Media Deletion" '
                "enabled in Jellyfin Dashboard."
            )
        if not response.is_success:
            raise JellyfinError(f"Failed to delete item. Status: {response.status_code}")

        logger.info(f"Deleted item {item_id}")

    def image_url(self, item_id: str, tag: str | None) -> str | None:
        """Build the URL of an item's primary image, or None without a tag."""
        if not tag:
            return None
        creds = self._require_credentials()
        return (
            f"{creds.server_url}/Items/{item_id}/Images/Primary"
            f"?tag={tag}&maxHeight={self.config.image_max_height}&quality={self.config.image_quality}"
        )
