"""Client configuration and session credentials."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


def normalize_url(url: str) -> str:
    """Remove a trailing slash from a server URL."""
    return url[:-1] if url.endswith("/") else url


class ClientConfig(BaseModel):
    """Settings for talking to a Jellyfin server."""

    model_config = ConfigDict(frozen=True)

    device_id: str = Field(..., min_length=1, description="Stable identifier of this device")
    client_name: str = Field(default="Jellyfin Deduplicator", description="Client name sent to the server")
    device_name: str = Field(default="Command Line", description="Device name sent to the server")
    client_version: str = Field(default="1.0.0", description="Client version sent to the server")
    request_timeout: float = Field(default=60.0, gt=0, description="HTTP timeout in seconds")
    image_max_height: int = Field(default=400, gt=0, description="Max height for image URLs")
    image_quality: int = Field(default=90, ge=1, le=100, description="JPEG quality for image URLs")

    @property
    def authorization_header(self) -> str:
        """Value of the X-Emby-Authorization header."""
        return (
            f'MediaBrowser Client="{self.client_name}", Device="{self.device_name}", '
            f'DeviceId="{self.device_id}", Version="{self.client_version}"'
        )


class Credentials(BaseModel):
    """An authenticated session on a server."""

    model_config = ConfigDict(frozen=True)

    server_url: str = Field(..., description="Base URL of the server")
    username: str = Field(..., description="Name of the authenticated user")
    access_token: str = Field(..., description="Session access token")
    user_id: str = Field(..., description="Id of the authenticated user")

    @field_validator("server_url")
    @classmethod
    def validate_server_url(cls, v: str) -> str:
        """Strip a trailing slash."""
        return normalize_url(v)
