"""
Client settings for meilikit.

Provides configuration management using Pydantic settings with support for:
- Environment variables with MEILIKIT_ prefix
- .env file loading
- Runtime settings override
- Type validation and defaults
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


__all__ = [
    "ClientSettings",
    "client_settings",
]


class ClientSettings(BaseSettings):
    """
    Connection settings for the remote search service.

    Settings can be configured via:
    - Environment variables (prefixed with MEILIKIT_)
    - .env file in the working directory
    - Direct instantiation with parameters
    - Runtime override using the override() method

    Attributes:
        url: Base URL of the search service
        api_key: Optional API key sent as a bearer token
        timeout: HTTP request timeout in seconds
        task_timeout: Maximum time to wait for an asynchronous task in seconds
        task_interval: Delay between task status polls in seconds
    """

    url: str = Field(
        "http://localhost:7700",
        description="Base URL of the search service",
    )

    api_key: str | None = Field(
        None,
        description="Optional API key (sent as 'Authorization: Bearer <key>')",
    )

    timeout: float = Field(
        10.0,
        gt=0,
        description="HTTP request timeout in seconds",
    )

    task_timeout: float = Field(
        5.0,
        gt=0,
        description="Maximum seconds to wait for a task to finish",
    )

    task_interval: float = Field(
        0.05,
        gt=0,
        description="Seconds between task status polls",
    )

    @field_validator("url")
    @classmethod
    def strip_trailing_slash(cls, v):
        # type: (str) -> str
        return v.rstrip("/")

    model_config = SettingsConfigDict(
        env_prefix="MEILIKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_assignment=True,
    )

    def override(self, update=None):
        # type: (dict|None) -> ClientSettings
        """
        Returns an updated and validated deep copy of the current settings instance.

        :param update: Dictionary of field names and values to override.
        :return: New ClientSettings instance with updated and validated fields.
        """

        update = update or {}

        settings = self.model_copy(deep=True)
        # Assign fields individually so validation gets triggered
        for field, value in update.items():
            setattr(settings, field, value)
        return settings


client_settings = ClientSettings()
