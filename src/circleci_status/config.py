"""Configuration for the CircleCI status client.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

A token is not required at startup: when `CIRCLECI_TOKEN` is empty, credentials
are looked up in the netrc file instead.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from circleci_status.client.credentials import (
    ChainedCredentials,
    CredentialProvider,
    NetrcCredentials,
    StaticCredentials,
)
from circleci_status.client.http import DEFAULT_BASE_URL


class CircleCISettings(BaseSettings):
    """Settings for the CircleCI client.

    Environment variables:
    - CIRCLECI_TOKEN            (optional, falls back to netrc)
    - CIRCLECI_BASE_URL         (optional)
    - CIRCLECI_NETRC            (optional)
    - CIRCLECI_TIMEOUT_SECONDS  (optional)
    - LOG_LEVEL                 (optional)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `CircleCISettings(_env_file=path_to_env)`.
    """

    circleci_token: str = Field(
        default="",
        validation_alias="CIRCLECI_TOKEN",
        description="CircleCI personal API token",
    )
    circleci_base_url: str = Field(
        default=DEFAULT_BASE_URL,
        validation_alias="CIRCLECI_BASE_URL",
        description="CircleCI v1.1 API base URL (useful for CircleCI server installs)",
    )
    netrc_path: Path | None = Field(
        default=None,
        validation_alias="CIRCLECI_NETRC",
        description="netrc file to read credentials from (defaults to ~/.netrc)",
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        validation_alias="CIRCLECI_TIMEOUT_SECONDS",
        description="Per-request timeout passed to the HTTP session",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )

    def credential_provider(self) -> CredentialProvider:
        """Token from settings first, then the netrc file."""

        return ChainedCredentials(
            StaticCredentials(token=self.circleci_token),
            NetrcCredentials(self.netrc_path),
        )
