"""CircleCI REST client: credentials, URLs and transport."""

from .credentials import (
    ChainedCredentials,
    CredentialProvider,
    Credentials,
    NetrcCredentials,
    StaticCredentials,
    authorization_header,
)
from .http import DEFAULT_BASE_URL, CircleCIClient, decode_json
from .urls import build_url

__all__ = [
    "DEFAULT_BASE_URL",
    "ChainedCredentials",
    "CircleCIClient",
    "CredentialProvider",
    "Credentials",
    "NetrcCredentials",
    "StaticCredentials",
    "authorization_header",
    "build_url",
    "decode_json",
]
