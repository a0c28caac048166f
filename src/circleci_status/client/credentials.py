"""Credential lookup for the CircleCI API.

CircleCI's v1.1 API accepts the personal API token as the username of an HTTP
Basic authorization with an empty password.
"""

from __future__ import annotations

import base64
import logging
import netrc
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Credentials:
    user: str
    secret: str


class CredentialProvider(Protocol):
    def lookup(self, host: str, port: int | None) -> Credentials | None: ...


@dataclass(frozen=True, slots=True)
class StaticCredentials:
    """Always return a configured token, regardless of host."""

    token: str
    user: str = ""

    def lookup(self, host: str, port: int | None) -> Credentials | None:
        if not self.token.strip():
            return None
        return Credentials(user=self.user, secret=self.token)


class NetrcCredentials:
    """Read credentials from a netrc file.

    Entries are matched on ``host:port`` first and then on the bare host, so a
    token can be scoped to a single port when several services share a host.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = path

    def lookup(self, host: str, port: int | None) -> Credentials | None:
        try:
            parsed = netrc.netrc(str(self._path) if self._path is not None else None)
        except FileNotFoundError:
            logger.debug("No netrc file found", extra={"path": str(self._path or "~/.netrc")})
            return None
        except (OSError, netrc.NetrcParseError) as e:
            logger.warning(
                "Ignoring unreadable netrc file",
                extra={"path": str(self._path or "~/.netrc"), "error": str(e)},
            )
            return None

        candidates = [f"{host}:{port}", host] if port is not None else [host]
        for machine in candidates:
            entry = parsed.authenticators(machine)
            if entry is None:
                continue
            login, _account, password = entry
            if password:
                return Credentials(user=login or "", secret=password)
        return None


class ChainedCredentials:
    """Ask each provider in turn; the first match wins."""

    def __init__(self, *providers: CredentialProvider) -> None:
        self._providers = providers

    def lookup(self, host: str, port: int | None) -> Credentials | None:
        for provider in self._providers:
            found = provider.lookup(host, port)
            if found is not None:
                return found
        return None


def authorization_header(credentials: Credentials) -> str:
    """Return the ``Authorization`` header value for ``credentials``."""

    raw = f"{credentials.secret}:".encode()
    return "Basic " + base64.b64encode(raw).decode("ascii")
