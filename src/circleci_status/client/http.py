"""HTTP transport for the CircleCI REST API.

Every request completes by calling ``on_complete`` with an :class:`Outcome`;
network and HTTP failures are reported that way instead of being raised.
"""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Callable, Iterable, Mapping
from typing import Any
from urllib.parse import urlparse

import requests

from circleci_status.client.credentials import CredentialProvider, authorization_header
from circleci_status.client.urls import build_url
from circleci_status.dispatch import Classification, Outcome

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://circleci.com/api/v1.1"

SESSION_HEADERS = {
    "Accept": "application/json",
    "User-Agent": "circleci-status",
}

CompletionHook = Callable[[Outcome], None]
SessionFactory = Callable[[], requests.Session]


def decode_json(body: bytes) -> Any:
    """Decode a UTF-8 JSON response body into plain dicts and lists."""

    return json.loads(body.decode("utf-8"))


def _host_port(url: str) -> tuple[str, int | None]:
    parsed = urlparse(url)
    port = parsed.port
    if port is None:
        port = {"https": 443, "http": 80}.get(parsed.scheme)
    return parsed.hostname or "", port


class CircleCIClient:
    """Small wrapper around ``requests`` for the read-only calls we need.

    Foreground requests share one session. In background mode each exchange
    opens its own session from ``session_factory`` and closes it when done,
    since ``requests.Session`` is not safe to share between threads.
    """

    def __init__(
        self,
        *,
        credentials: CredentialProvider,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        session: requests.Session | None = None,
        session_factory: SessionFactory = requests.Session,
        background: bool = False,
    ) -> None:
        if not base_url.strip():
            raise ValueError("CircleCI base URL is required")
        if timeout <= 0:
            raise ValueError("timeout must be positive")

        self._credentials = credentials
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._background = background
        self._session_factory = session_factory
        self._session = session or session_factory()
        self._session.headers.update(SESSION_HEADERS)

    @property
    def base_url(self) -> str:
        return self._base_url

    def url(self, segments: Iterable[str], params: Mapping[str, object] | None = None) -> str:
        return build_url(self._base_url, segments, params)

    def get(
        self,
        segments: Iterable[str],
        *,
        params: Mapping[str, object] | None = None,
        on_complete: CompletionHook,
    ) -> threading.Thread | None:
        """Issue a GET and report the outcome to ``on_complete`` exactly once.

        In background mode the exchange runs on a daemon thread, which is
        returned so callers may join it; otherwise this blocks and returns None.
        """

        url = self.url(segments, params)
        if not self._background:
            on_complete(self._fetch(self._session, url))
            return None

        thread = threading.Thread(
            target=self._background_exchange,
            name="circleci-get",
            daemon=True,
            args=(url, on_complete),
        )
        thread.start()
        return thread

    def _headers(self, url: str) -> dict[str, str]:
        host, port = _host_port(url)
        found = self._credentials.lookup(host, port)
        if found is None:
            logger.debug("No credentials found; sending unauthenticated", extra={"host": host})
            return {}
        return {"Authorization": authorization_header(found)}

    def _background_exchange(self, url: str, on_complete: CompletionHook) -> None:
        session = self._session_factory()
        session.headers.update(SESSION_HEADERS)
        try:
            outcome = self._fetch(session, url)
        finally:
            session.close()
        on_complete(outcome)

    def _fetch(self, session: requests.Session, url: str) -> Outcome:
        logger.debug("GET", extra={"url": url})
        try:
            headers = self._headers(url)
        except Exception as e:
            logger.warning("Credential lookup failed", extra={"url": url, "error": str(e)})
            return Outcome(
                classification=Classification.TRANSPORT_ERROR,
                context={"url": url, "error": e},
            )

        try:
            resp = session.get(url, headers=headers, timeout=self._timeout)
        except requests.RequestException as e:
            logger.warning("Request failed", extra={"url": url, "error": str(e)})
            return Outcome(
                classification=Classification.TRANSPORT_ERROR,
                context={"url": url, "error": e},
            )

        if not 200 <= resp.status_code < 300:
            logger.info(
                "Request returned an error status",
                extra={"url": url, "status_code": resp.status_code},
            )
            return Outcome(
                classification=Classification.ERROR,
                status_code=resp.status_code,
                context={"url": url, "response": resp},
            )

        try:
            payload = decode_json(resp.content)
        except ValueError as e:
            logger.warning(
                "Response body is not valid JSON",
                extra={"url": url, "status_code": resp.status_code},
            )
            return Outcome(
                classification=Classification.ERROR,
                status_code=resp.status_code,
                context={"url": url, "response": resp, "error": e},
            )

        return Outcome(
            classification=Classification.SUCCESS,
            status_code=resp.status_code,
            payload=payload,
            context={"url": url, "response": resp},
        )

    def close(self) -> None:
        """Close the foreground HTTP session."""
        self._session.close()
