"""URL construction for REST endpoints."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from urllib.parse import quote, urlencode


def _param_value(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_url(
    base_url: str,
    segments: Iterable[str],
    params: Mapping[str, object] | None = None,
) -> str:
    """Join ``segments`` onto ``base_url`` and append a query string.

    Segments are percent-encoded individually (a ``/`` inside a branch name is
    escaped rather than treated as a path separator). ``None`` params are
    dropped.
    """

    url = base_url.rstrip("/")
    path = "/".join(quote(str(s), safe="") for s in segments if str(s) != "")
    if path:
        url = f"{url}/{path}"

    query = [(k, _param_value(v)) for k, v in (params or {}).items() if v is not None]
    if query:
        url = f"{url}?{urlencode(query)}"
    return url
