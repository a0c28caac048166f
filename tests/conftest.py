"""Test configuration and fixtures."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import Mock

import pytest

from circleci_status.client.credentials import StaticCredentials
from circleci_status.client.http import CircleCIClient


def make_response(status_code: int, body: Any = None, *, raw: bytes | None = None) -> Mock:
    """Build a stand-in for ``requests.Response``."""

    resp = Mock()
    resp.status_code = status_code
    if raw is not None:
        resp.content = raw
    else:
        resp.content = json.dumps(body).encode("utf-8") if body is not None else b""
    return resp


def build(build_num: int, workflow_id: str | None, status: str = "success", **extra: Any) -> dict:
    """A shallow build record as returned by the recent-builds endpoint."""

    record: dict[str, Any] = {"build_num": build_num, "status": status, **extra}
    if workflow_id is not None:
        record["workflows"] = {
            "workflow_id": workflow_id,
            "workflow_name": "build-and-test",
            "job_name": f"job-{build_num}",
        }
    return record


@pytest.fixture
def session() -> Mock:
    """A mocked ``requests.Session``; set ``session.get.return_value`` per test."""
    mock = Mock()
    mock.headers = {}
    return mock


@pytest.fixture
def client(session: Mock) -> CircleCIClient:
    """A client bound to the mocked session with a static token."""
    return CircleCIClient(
        credentials=StaticCredentials(token="test-token"),
        base_url="https://circleci.example.com/api/v1.1/",
        session=session,
    )


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Isolate settings from the developer's environment and `.env` file."""
    for name in (
        "CIRCLECI_TOKEN",
        "CIRCLECI_BASE_URL",
        "CIRCLECI_NETRC",
        "CIRCLECI_TIMEOUT_SECONDS",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
