#!/usr/bin/env python3
"""Programmatic workflow status example.

This demonstrates using the client components directly:

* load settings from `.env` (token or netrc fallback)
* query several projects concurrently with a background client
* observe each result only through its handlers
"""

from __future__ import annotations

import argparse
import threading
from typing import Sequence

from circleci_status.client.http import CircleCIClient
from circleci_status.config import CircleCISettings
from circleci_status.dispatch import HandlerSet, Outcome
from circleci_status.logging import configure_logging
from circleci_status.workflows import query_recent_builds, summarize_workflow


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Show the latest workflow for several projects.")
    parser.add_argument(
        "projects",
        nargs="+",
        help='Projects in the form "owner/project" (GitHub)',
    )
    parser.add_argument("--branch", default=None, help="Branch to scope the listing to")
    return parser.parse_args(argv)


def _handlers(name: str, done: threading.Semaphore) -> HandlerSet:
    def on_success(outcome: Outcome) -> None:
        summary = summarize_workflow(outcome.payload)
        status = summary.status if summary is not None else "no builds"
        print(f"{name}: {status}")

    def on_error(outcome: Outcome) -> None:
        print(f"{name}: request failed (HTTP {outcome.status_code or '-'})")

    return HandlerSet(
        on_success=on_success,
        on_error=on_error,
        on_complete=lambda _outcome: done.release(),
    )


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = CircleCISettings()
    configure_logging(settings.log_level)

    client = CircleCIClient(
        credentials=settings.credential_provider(),
        base_url=settings.circleci_base_url,
        timeout=settings.request_timeout_seconds,
        background=True,
    )

    done = threading.Semaphore(0)
    try:
        for name in args.projects:
            owner, _, project = name.partition("/")
            query_recent_builds(
                client,
                "github",
                owner,
                project,
                branch=args.branch,
                handlers=_handlers(name, done),
            )
        for _ in args.projects:
            done.acquire(timeout=settings.request_timeout_seconds + 5)
    finally:
        client.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
