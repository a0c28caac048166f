"""CLI entrypoint: show the status of a project's latest CircleCI workflow."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from pydantic import ValidationError

from circleci_status import __version__
from circleci_status.client.http import CircleCIClient
from circleci_status.config import CircleCISettings
from circleci_status.dispatch import HandlerSet, Outcome
from circleci_status.logging import configure_logging
from circleci_status.workflows import (
    RECENT_BUILDS_LIMIT,
    WorkflowSummary,
    query_recent_builds,
    summarize_workflow,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="circleci-status",
        description="Query CircleCI for the status of the most recent workflow",
    )
    parser.add_argument("--version", action="version", version=f"circleci-status {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    recent = subparsers.add_parser(
        "recent-builds",
        help="List the builds of the most recent workflow for a project",
    )
    recent.add_argument(
        "--vcs",
        default="github",
        help="VCS provider as CircleCI names it: github | bitbucket",
    )
    recent.add_argument("--owner", required=True, help="Organization or user owning the project")
    recent.add_argument("--project", required=True, help="Project (repository) name")
    recent.add_argument("--branch", default=None, help="Only consider builds on this branch")
    recent.add_argument(
        "--limit",
        type=int,
        default=RECENT_BUILDS_LIMIT,
        help="Number of recent builds to fetch before filtering",
    )
    recent.add_argument(
        "--json",
        action="store_true",
        help="Print the filtered build records as JSON instead of a summary",
    )

    return parser


def _format_summary(summary: WorkflowSummary) -> str:
    name = summary.workflow_name or "(unnamed workflow)"
    header = f"{name} [{summary.status}]"
    if summary.branch:
        header += f" on {summary.branch}"
    if summary.vcs_revision:
        header += f" @ {summary.vcs_revision[:7]}"

    lines = [header]
    for build in summary.builds:
        lines.append(f"  #{build.build_num} {build.job_name or '-'}: {build.status or 'unknown'}")
    return "\n".join(lines)


def _print_auth_hint(outcome: Outcome) -> None:
    print(
        f"Not authorized (HTTP {outcome.status_code}). "
        "Set CIRCLECI_TOKEN or add a circleci.com entry to your netrc file.",
        file=sys.stderr,
    )


def _print_not_found_hint(outcome: Outcome) -> None:
    print(
        "Project not found (HTTP 404). Check --vcs/--owner/--project, and that your token "
        "can see the project.",
        file=sys.stderr,
    )


def _run_recent_builds(args: argparse.Namespace, settings: CircleCISettings) -> int:
    result: dict[str, object] = {}

    def on_success(outcome: Outcome) -> None:
        records = outcome.payload
        if args.json:
            text = json.dumps(records, indent=2, sort_keys=True)
        else:
            summary = summarize_workflow(records)
            text = "No builds found" if summary is None else _format_summary(summary)
        print(text)
        result["printed"] = True

    def on_error(outcome: Outcome) -> None:
        error = outcome.context.get("error")
        if outcome.status_code is None:
            print(f"Request failed: {error}", file=sys.stderr)
        elif outcome.status_code not in {401, 403, 404}:
            print(f"CircleCI returned HTTP {outcome.status_code}", file=sys.stderr)

    def on_complete(outcome: Outcome) -> None:
        result["outcome"] = outcome

    handlers = HandlerSet(
        on_success=on_success,
        on_error=on_error,
        on_complete=on_complete,
        by_status={401: _print_auth_hint, 403: _print_auth_hint, 404: _print_not_found_hint},
    )

    client = CircleCIClient(
        credentials=settings.credential_provider(),
        base_url=settings.circleci_base_url,
        timeout=settings.request_timeout_seconds,
    )
    try:
        query_recent_builds(
            client,
            args.vcs,
            args.owner,
            args.project,
            branch=args.branch,
            limit=args.limit,
            handlers=handlers,
        )
    finally:
        client.close()

    outcome = result.get("outcome")
    if not isinstance(outcome, Outcome) or not outcome.is_success:
        return 1
    if not result.get("printed"):
        print("Could not render the build listing", file=sys.stderr)
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = CircleCISettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level)

    try:
        if args.command == "recent-builds":
            return _run_recent_builds(args, settings)

        logger.error("Unknown command", extra={"command": args.command})
        return 2

    except ValueError as e:
        print(str(e), file=sys.stderr)
        return 2

    except Exception:
        logger.exception("Command failed")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
