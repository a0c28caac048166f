"""Recent-build queries scoped to the most recent workflow.

CircleCI's build listing interleaves jobs from several workflow runs (retries,
fan-out jobs). Callers care about the latest workflow as a unit, so the listing
is narrowed to the builds sharing the newest build's workflow id.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from circleci_status.client.http import CircleCIClient
from circleci_status.dispatch import HandlerSet, execute

logger = logging.getLogger(__name__)

RECENT_BUILDS_LIMIT = 16
MAX_LIMIT = 100

FAILED_STATUSES = frozenset({"failed", "infrastructure_fail", "timedout", "canceled"})
RUNNING_STATUSES = frozenset({"running", "queued", "scheduled", "not_running", "retried"})
PASSED_STATUSES = frozenset({"success", "fixed", "no_tests"})


def workflow_id(record: Mapping[str, Any]) -> Any:
    """Return ``record["workflows"]["workflow_id"]``, or None when absent."""

    workflows = record.get("workflows") if isinstance(record, Mapping) else None
    if not isinstance(workflows, Mapping):
        return None
    return workflows.get("workflow_id")


def latest_workflow_filter(records: Sequence[Mapping[str, Any]]) -> list[Mapping[str, Any]]:
    """Keep only the builds that belong to the first record's workflow.

    The API lists builds newest first, so the first record identifies the
    current workflow. Order is preserved. Records without a workflow id all
    compare equal to each other.
    """

    if not records:
        return []
    current = workflow_id(records[0])
    return [r for r in records if workflow_id(r) == current]


def query_recent_builds(
    client: CircleCIClient,
    vcs: str,
    owner: str,
    project: str,
    *,
    handlers: HandlerSet,
    branch: str | None = None,
    limit: int = RECENT_BUILDS_LIMIT,
) -> None:
    """Fetch recent builds and report the latest workflow's builds to ``handlers``.

    Fire-and-forget: the result is only observable through ``handlers``.
    """

    for name, value in (("vcs", vcs), ("owner", owner), ("project", project)):
        if not value or not value.strip():
            raise ValueError(f"{name} is required")
    if not 1 <= limit <= MAX_LIMIT:
        raise ValueError(f"limit must be between 1 and {MAX_LIMIT}")

    segments = ["project", vcs, owner, project]
    if branch:
        segments += ["tree", branch]

    logger.info(
        "Querying recent builds",
        extra={"project": f"{vcs}/{owner}/{project}", "branch": branch, "limit": limit},
    )
    client.get(
        segments,
        params={"limit": limit, "shallow": True},
        on_complete=lambda outcome: execute(outcome, handlers, latest_workflow_filter),
    )


@dataclass(frozen=True, slots=True)
class BuildSummary:
    build_num: int | None
    job_name: str | None
    status: str | None


@dataclass(frozen=True, slots=True)
class WorkflowSummary:
    """Aggregate view of the builds in one workflow."""

    workflow_id: Any
    workflow_name: str | None
    branch: str | None
    vcs_revision: str | None
    status: str
    builds: tuple[BuildSummary, ...]


def _aggregate_status(statuses: list[str | None]) -> str:
    if any(s in FAILED_STATUSES for s in statuses):
        return "failed"
    if any(s in RUNNING_STATUSES for s in statuses):
        return "running"
    if statuses and all(s in PASSED_STATUSES for s in statuses):
        return "success"
    return "unknown"


def summarize_workflow(records: Sequence[Mapping[str, Any]]) -> WorkflowSummary | None:
    """Summarize records already narrowed by :func:`latest_workflow_filter`."""

    if not records:
        return None

    first = records[0]
    workflows = first.get("workflows")
    if not isinstance(workflows, Mapping):
        workflows = {}

    builds = []
    for r in records:
        wf = r.get("workflows")
        builds.append(
            BuildSummary(
                build_num=r.get("build_num"),
                job_name=wf.get("job_name") if isinstance(wf, Mapping) else None,
                status=r.get("status"),
            )
        )

    return WorkflowSummary(
        workflow_id=workflows.get("workflow_id"),
        workflow_name=workflows.get("workflow_name"),
        branch=first.get("branch"),
        vcs_revision=first.get("vcs_revision"),
        status=_aggregate_status([b.status for b in builds]),
        builds=tuple(builds),
    )
