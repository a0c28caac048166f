"""CircleCI status client.

Queries the CircleCI REST API for recent builds and routes the result to
caller-supplied handlers:
- `dispatch` routes an outcome to success/error/status-code/completion handlers
- `execute` shapes successful payloads before dispatching
- `query_recent_builds` narrows a build listing to the most recent workflow
"""

__version__ = "0.1.0"

from circleci_status.dispatch import Classification, HandlerSet, Outcome, dispatch, execute
from circleci_status.workflows import latest_workflow_filter, query_recent_builds

__all__ = [
    "__version__",
    "Classification",
    "HandlerSet",
    "Outcome",
    "dispatch",
    "execute",
    "latest_workflow_filter",
    "query_recent_builds",
]
