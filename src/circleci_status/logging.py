"""JSON logging for the CLI.

One JSON object per line on stderr; stdout is reserved for build output.
Context passed with ``extra=`` is collected under an ``"extra"`` key.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any


class JsonFormatter(logging.Formatter):
    """Format records as single-line JSON."""

    # Attribute names present on every LogRecord.
    builtin_fields: frozenset[str] = frozenset(
        vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
    ) | {"message", "asctime"}

    def extras(self, record: logging.LogRecord) -> dict[str, Any]:
        return {
            name: value
            for name, value in vars(record).items()
            if name not in self.builtin_fields and not name.startswith("_")
        }

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=UTC)
        line: dict[str, Any] = {
            "timestamp": created.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if extra := self.extras(record):
            line["extra"] = extra
        if record.exc_info:
            line["exception"] = self.formatException(record.exc_info)
        # Responses and exceptions in `extra` are rendered with repr().
        return json.dumps(line, ensure_ascii=False, default=repr)


def configure_logging(level: str) -> None:
    """Route all logging through one stderr handler using :class:`JsonFormatter`."""

    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(JsonFormatter())
    logging.basicConfig(level=level.upper(), handlers=[handler], force=True)

    # urllib3 logs every connection at DEBUG.
    logging.getLogger("urllib3").setLevel(max(logging.getLogger().level, logging.WARNING))
