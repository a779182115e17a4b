from __future__ import annotations

import logging
from typing import Any, Dict

# Attributes every LogRecord already carries; extras may not shadow them.
RESERVED_LOG_KEYS = frozenset(vars(logging.makeLogRecord({}))) | {
    "message",
    "asctime",
}


def _clean_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in fields.items() if k not in RESERVED_LOG_KEYS}


def log_event(
    event: str,
    logger: logging.Logger | None = None,
    *,
    level: int = logging.INFO,
    **fields: Any,
) -> None:
    """
    Emit one structured event; fields travel in the record's extra dict so the
    logfmt formatter can render them.
    """
    log = logger or logging.getLogger("trello_mcp.observability")
    log.log(level, event, extra=_clean_fields(fields))


__all__ = ["RESERVED_LOG_KEYS", "log_event"]
