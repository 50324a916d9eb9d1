from __future__ import annotations

import logging
from typing import Any

EVENTS_LOGGER = "memos_mcp.observability"

# Attributes every LogRecord already carries; extras must not overwrite them.
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime"}


def log_event(
    event: str,
    logger: logging.Logger | None = None,
    *,
    level: int = logging.INFO,
    **fields: Any,
) -> None:
    """
    Emit `event` as the log message with `fields` attached to the record.

    Unset (None) fields are left off, as are names that collide with
    LogRecord attributes.
    """
    extra = {
        key: value
        for key, value in fields.items()
        if value is not None and key not in _RECORD_ATTRS
    }
    extra["event"] = event
    (logger or logging.getLogger(EVENTS_LOGGER)).log(level, event, extra=extra)


__all__ = ["EVENTS_LOGGER", "log_event"]
