import logging
import sys
from typing import Any, Iterator, Tuple

# Record extras written after the message, in this order.
LOG_EXTRA_FIELDS = (
    "tool",
    "method",
    "endpoint",
    "status",
    "duration_ms",
    "error_type",
)


def _quote(value: Any) -> str:
    if isinstance(value, (bool, int, float)):
        return str(value)
    text = str(value)
    if not text or any(ch in text for ch in ' ="'):
        return '"' + text.replace('"', '\\"') + '"'
    return text


class LogfmtFormatter(logging.Formatter):
    """Render records as `key=value` pairs; absent extras are skipped."""

    def _pairs(self, record: logging.LogRecord) -> Iterator[Tuple[str, Any]]:
        yield "level", record.levelname.lower()
        yield "logger", record.name
        message = record.getMessage()
        if message:
            yield "event", message
        for key in LOG_EXTRA_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                yield key, value
        if record.exc_info and record.exc_info[0] is not None:
            yield "exc_type", record.exc_info[0].__name__

    def format(self, record: logging.LogRecord) -> str:
        return " ".join(f"{key}={_quote(value)}" for key, value in self._pairs(record))


def setup_logging(level: str = "INFO") -> None:
    """
    Route all logging to stderr as logfmt. Stdout is reserved for the MCP
    stdio stream. Calling again replaces the previous handler.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(LogfmtFormatter())
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        handlers=[handler],
        force=True,
    )


__all__ = ["setup_logging", "LogfmtFormatter", "LOG_EXTRA_FIELDS"]
