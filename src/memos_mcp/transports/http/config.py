from __future__ import annotations

import os
from dataclasses import dataclass


def _get_bool_env(name: str, default: bool) -> bool:
    """Parse a boolean environment variable with a safe default."""
    raw = os.getenv(name)
    if raw is None:
        return default
    val = raw.strip().lower()
    if val in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if val in {"0", "false", "f", "no", "n", "off"}:
        return False
    return default


def _get_int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw.replace("_", ""))


@dataclass(frozen=True)
class HttpConfig:
    """Configuration for the streamable HTTP transport runner."""

    host: str = "0.0.0.0"
    port: int = 3000
    path: str = "/mcp"
    json_response: bool = True
    stateless_http: bool = True

    @classmethod
    def from_env(cls) -> "HttpConfig":
        port = _get_int_env("MEMOS_MCP_HTTP_PORT", cls.port)
        if not 0 < port < 65536:
            raise ValueError("MEMOS_MCP_HTTP_PORT must be between 1 and 65535")

        path = os.getenv("MEMOS_MCP_HTTP_PATH", cls.path).strip() or cls.path
        if not path.startswith("/"):
            path = "/" + path

        return cls(
            host=os.getenv("MEMOS_MCP_HTTP_HOST", cls.host).strip() or cls.host,
            port=port,
            path=path,
            json_response=_get_bool_env("MEMOS_MCP_JSON_RESPONSE", cls.json_response),
            stateless_http=_get_bool_env(
                "MEMOS_MCP_STATELESS_HTTP", cls.stateless_http
            ),
        )


__all__ = ["HttpConfig"]
