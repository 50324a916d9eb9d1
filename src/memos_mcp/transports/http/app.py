from __future__ import annotations

import logging

from mcp.server.fastmcp import FastMCP

from memos_mcp.core.client import MemosClient
from memos_mcp.core.registry import register_discovered_tools
from memos_mcp.transports.http.config import HttpConfig

log = logging.getLogger(__name__)


def build_fastmcp(client: MemosClient, cfg: HttpConfig | None = None) -> FastMCP:
    """Create and configure a FastMCP instance with registered tools."""
    cfg = cfg or HttpConfig.from_env()

    fastmcp = FastMCP(
        "memos-mcp",
        json_response=cfg.json_response,
        stateless_http=cfg.stateless_http,
        streamable_http_path=cfg.path,
        host=cfg.host,
        port=cfg.port,
    )

    register_discovered_tools(fastmcp, client)

    log.info(
        "Built FastMCP (json_response=%s, stateless_http=%s, path=%s, host=%s, port=%s)",  # noqa: E501
        cfg.json_response,
        cfg.stateless_http,
        cfg.path,
        cfg.host,
        cfg.port,
    )
    return fastmcp


__all__ = ["HttpConfig", "build_fastmcp"]
