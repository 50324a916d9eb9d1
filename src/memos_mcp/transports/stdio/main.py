from __future__ import annotations

import asyncio

from mcp.server.fastmcp import FastMCP

from memos_mcp.core.config import load_log_level
from memos_mcp.core.logging import setup_logging
from memos_mcp.core.registry import register_discovered_tools
from memos_mcp.transports.bootstrap import connect_from_env


async def main() -> None:
    setup_logging(load_log_level())
    client = await connect_from_env()

    app = FastMCP("memos-mcp")
    register_discovered_tools(app, client)

    try:
        await app.run_stdio_async()
    finally:
        await client.aclose()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
