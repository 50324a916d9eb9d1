from __future__ import annotations

import asyncio

from memos_mcp.core.config import load_log_level
from memos_mcp.core.logging import setup_logging
from memos_mcp.transports.bootstrap import connect_from_env

from .app import build_fastmcp
from .config import HttpConfig


async def main() -> None:
    setup_logging(load_log_level())
    cfg = HttpConfig.from_env()
    client = await connect_from_env()
    try:
        fastmcp = build_fastmcp(client, cfg)
        await fastmcp.run_streamable_http_async()
    finally:
        await client.aclose()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
