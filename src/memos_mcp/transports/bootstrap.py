from __future__ import annotations

import logging

from memos_mcp.core.client import MemosClient
from memos_mcp.core.config import create_client_from_env
from memos_mcp.core.services.auth import AuthService

log = logging.getLogger("memos_mcp.bootstrap")


async def connect_from_env() -> MemosClient:
    """
    Build the root client from the environment and check its credential.
    Any failure here is fatal: the server must not start unauthenticated.
    """
    client = create_client_from_env()
    log.info("Verifying connection to memos server at %s...", client.base_url)
    try:
        me = await AuthService(client).current_user()
    except BaseException:
        await client.aclose()
        raise
    log.info("Successfully authenticated to memos server as user: %s", me.username)
    return client


__all__ = ["connect_from_env"]
