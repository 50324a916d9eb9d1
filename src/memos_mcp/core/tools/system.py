import time

from memos_mcp.core.client import MemosClient
from memos_mcp.core.models import AuthUser
from memos_mcp.core.registry import tool_annotations
from memos_mcp.core.services.auth import AuthService


@tool_annotations(title="Current user", read_only=True)
async def get_current_user(client: MemosClient) -> AuthUser:
    """Return the Memos user this server is signed in as."""
    return await AuthService(client).current_user()


@tool_annotations(title="Ping", read_only=True)
async def system_ping(client: MemosClient) -> dict:
    """
    Simple connectivity and latency check against the Memos instance.
    Returns status plus the authenticated user's username.
    """
    start = time.perf_counter()

    user = await AuthService(client).current_user()

    latency_ms = (time.perf_counter() - start) * 1000

    return {
        "status": "ok",
        "latency_ms": round(latency_ms, 2),
        "username": user.username,
        "user_name": user.name,
        "instance_url": client.base_url,
    }
