from __future__ import annotations

import os
from typing import Tuple

from dotenv import load_dotenv

from .client import MemosClient

API_PREFIX = "/api/v1"
DEFAULT_LOG_LEVEL = "INFO"


def base_url_for_host(host: str) -> str:
    """Turn ``host[:port]`` (or a full URL) into the API base URL."""
    host = (host or "").strip().rstrip("/")
    if not host:
        return ""
    if not host.startswith(("http://", "https://")):
        host = f"http://{host}"
    if host.endswith(API_PREFIX):
        return host
    return f"{host}{API_PREFIX}"


def load_env_config(*, use_dotenv: bool = True) -> Tuple[str, str]:
    """Load the Memos base URL and access token from environment (optional .env)."""
    if use_dotenv:
        load_dotenv()
    base_url = base_url_for_host(os.getenv("MEMOS_HOST", ""))
    token = os.getenv("MEMOS_TOKEN", "").strip()
    return base_url, token


def load_log_level() -> str:
    return os.getenv("MEMOS_MCP_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip() or DEFAULT_LOG_LEVEL


def create_client_from_env(**kwargs) -> MemosClient:
    """Create the root MemosClient from environment variables."""
    base_url, token = load_env_config()
    if not base_url or not token:
        raise ValueError("Missing MEMOS_HOST or MEMOS_TOKEN in environment.")
    return MemosClient(base_url=base_url, token=token, **kwargs)


__all__ = [
    "base_url_for_host",
    "load_env_config",
    "load_log_level",
    "create_client_from_env",
]
