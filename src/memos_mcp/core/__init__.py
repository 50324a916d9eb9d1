"""Core domain surface for memos-mcp (transport-agnostic)."""

from .client import (
    MemosClient,
    MemosClientError,
    MemosContractError,
    MemosHTTPError,
    MemosModelValidationError,
    MemosParseError,
    Transport,
)
from .config import base_url_for_host, create_client_from_env, load_env_config
from .registry import (
    discover_tool_modules,
    iter_tool_functions,
    register_discovered_tools,
    tool_annotations,
)
from .services import UPDATE_MASK, AuthService, NoteService, UserService

__all__ = [
    # Client / session
    "MemosClient",
    "Transport",
    # Exceptions
    "MemosClientError",
    "MemosHTTPError",
    "MemosParseError",
    "MemosModelValidationError",
    "MemosContractError",
    # Services
    "AuthService",
    "NoteService",
    "UserService",
    "UPDATE_MASK",
    # Config helpers
    "base_url_for_host",
    "create_client_from_env",
    "load_env_config",
    # Registry helpers
    "discover_tool_modules",
    "iter_tool_functions",
    "register_discovered_tools",
    "tool_annotations",
]
