"""memos_mcp package exports."""

from .core.client import (
    MemosClient,
    MemosClientError,
    MemosContractError,
    MemosHTTPError,
    MemosModelValidationError,
    MemosParseError,
)
from .core.registry import discover_tool_modules, register_discovered_tools
from .core.services import AuthService, NoteService, UserService
from .transports.stdio.main import main as run_server

__all__ = [
    # Client
    "MemosClient",
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
    # Server utilities
    "run_server",
    "discover_tool_modules",
    "register_discovered_tools",
]
