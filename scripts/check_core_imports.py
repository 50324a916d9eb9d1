#!/usr/bin/env python3
"""
Fail if the memos_mcp core reaches into a transport layer.

Everything under src/memos_mcp/core/ must stay usable as a plain library:
no MCP server runtime, no ASGI stack, no imports from memos_mcp.transports.
The wire models additionally stay free of HTTP and session code so they can
be validated without a client.
"""

from __future__ import annotations

import ast
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
CORE_DIR = REPO_ROOT / "src" / "memos_mcp" / "core"

FORBIDDEN_PREFIXES = (
    "starlette",
    "uvicorn",
    "mcp.server",
    "fastmcp",
    "memos_mcp.transports",
)

# per-file extras, relative to CORE_DIR
FORBIDDEN_BY_FILE = {
    "models.py": ("httpx", "memos_mcp.core.client", "memos_mcp.core.services"),
}


def is_forbidden(module: str, prefixes: tuple[str, ...]) -> bool:
    return any(
        module == prefix or module.startswith(prefix + ".") for prefix in prefixes
    )


def imported_modules(tree: ast.AST) -> list[str]:
    found: list[str] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            found.extend(alias.name for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and node.module and not node.level:
            found.append(node.module)
    return found


def scan_file(path: Path) -> list[str]:
    rel = path.relative_to(CORE_DIR).as_posix()
    prefixes = FORBIDDEN_PREFIXES + FORBIDDEN_BY_FILE.get(rel, ())
    tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    return [
        f"{path}: forbidden import '{mod}'"
        for mod in imported_modules(tree)
        if is_forbidden(mod, prefixes)
    ]


def main() -> int:
    violations: list[str] = []
    for py_file in sorted(CORE_DIR.rglob("*.py")):
        violations.extend(scan_file(py_file))

    for v in violations:
        print(v, file=sys.stderr)
    return 1 if violations else 0


if __name__ == "__main__":
    sys.exit(main())
