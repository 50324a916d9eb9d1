"""
MCP tool functions. Every public coroutine here whose first parameter is
`client` is discovered and registered by memos_mcp.core.registry.
"""
