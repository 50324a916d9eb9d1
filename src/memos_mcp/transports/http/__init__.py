from .app import build_fastmcp
from .config import HttpConfig

__all__ = ["HttpConfig", "build_fastmcp"]
