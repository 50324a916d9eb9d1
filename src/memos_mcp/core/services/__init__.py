"""Typed resource services built on a MemosClient session."""

from .auth import AuthService
from .notes import UPDATE_MASK, NoteService
from .users import UserService

__all__ = ["AuthService", "NoteService", "UserService", "UPDATE_MASK"]
