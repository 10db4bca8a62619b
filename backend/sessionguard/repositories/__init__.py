"""Repository layer (persistence-only, no transaction control)."""

from __future__ import annotations

from .base import BaseRepository
from .user import UserRepository

__all__ = ["BaseRepository", "UserRepository"]
