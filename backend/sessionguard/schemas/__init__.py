"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import LoginSchema, RefreshSchema, RegisterSchema, TokenResponseSchema
from .user import UserSchema, UserUpdateSchema

__all__ = [
    "LoginSchema",
    "RefreshSchema",
    "RegisterSchema",
    "TokenResponseSchema",
    "UserSchema",
    "UserUpdateSchema",
]
