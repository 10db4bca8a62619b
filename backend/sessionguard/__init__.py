"""SessionGuard: token lifecycle service (login, refresh rotation, logout).

Expose the application factory so callers (gunicorn, ``flask --app``) can use
``sessionguard:create_app()``.
"""

from __future__ import annotations

from .factory import create_app

__all__ = ["create_app"]
