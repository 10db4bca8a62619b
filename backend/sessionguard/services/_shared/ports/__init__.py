"""
sessionguard.services._shared.ports
===================================

*Ports* (hexagonal interfaces) for token handling and session state.

These ports decouple the session coordinator from concrete token, storage
and hashing mechanisms.

Modules
-------
- :mod:`token_codec`:
    Defines :class:`~.TokenCodec`, issuing and verifying signed, expiring tokens.

- :mod:`refresh_token_store`:
    Defines :class:`~.RefreshTokenStore` (single-slot session record per
    identity, with compare-and-swap) and an in-memory implementation.

- :mod:`revocation_list`:
    Defines :class:`~.RevocationList` (consumed tokens, TTL-bounded) and an
    in-memory implementation.

- :mod:`password_hasher`:
    Defines :class:`~.PasswordHasher`.

Concrete adapters (Redis, Flask-JWT-Extended, Werkzeug) live under
``sessionguard.infra``.
"""

from __future__ import annotations

from .password_hasher import PasswordHasher
from .refresh_token_store import InMemoryRefreshTokenStore, RefreshTokenStore
from .revocation_list import InMemoryRevocationList, RevocationList
from .token_codec import Identity, TokenCodec

__all__ = [
    "Identity",
    "TokenCodec",
    "RefreshTokenStore",
    "InMemoryRefreshTokenStore",
    "RevocationList",
    "InMemoryRevocationList",
    "PasswordHasher",
]
