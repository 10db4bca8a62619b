from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash

from sessionguard.services._shared.ports import PasswordHasher


class WerkzeugPasswordHasher(PasswordHasher):
    """Password hashing with ``werkzeug.security`` (scrypt by default)."""

    def hash(self, plaintext: str) -> str:
        return generate_password_hash(plaintext)

    def matches(self, plaintext: str, hashed: str) -> bool:
        if not hashed:
            return False
        return check_password_hash(hashed, plaintext)
