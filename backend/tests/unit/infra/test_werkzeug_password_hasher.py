from __future__ import annotations

from sessionguard.infra.security.werkzeug_password_hasher import WerkzeugPasswordHasher


def test_hash_matches_only_original_password():
    hasher = WerkzeugPasswordHasher()
    hashed = hasher.hash("Passw0rd!")

    assert hashed != "Passw0rd!"
    assert hasher.matches("Passw0rd!", hashed) is True
    assert hasher.matches("passw0rd!", hashed) is False


def test_empty_hash_never_matches():
    assert WerkzeugPasswordHasher().matches("anything", "") is False
