# tests/unit/services/test_identity_service.py
from __future__ import annotations

import pytest
from sqlalchemy import func, select

from sessionguard.infra.security.werkzeug_password_hasher import WerkzeugPasswordHasher
from sessionguard.models.user import User
from sessionguard.services._shared.outcome import ErrorKind
from sessionguard.services.identity.dto import UserRegisterIn, UserUpdateIn
from sessionguard.services.identity.service import IdentityService
from tests.factories.user import UserFactory


@pytest.fixture()
def service() -> IdentityService:
    return IdentityService(password_hasher=WerkzeugPasswordHasher())


def _count_users(session) -> int:
    return session.execute(select(func.count(User.id))).scalar_one()


# ----------------------------- Registration ------------------------------- #
def test_register_hashes_password_and_returns_public_view(service, session, faker):
    email = faker.unique.email()
    outcome = service.register(
        UserRegisterIn(email=email, password="Sup3rSecret!", name="Ada", weight=61.0)
    )

    assert outcome.ok
    out = outcome.value
    assert out.id is not None
    assert out.email == email.lower()
    assert out.weight == 61.0
    assert out.daily_caffeine_limit is None

    stored = session.get(User, out.id)
    assert stored.password_hash != "Sup3rSecret!"
    assert WerkzeugPasswordHasher().matches("Sup3rSecret!", stored.password_hash)


def test_register_duplicate_email_creates_nothing(service, session):
    UserFactory(email="taken@example.com")
    session.flush()
    before = _count_users(session)

    outcome = service.register(
        UserRegisterIn(email="Taken@Example.com", password="Sup3rSecret!", name="Dup")
    )

    assert outcome.error is ErrorKind.DUPLICATE_EMAIL
    assert _count_users(session) == before


# ------------------------------- Retrieval -------------------------------- #
def test_get_user_info(service, session):
    user = UserFactory(name="Grace", daily_caffeine_limit=300)
    session.flush()

    out = service.get_user_info(user.id).unwrap()

    assert (out.id, out.name, out.daily_caffeine_limit) == (user.id, "Grace", 300)


def test_get_user_info_unknown_user(service):
    assert service.get_user_info(987654).error is ErrorKind.USER_NOT_FOUND


# -------------------------------- Update ---------------------------------- #
def test_edit_changes_only_provided_fields(service, session):
    user = UserFactory(name="Before", weight=80.0, daily_caffeine_limit=400)
    session.flush()

    out = service.edit_user_info(user.id, UserUpdateIn(name="After")).unwrap()

    assert out.name == "After"
    assert out.weight == 80.0
    assert out.daily_caffeine_limit == 400


def test_edit_to_email_of_other_user_is_duplicate(service, session):
    user = UserFactory(email="me@example.com")
    UserFactory(email="other@example.com")
    session.flush()

    outcome = service.edit_user_info(user.id, UserUpdateIn(email="other@example.com"))

    assert outcome.error is ErrorKind.DUPLICATE_EMAIL
    assert service.get_user_info(user.id).value.email == "me@example.com"


def test_edit_to_own_email_is_not_a_conflict(service, session):
    user = UserFactory(email="me@example.com")
    session.flush()

    outcome = service.edit_user_info(user.id, UserUpdateIn(email="ME@example.com", name="Renamed"))

    assert outcome.ok
    assert outcome.value.email == "me@example.com"
    assert outcome.value.name == "Renamed"


def test_edit_to_free_email(service, session):
    user = UserFactory(email="me@example.com")
    session.flush()

    out = service.edit_user_info(user.id, UserUpdateIn(email="new@example.com")).unwrap()

    assert out.email == "new@example.com"


def test_edit_unknown_user(service):
    outcome = service.edit_user_info(987654, UserUpdateIn(name="Nobody"))
    assert outcome.error is ErrorKind.USER_NOT_FOUND


# --------------------------- Model validation ----------------------------- #
def test_register_blank_name_is_invalid_profile(service, session):
    outcome = service.register(
        UserRegisterIn(email="blank@example.com", password="Sup3rSecret!", name="   ")
    )

    assert outcome.error is ErrorKind.INVALID_PROFILE
    found = session.execute(select(User).where(User.email == "blank@example.com")).scalar()
    assert found is None


def test_edit_blank_name_is_invalid_profile(service, session):
    user = UserFactory(name="Kept")
    session.flush()

    outcome = service.edit_user_info(user.id, UserUpdateIn(name="  "))

    assert outcome.error is ErrorKind.INVALID_PROFILE
