import pytest

from sessionguard.models.user import User
from sessionguard.uow import SQLAlchemyReadOnlyUnitOfWork as ROuow
from sessionguard.uow import SQLAlchemyUnitOfWork as RWuow
from tests.factories.user import UserFactory


class TestSQLAlchemyReadOnlyUnitOfWork:
    def test_blocks_orm_flush_writes(self, app, db):
        """Flushing pending ORM changes inside the RO UoW raises."""
        with ROuow() as uow, pytest.raises(RuntimeError, match="ORM flush blocked"):
            user = UserFactory.build()  # not persisted
            uow.session.add(user)
            uow.session.flush()
        db.session.rollback()

    def test_allows_reads(self, app, db, session):
        UserFactory()
        session.flush()

        with ROuow() as uow:
            assert uow.session.query(User).count() >= 1

    def test_disallows_commit(self, app, db):
        with ROuow() as uow, pytest.raises(RuntimeError, match="does not allow commit"):
            uow.commit()


class TestSQLAlchemyUnitOfWork:
    def test_commits_on_clean_exit(self, app, db):
        with RWuow() as uow:
            user = UserFactory.build()
            uow.users.add(user)
            user_id = user.id

        with ROuow() as uow:
            assert uow.users.get(user_id) is not None

    def test_rolls_back_when_block_raises(self, app, db):
        email = "rolled-back@example.com"
        with pytest.raises(LookupError), RWuow() as uow:
            uow.users.add(UserFactory.build(email=email))
            raise LookupError("boom")

        with ROuow() as uow:
            assert uow.users.get_by_email(email) is None
