"""Integration tests for the SQLAlchemy profile repository."""

from datetime import datetime

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.exceptions import DuplicateEmailError
from domain.entities.profile import Profile
from infrastructure.database.repositories.sqlalchemy_profile_repo import (
    SQLAlchemyProfileRepository,
)
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


class TestSQLAlchemyProfileRepository:
    @pytest.mark.asyncio
    async def test_create_and_get_by_email(self, db_session: AsyncSession) -> None:
        repo = SQLAlchemyProfileRepository(db_session)

        created = await repo.create(Profile(name="Jane Doe", email="jane@example.com", age=30))
        found = await repo.get_by_email("jane@example.com")

        assert found is not None
        assert found.id == created.id
        assert found.created_at is not None

    @pytest.mark.asyncio
    async def test_unique_email_is_enforced(self, db_session: AsyncSession) -> None:
        repo = SQLAlchemyProfileRepository(db_session)
        await repo.create(Profile(name="Jane Doe", email="jane@example.com", age=30))

        with pytest.raises(DuplicateEmailError):
            await repo.create(Profile(name="Jane Again", email="jane@example.com", age=31))

    @pytest.mark.asyncio
    async def test_update_changes_name_and_age_only(self, db_session: AsyncSession) -> None:
        repo = SQLAlchemyProfileRepository(db_session)
        created = await repo.create(Profile(name="Jane Doe", email="jane@example.com", age=30))

        created.name = "Jane Smith"
        created.age = 31
        updated = await repo.update(created)

        assert updated.id == created.id
        assert updated.name == "Jane Smith"
        assert updated.age == 31
        assert updated.created_at == created.created_at

    @pytest.mark.asyncio
    async def test_update_missing_raises(self, db_session: AsyncSession) -> None:
        repo = SQLAlchemyProfileRepository(db_session)

        with pytest.raises(ValueError):
            await repo.update(Profile(name="Ghost User", email="ghost@example.com", age=40))

    @pytest.mark.asyncio
    async def test_delete_by_email(self, db_session: AsyncSession) -> None:
        repo = SQLAlchemyProfileRepository(db_session)
        await repo.create(Profile(name="Jane Doe", email="jane@example.com", age=30))

        assert await repo.delete_by_email("jane@example.com") is True
        assert await repo.delete_by_email("jane@example.com") is False
        assert await repo.get_by_email("jane@example.com") is None

    @pytest.mark.asyncio
    async def test_list_all_returns_newest_first(self, db_session: AsyncSession) -> None:
        repo = SQLAlchemyProfileRepository(db_session)
        for email, created_at in [
            ("middle@example.com", datetime(2024, 3, 1, 12, 0)),
            ("oldest@example.com", datetime(2024, 1, 1, 12, 0)),
            ("newest@example.com", datetime(2024, 6, 1, 12, 0)),
        ]:
            await repo.create(
                Profile(name="Jane Doe", email=email, age=30, created_at=created_at)
            )

        profiles = await repo.list_all()

        assert [p.email for p in profiles] == [
            "newest@example.com",
            "middle@example.com",
            "oldest@example.com",
        ]


class TestSQLAlchemyUnitOfWork:
    @pytest.mark.asyncio
    async def test_commit_persists_across_units(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        async with SQLAlchemyUnitOfWork(session_factory) as uow:
            await uow.profiles.create(Profile(name="Jane Doe", email="jane@example.com", age=30))
            await uow.commit()

        async with SQLAlchemyUnitOfWork(session_factory) as uow:
            assert len(await uow.profiles.list_all()) == 1

    @pytest.mark.asyncio
    async def test_uncommitted_work_is_discarded(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        async with SQLAlchemyUnitOfWork(session_factory) as uow:
            await uow.profiles.create(Profile(name="Jane Doe", email="jane@example.com", age=30))

        async with SQLAlchemyUnitOfWork(session_factory) as uow:
            assert await uow.profiles.list_all() == []

    def test_profiles_requires_context(self) -> None:
        with pytest.raises(RuntimeError):
            SQLAlchemyUnitOfWork(async_sessionmaker()).profiles
