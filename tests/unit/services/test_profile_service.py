"""Unit tests for ProfileService."""

import pytest

from core.exceptions import DuplicateEmailError, ProfileNotFoundError, ProfileValidationError
from domain.entities.profile import Profile
from domain.services.profile_service import ProfileService
from tests.unit.conftest import FakeUnitOfWork


@pytest.fixture
def service(uow: FakeUnitOfWork) -> ProfileService:
    return ProfileService(lambda: uow)


# --- create_or_update ---


class TestCreateOrUpdate:
    @pytest.mark.asyncio
    async def test_creates_new_profile(self, service: ProfileService, uow: FakeUnitOfWork):
        uow.profiles.get_by_email.return_value = None
        uow.profiles.create.side_effect = lambda profile: profile

        profile, created = await service.create_or_update(
            {"name": "Jane Doe", "email": "jane@example.com", "age": 30}
        )

        assert created is True
        assert profile.name == "Jane Doe"
        assert profile.age == 30
        assert uow.committed

    @pytest.mark.asyncio
    async def test_normalizes_fields_before_storing(
        self, service: ProfileService, uow: FakeUnitOfWork
    ):
        uow.profiles.get_by_email.return_value = None
        uow.profiles.create.side_effect = lambda profile: profile

        profile, _ = await service.create_or_update(
            {"name": "  Jane Doe ", "email": " Jane@Example.COM ", "age": "30"}
        )

        uow.profiles.get_by_email.assert_called_once_with("jane@example.com")
        assert profile.email == "jane@example.com"
        assert profile.name == "Jane Doe"
        assert profile.age == 30

    @pytest.mark.asyncio
    async def test_updates_existing_profile_keeping_identity(
        self, service: ProfileService, uow: FakeUnitOfWork
    ):
        existing = Profile(name="Jane Doe", email="jane@example.com", age=30)
        uow.profiles.get_by_email.return_value = existing
        uow.profiles.update.side_effect = lambda profile: profile

        profile, created = await service.create_or_update(
            {"name": "Jane Smith", "email": "JANE@example.com", "age": 31}
        )

        assert created is False
        assert profile.id == existing.id
        assert profile.created_at == existing.created_at
        assert profile.name == "Jane Smith"
        assert profile.age == 31
        uow.profiles.create.assert_not_called()
        assert uow.committed

    @pytest.mark.asyncio
    async def test_rejects_invalid_fields_without_touching_store(
        self, service: ProfileService, uow: FakeUnitOfWork
    ):
        with pytest.raises(ProfileValidationError) as exc_info:
            await service.create_or_update({"name": "Al", "email": "not-an-email", "age": 0})

        assert exc_info.value.status_code == 400
        assert [e["field"] for e in exc_info.value.errors or []] == ["name", "email", "age"]
        uow.profiles.get_by_email.assert_not_called()
        assert not uow.committed

    @pytest.mark.asyncio
    async def test_propagates_duplicate_email_from_concurrent_insert(
        self, service: ProfileService, uow: FakeUnitOfWork
    ):
        uow.profiles.get_by_email.return_value = None
        uow.profiles.create.side_effect = DuplicateEmailError("jane@example.com")

        with pytest.raises(DuplicateEmailError) as exc_info:
            await service.create_or_update(
                {"name": "Jane Doe", "email": "jane@example.com", "age": 30}
            )

        assert exc_info.value.message == "Email already exists"
        assert not uow.committed


# --- get_by_email ---


class TestGetByEmail:
    @pytest.mark.asyncio
    async def test_returns_profile(self, service: ProfileService, uow: FakeUnitOfWork):
        profile = Profile(name="Jane Doe", email="jane@example.com", age=30)
        uow.profiles.get_by_email.return_value = profile

        result = await service.get_by_email("  JANE@EXAMPLE.COM")

        assert result is profile
        uow.profiles.get_by_email.assert_called_once_with("jane@example.com")

    @pytest.mark.asyncio
    async def test_missing_raises_not_found(self, service: ProfileService, uow: FakeUnitOfWork):
        uow.profiles.get_by_email.return_value = None

        with pytest.raises(ProfileNotFoundError) as exc_info:
            await service.get_by_email("ghost@example.com")

        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Profile not found"


# --- list_all ---


class TestListAll:
    @pytest.mark.asyncio
    async def test_returns_repository_order(self, service: ProfileService, uow: FakeUnitOfWork):
        profiles = [
            Profile(name="Bob Stone", email="bob@example.com", age=40),
            Profile(name="Ann Lee", email="ann@example.com", age=22),
        ]
        uow.profiles.list_all.return_value = profiles

        assert await service.list_all() == profiles


# --- delete_by_email ---


class TestDeleteByEmail:
    @pytest.mark.asyncio
    async def test_deletes_and_commits(self, service: ProfileService, uow: FakeUnitOfWork):
        uow.profiles.delete_by_email.return_value = True

        await service.delete_by_email("Jane@Example.com")

        uow.profiles.delete_by_email.assert_called_once_with("jane@example.com")
        assert uow.committed

    @pytest.mark.asyncio
    async def test_missing_raises_not_found(self, service: ProfileService, uow: FakeUnitOfWork):
        uow.profiles.delete_by_email.return_value = False

        with pytest.raises(ProfileNotFoundError):
            await service.delete_by_email("ghost@example.com")

        assert not uow.committed
