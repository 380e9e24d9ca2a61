"""Profile service layer with business logic."""

from collections.abc import Callable
from typing import Any, Mapping

import structlog

from core.exceptions import ProfileNotFoundError, ProfileValidationError
from domain.entities.profile import Profile, normalize_email
from domain.repositories.unit_of_work import IUnitOfWork
from domain.validation import normalize_profile, validate_profile

logger = structlog.get_logger()


class ProfileService:
    """Service layer for Profile business logic."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def create_or_update(self, candidate: Mapping[str, Any]) -> tuple[Profile, bool]:
        """Insert a profile, or overwrite name/age of the one with the same email.

        Args:
            candidate: Raw ``name``, ``email`` and ``age`` values.

        Returns:
            The stored profile and True when it was newly created.

        Raises:
            ProfileValidationError: If any field is invalid.
            DuplicateEmailError: If a concurrent insert claimed the email first.
        """
        errors = validate_profile(candidate)
        if errors:
            raise ProfileValidationError([error.to_dict() for error in errors])

        fields = normalize_profile(candidate)

        async with self._uow_factory() as uow:
            existing = await uow.profiles.get_by_email(fields["email"])
            if existing:
                existing.name = fields["name"]
                existing.age = fields["age"]
                updated = await uow.profiles.update(existing)
                await uow.commit()
                logger.info("profile_updated", email=updated.email)
                return updated, False

            created = await uow.profiles.create(
                Profile(name=fields["name"], email=fields["email"], age=fields["age"])
            )
            await uow.commit()
            logger.info("profile_created", email=created.email)
            return created, True

    async def get_by_email(self, email: str) -> Profile:
        """Get a profile by email (case-insensitive)."""
        normalized = normalize_email(email)
        async with self._uow_factory() as uow:
            profile = await uow.profiles.get_by_email(normalized)
            if not profile:
                raise ProfileNotFoundError(normalized)
            return profile

    async def list_all(self) -> list[Profile]:
        """Get every profile, newest-created first."""
        async with self._uow_factory() as uow:
            return await uow.profiles.list_all()  # type: ignore[no-any-return]

    async def delete_by_email(self, email: str) -> None:
        """Delete the profile with the given email."""
        normalized = normalize_email(email)
        async with self._uow_factory() as uow:
            deleted = await uow.profiles.delete_by_email(normalized)
            if not deleted:
                raise ProfileNotFoundError(normalized)
            await uow.commit()
            logger.info("profile_deleted", email=normalized)
