"""SQLAlchemy implementation of Profile repository."""

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import DuplicateEmailError
from domain.entities.profile import Profile
from infrastructure.database.models import ProfileModel


class SQLAlchemyProfileRepository:
    """SQLAlchemy implementation of IProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_email(self, email: str) -> Profile | None:
        """Get a profile by email."""
        model = await self._get_model(email)
        return self._to_entity(model) if model else None

    async def list_all(self) -> list[Profile]:
        """Get all profiles, newest-created first."""
        stmt = select(ProfileModel).order_by(ProfileModel.created_at.desc())
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def create(self, profile: Profile) -> Profile:
        """Create a new profile."""
        model = self._to_model(profile)
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as e:
            await self._session.rollback()
            raise DuplicateEmailError(profile.email) from e
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, profile: Profile) -> Profile:
        """Update an existing profile's name and age."""
        model = await self._get_model(profile.email)

        if not model:
            raise ValueError(f"Profile {profile.email} not found")

        model.name = profile.name
        model.age = profile.age

        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def delete_by_email(self, email: str) -> bool:
        """Delete a profile by email."""
        stmt = delete(ProfileModel).where(ProfileModel.email == email)
        result = await self._session.execute(stmt)
        await self._session.flush()
        return bool(result.rowcount)

    async def _get_model(self, email: str) -> ProfileModel | None:
        stmt = select(ProfileModel).where(ProfileModel.email == email)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    def _to_entity(self, model: ProfileModel) -> Profile:
        """Convert ORM model to domain entity."""
        return Profile(
            id=model.id,
            name=model.name,
            email=model.email,
            age=model.age,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Profile) -> ProfileModel:
        """Convert domain entity to ORM model."""
        return ProfileModel(
            id=entity.id,
            name=entity.name,
            email=entity.email,
            age=entity.age,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
