"""Profile repository protocol."""

from typing import Protocol

from domain.entities.profile import Profile


class IProfileRepository(Protocol):
    """Repository interface for Profile entities."""

    async def get_by_email(self, email: str) -> Profile | None:
        """Get a profile by its normalized email."""
        ...

    async def list_all(self) -> list[Profile]:
        """Get all profiles, newest-created first."""
        ...

    async def create(self, profile: Profile) -> Profile:
        """Insert a new profile. Raises DuplicateEmailError on a unique violation."""
        ...

    async def update(self, profile: Profile) -> Profile:
        """Overwrite the mutable fields of an existing profile."""
        ...

    async def delete_by_email(self, email: str) -> bool:
        """Delete a profile and return whether one existed."""
        ...
