"""Profile domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4


@dataclass
class Profile:
    """Domain entity for a user profile, keyed by email."""

    name: str
    email: str
    age: int
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Normalize email and keep updated_at no older than created_at."""
        self.email = normalize_email(self.email)
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at


def normalize_email(email: str) -> str:
    """Trim and lowercase an email address."""
    return email.strip().lower()
