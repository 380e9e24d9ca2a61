"""Client-side profile records and response envelopes."""

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

LOCAL_ID_PREFIX = "local_"

T = TypeVar("T")


class Profile(BaseModel):
    """A profile as seen by the client.

    ``id`` is None for records not yet persisted remotely; records saved
    while offline carry a ``local_`` placeholder id until synced.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str | None = None
    name: str
    email: str
    age: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_local(self) -> bool:
        """True when the record only exists in the local cache."""
        return bool(self.id and self.id.startswith(LOCAL_ID_PREFIX))

    def to_input(self) -> dict[str, Any]:
        """Fields accepted by the create-or-update endpoint."""
        return {"name": self.name, "email": self.email, "age": self.age}

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class FieldError(BaseModel):
    """Field-level error reported by the API."""

    field: str
    message: str


class ApiResponse(BaseModel, Generic[T]):
    """Uniform success/message/data/errors envelope."""

    success: bool
    message: str = ""
    data: T | None = None
    count: int | None = None
    errors: list[FieldError] | None = None
