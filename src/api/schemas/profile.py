"""Pydantic schemas for Profile API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ProfileUpsert(BaseModel):
    """Schema for creating or updating a Profile.

    Field rules are enforced by the domain validators so that every failure is
    reported in the same field/message shape; this schema only fixes the
    accepted JSON types.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"name": "Jane Doe", "email": "jane@example.com", "age": 30}
        },
    )

    name: str | None = Field(None, description="Full name, first and last")
    email: str | None = Field(None, description="Email address, unique per profile")
    # Raw JSON value; booleans and strings are judged by the age validator.
    age: Any = Field(None, description="Whole number of years, 1-120")


class ProfileResponse(BaseModel):
    """Schema for Profile response."""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "name": "Jane Doe",
                "email": "jane@example.com",
                "age": 30,
                "createdAt": "2026-01-28T10:00:00",
                "updatedAt": "2026-01-28T10:00:00",
            }
        },
    )

    id: UUID
    name: str
    email: str
    age: int
    created_at: datetime
    updated_at: datetime


class ProfileDetailResponse(BaseModel):
    """Envelope for a single Profile."""

    success: bool = True
    message: str
    data: ProfileResponse


class ProfileListResponse(BaseModel):
    """Envelope for a list of Profiles."""

    success: bool = True
    message: str
    count: int
    data: list[ProfileResponse]
