"""Profile API routes."""

from fastapi import APIRouter, Depends, Request, Response, status

from api.dependencies import get_profile_service
from api.schemas.common import ErrorResponse, MessageResponse
from api.schemas.profile import (
    ProfileDetailResponse,
    ProfileListResponse,
    ProfileResponse,
    ProfileUpsert,
)
from core.rate_limit import limiter
from domain.services.profile_service import ProfileService

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.post(
    "",
    response_model=ProfileDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create or update a profile",
    responses={
        200: {"model": ProfileDetailResponse, "description": "Profile updated"},
        201: {"description": "Profile created"},
        400: {"model": ErrorResponse, "description": "Validation failed or email already exists"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def create_or_update_profile(
    request: Request,
    response: Response,
    body: ProfileUpsert,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Create a profile, or update name and age of the one with this email."""
    profile, created = await service.create_or_update(body.model_dump())
    if not created:
        response.status_code = status.HTTP_200_OK
    return ProfileDetailResponse(
        message="Profile created successfully" if created else "Profile updated successfully",
        data=ProfileResponse.model_validate(profile),
    )


@router.get(
    "/{email}",
    response_model=ProfileDetailResponse,
    summary="Get a profile by email",
    responses={404: {"model": ErrorResponse, "description": "Profile not found"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_profile(
    request: Request,
    email: str,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Look up a profile by email. Matching is case-insensitive."""
    profile = await service.get_by_email(email)
    return ProfileDetailResponse(
        message="Profile retrieved successfully",
        data=ProfileResponse.model_validate(profile),
    )


@router.get(
    "",
    response_model=ProfileListResponse,
    summary="List all profiles",
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_profiles(
    request: Request,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileListResponse:
    """Get every profile, newest-created first."""
    profiles = await service.list_all()
    return ProfileListResponse(
        message="Profiles retrieved successfully",
        count=len(profiles),
        data=[ProfileResponse.model_validate(profile) for profile in profiles],
    )


@router.delete(
    "/{email}",
    response_model=MessageResponse,
    summary="Delete a profile",
    responses={404: {"model": ErrorResponse, "description": "Profile not found"}},
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def delete_profile(
    request: Request,
    email: str,
    service: ProfileService = Depends(get_profile_service),
) -> MessageResponse:
    """Delete the profile with this email."""
    await service.delete_by_email(email)
    return MessageResponse(message="Profile deleted successfully")
