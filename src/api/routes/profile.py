"""Company profile endpoints."""

from fastapi import APIRouter, Depends

from src.api.dependencies import AuthenticatedRoute, get_current_user, get_profile_service
from src.application.dto.requests import ProfileUpdateRequest
from src.application.dto.responses import ErrorResponse, ProfileResponse
from src.core.interfaces import AuthUser
from src.core.services.profile_service import ProfileService

router = APIRouter(prefix="/profile", tags=["profile"], route_class=AuthenticatedRoute)


@router.get(
    "",
    response_model=ProfileResponse,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_profile(
    user: AuthUser = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    return ProfileResponse(profile=await profiles.get(user.id))


@router.put(
    "",
    response_model=ProfileResponse,
    responses={401: {"model": ErrorResponse}},
)
async def update_profile(
    request: ProfileUpdateRequest,
    user: AuthUser = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    """Merge the given fields into the profile, creating it if needed."""
    profile = await profiles.update(user.id, request.changes(), email=user.email)
    return ProfileResponse(profile=profile)
