"""Account signup. Sign-in and token refresh happen at the identity provider."""

from fastapi import APIRouter, Depends

from src.api.dependencies import get_signup_use_case
from src.application.dto.requests import SignupRequest
from src.application.dto.responses import ErrorResponse, SignupResponse
from src.application.use_cases.signup import SignupUseCase

router = APIRouter(tags=["auth"])


@router.post(
    "/signup",
    response_model=SignupResponse,
    responses={400: {"model": ErrorResponse}},
)
async def signup(
    request: SignupRequest,
    use_case: SignupUseCase = Depends(get_signup_use_case),
) -> SignupResponse:
    """Create a confirmed account and its profile."""
    result = await use_case.execute(request)
    return result.to_response()
