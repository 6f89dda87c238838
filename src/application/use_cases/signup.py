"""
Signup Use Case.

Creates a confirmed account at the identity provider and stores the
initial profile for it.
"""

from dataclasses import dataclass

from src.application.dto.requests import SignupRequest
from src.application.dto.responses import SignupResponse
from src.config import get_logger
from src.core.entities import Profile
from src.core.exceptions import ValidationError
from src.core.interfaces import AuthUser, IIdentityProvider
from src.core.services.profile_service import ProfileService

logger = get_logger(__name__)


@dataclass
class SignupResult:
    user: AuthUser
    profile: Profile

    def to_response(self) -> SignupResponse:
        return SignupResponse(user=self.user.to_dict())


class SignupUseCase:
    """
    Flow:
    1. Require email and password
    2. Create the account (email confirmed, name/company as metadata)
    3. Store the profile under the new user id
    """

    def __init__(self, identity: IIdentityProvider, profiles: ProfileService):
        self._identity = identity
        self._profiles = profiles

    async def execute(self, request: SignupRequest) -> SignupResult:
        email = (request.email or "").strip()
        if not email or not request.password:
            raise ValidationError("email", "Email and password are required", email or None)

        logger.info("signup_started", email_domain=email.rpartition("@")[2])
        user = await self._identity.create_user(
            email=email,
            password=request.password,
            metadata={"name": request.name, "companyName": request.company_name},
        )
        profile = await self._profiles.create(
            user_id=user.id,
            email=user.email or email,
            name=request.name,
            company_name=request.company_name,
        )
        logger.info("signup_complete", user_id=user.id)
        return SignupResult(user=user, profile=profile)
