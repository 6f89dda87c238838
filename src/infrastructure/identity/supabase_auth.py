"""
Supabase Auth (GoTrue) identity provider.

Talks to the GoTrue REST API over one shared httpx client:
- ``GET  /auth/v1/user`` resolves an access token (anon key + bearer token)
- ``POST /auth/v1/admin/users`` creates a confirmed account (service role key)
"""

from typing import Any

import httpx

from src.config import IdentitySettings, get_logger
from src.core.exceptions import IdentityProviderError, InvalidTokenError
from src.core.interfaces import AuthUser, IIdentityProvider

logger = get_logger(__name__)


def _error_message(response: httpx.Response) -> str:
    """Best-effort human readable message from a GoTrue error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or f"HTTP {response.status_code}"

    if isinstance(body, dict):
        for key in ("msg", "message", "error_description", "error"):
            if body.get(key):
                return str(body[key])
    return f"HTTP {response.status_code}"


def _to_auth_user(body: dict[str, Any]) -> AuthUser:
    return AuthUser(
        id=str(body["id"]),
        email=body.get("email"),
        user_metadata=body.get("user_metadata") or {},
        created_at=body.get("created_at"),
    )


class SupabaseIdentityProvider(IIdentityProvider):
    """GoTrue REST client."""

    def __init__(
        self,
        settings: IdentitySettings,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = settings.url.rstrip("/")
        self.anon_key = settings.anon_key
        self.service_role_key = settings.service_role_key
        self._client = client or httpx.AsyncClient(timeout=settings.timeout)

    async def get_user(self, token: str) -> AuthUser:
        try:
            response = await self._client.get(
                f"{self.base_url}/auth/v1/user",
                headers={
                    "apikey": self.anon_key,
                    "Authorization": f"Bearer {token}",
                },
            )
        except httpx.HTTPError as e:
            logger.warning("identity_provider_unreachable", operation="get_user", error=str(e))
            raise InvalidTokenError("Identity provider unreachable") from e

        if response.status_code != 200:
            reason = _error_message(response)
            logger.info("auth_failed", status_code=response.status_code, reason=reason)
            raise InvalidTokenError(reason)

        body = response.json()
        if not isinstance(body, dict) or not body.get("id"):
            raise InvalidTokenError("Identity provider returned no user")
        return _to_auth_user(body)

    async def create_user(
        self,
        email: str,
        password: str,
        metadata: dict[str, Any] | None = None,
    ) -> AuthUser:
        payload = {
            "email": email,
            "password": password,
            "user_metadata": metadata or {},
            # No mail server is configured, so accounts are confirmed on creation
            "email_confirm": True,
        }
        try:
            response = await self._client.post(
                f"{self.base_url}/auth/v1/admin/users",
                json=payload,
                headers={
                    "apikey": self.service_role_key,
                    "Authorization": f"Bearer {self.service_role_key}",
                },
            )
        except httpx.HTTPError as e:
            logger.error("identity_provider_unreachable", operation="create_user", error=str(e))
            raise IdentityProviderError("create_user", "Identity provider unreachable") from e

        if response.status_code not in (200, 201):
            reason = _error_message(response)
            logger.warning(
                "signup_rejected",
                status_code=response.status_code,
                reason=reason,
            )
            raise IdentityProviderError("create_user", reason, response.status_code)

        body = response.json()
        # Some GoTrue versions wrap the created user
        if isinstance(body, dict) and isinstance(body.get("user"), dict):
            body = body["user"]
        user = _to_auth_user(body)
        logger.info("identity_user_created", user_id=user.id)
        return user

    async def close(self) -> None:
        await self._client.aclose()
