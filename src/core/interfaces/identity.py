"""
Abstract interface for the identity provider.

Token issuance, verification and refresh live in the provider; the
application only resolves a bearer token to a user and creates accounts.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass
class AuthUser:
    """A user as known by the identity provider."""

    id: str
    email: str | None = None
    user_metadata: dict[str, Any] = field(default_factory=dict)
    created_at: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "user_metadata": self.user_metadata,
            "created_at": self.created_at,
        }


class IIdentityProvider(ABC):
    """Interface for token verification and account creation."""

    @abstractmethod
    async def get_user(self, token: str) -> AuthUser:
        """
        Resolve a bearer token to its user.

        Raises:
            InvalidTokenError: If the provider rejects the token.
        """
        pass

    @abstractmethod
    async def create_user(
        self,
        email: str,
        password: str,
        metadata: dict[str, Any] | None = None,
    ) -> AuthUser:
        """
        Create a confirmed account.

        Raises:
            IdentityProviderError: If the provider refuses the account.
        """
        pass

    async def close(self) -> None:
        """Release any held connections."""
        return None
