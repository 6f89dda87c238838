"""Company profile of a user, stored under ``user:<userId>``."""

from typing import Any

from src.config import get_logger
from src.core.entities import Profile
from src.core.entities.base import utcnow
from src.core.exceptions import ProfileNotFoundError
from src.core.interfaces import IKeyValueStore
from src.core.services.keys import profile_key

logger = get_logger(__name__)

PROFILE_FIELDS = frozenset({
    "email",
    "name",
    "company_name",
    "address",
    "phone",
    "kvk_number",
    "vat_number",
    "iban",
    "logo",
})


class ProfileService:
    """Read and update the profile; profiles are never deleted."""

    def __init__(self, store: IKeyValueStore):
        self._store = store

    async def find(self, user_id: str) -> Profile | None:
        record = await self._store.get(profile_key(user_id))
        return Profile.model_validate(record) if record else None

    async def get(self, user_id: str) -> Profile:
        profile = await self.find(user_id)
        if profile is None:
            raise ProfileNotFoundError(user_id)
        return profile

    async def create(
        self,
        user_id: str,
        email: str | None,
        name: str = "",
        company_name: str = "",
    ) -> Profile:
        profile = Profile(user_id=user_id, email=email, name=name, company_name=company_name)
        await self._store.set(profile_key(user_id), profile.to_record())
        logger.info("profile_created", user_id=user_id)
        return profile

    async def update(
        self,
        user_id: str,
        changes: dict[str, Any],
        email: str | None = None,
    ) -> Profile:
        """
        Merge allow-listed *changes* into the profile.

        A missing profile is created from the changes, with *email* from the
        identity provider as a fallback. userId and createdAt never change.
        """
        current = await self.find(user_id)
        if current is None:
            data: dict[str, Any] = {"user_id": user_id, "email": email}
        else:
            data = current.model_dump()

        data.update({k: v for k, v in changes.items() if k in PROFILE_FIELDS})
        data["user_id"] = user_id
        data["updated_at"] = utcnow()

        profile = Profile.model_validate(data)
        await self._store.set(profile_key(user_id), profile.to_record())
        logger.info(
            "profile_updated",
            user_id=user_id,
            created=current is None,
            fields=sorted(k for k in changes if k in PROFILE_FIELDS),
        )
        return profile
