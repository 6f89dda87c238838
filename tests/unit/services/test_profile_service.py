"""Tests for ProfileService."""

import pytest

from src.core.exceptions import ProfileNotFoundError
from src.core.services.profile_service import ProfileService


class TestProfileService:
    async def test_get_missing(self, profile_service: ProfileService):
        with pytest.raises(ProfileNotFoundError):
            await profile_service.get("u1")

    async def test_create(self, profile_service: ProfileService, kv_store):
        profile = await profile_service.create("u1", "a@b.nl", name="Alice", company_name="Alice BV")

        assert kv_store.data["user:u1"]["companyName"] == "Alice BV"
        assert (await profile_service.get("u1")).email == profile.email

    async def test_update_merges_allowed_fields(self, profile_service: ProfileService):
        created = await profile_service.create("u1", "a@b.nl", name="Alice")

        profile = await profile_service.update(
            "u1",
            {"iban": "NL91ABNA0417164300", "user_id": "u2", "created_at": "2000-01-01T00:00:00Z"},
        )

        assert profile.iban == "NL91ABNA0417164300"
        assert profile.name == "Alice"
        assert profile.user_id == "u1"
        assert profile.created_at == created.created_at
        assert profile.updated_at is not None

    async def test_update_creates_missing_profile(self, profile_service: ProfileService):
        profile = await profile_service.update("u1", {"company_name": "Nieuw BV"}, email="n@b.nl")

        assert profile.company_name == "Nieuw BV"
        assert profile.email == "n@b.nl"
        assert (await profile_service.find("u1")) is not None
