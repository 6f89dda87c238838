"""Shared base for stored entities.

Records are persisted as camelCase JSON so they stay readable by the web
frontend; Python code works with snake_case attributes.
"""

import uuid
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def new_id() -> str:
    """Generate a record id."""
    return uuid.uuid4().hex


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=False,
    )

    @field_validator("*", mode="after")
    @classmethod
    def _assume_utc(cls, v: Any) -> Any:
        # Date-only strings from HTML date inputs parse as naive datetimes
        if isinstance(v, datetime) and v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v

    def to_record(self) -> dict[str, Any]:
        """Serialize for the key-value store."""
        return self.model_dump(mode="json", by_alias=True)
