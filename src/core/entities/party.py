"""Client and company profile entities."""

from datetime import datetime
from typing import Any

from pydantic import Field, field_validator

from src.core.entities.base import CamelModel, new_id, utcnow

HOME_COUNTRY = "Nederland"


class Client(CamelModel):
    """A customer of the user. Owned by exactly one user."""

    id: str = Field(default_factory=new_id)
    user_id: str
    name: str
    email: str = ""
    phone: str = ""
    address: str = ""
    postal_code: str = ""
    city: str = ""
    country: str = HOME_COUNTRY
    kvk_number: str = ""
    vat_number: str = ""
    notes: str = ""
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @field_validator(
        "email", "phone", "address", "postal_code", "city", "kvk_number", "vat_number", "notes",
        mode="before",
    )
    @classmethod
    def _none_as_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("country", mode="before")
    @classmethod
    def _default_country(cls, v: Any) -> Any:
        return v or HOME_COUNTRY

    def formatted_address(self) -> str:
        """
        Postal address as printed on documents.

        Street line, then postal code and city, then the country only when
        it is not the home country.
        """
        lines = []
        if self.address:
            lines.append(self.address)
        locality = " ".join(part for part in (self.postal_code, self.city) if part)
        if locality:
            lines.append(locality)
        if self.country and self.country != HOME_COUNTRY:
            lines.append(self.country)
        return "\n".join(lines)


class Profile(CamelModel):
    """Company details of a user, printed on quotations and invoices."""

    user_id: str
    email: str = ""
    name: str = ""
    company_name: str = ""
    address: str = ""
    phone: str = ""
    kvk_number: str = ""
    vat_number: str = ""
    iban: str = ""
    logo: str | None = None  # data URL
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime | None = None

    @field_validator(
        "email", "name", "company_name", "address", "phone", "kvk_number", "vat_number", "iban",
        mode="before",
    )
    @classmethod
    def _none_as_empty(cls, v: Any) -> Any:
        return "" if v is None else v
