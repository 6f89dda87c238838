"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation. Bodies use camelCase keys;
unknown keys are dropped, so server-controlled fields (id, userId,
numbers, createdAt, totals) can never be written through a request.
Numeric fields on documents stay permissive: unparseable values degrade
to defaults instead of rejecting the request.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from src.core.entities import InvoiceStatus, QuotationStatus

Number = float | int | str | None


class RequestModel(BaseModel):
    """camelCase request body; extra keys ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def changes(self) -> dict[str, Any]:
        """Fields the caller actually sent, snake_case."""
        return self.model_dump(exclude_unset=True)


class SignupRequest(RequestModel):
    """Account creation. Missing email/password is reported as 400."""

    email: str | None = Field(default=None, examples=["jan@bouwbedrijf.nl"])
    password: str | None = Field(default=None, min_length=1)
    name: str = ""
    company_name: str = ""


class ProfileUpdateRequest(RequestModel):
    email: str | None = None
    name: str | None = None
    company_name: str | None = None
    address: str | None = None
    phone: str | None = None
    kvk_number: str | None = None
    vat_number: str | None = None
    iban: str | None = None
    logo: str | None = Field(default=None, description="Logo as data URL")


class ClientCreateRequest(RequestModel):
    name: str | None = Field(default=None, examples=["Bakkerij De Vries"])
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    postal_code: str | None = None
    city: str | None = None
    country: str | None = None
    kvk_number: str | None = None
    vat_number: str | None = None
    notes: str | None = None


class ClientUpdateRequest(ClientCreateRequest):
    pass


class LineItemRequest(RequestModel):
    id: str | int | None = None
    description: str | None = ""
    unit_price: Number = None
    quantity: Number = None
    vat_percentage: Number = None


class DocumentRequest(RequestModel):
    """Fields shared by quotation and invoice bodies."""

    client_id: str | None = None
    client_name: str | None = None
    client_address: str | None = None
    description: str | None = None
    price: Number = None
    vat_percentage: Number = None
    line_items: list[LineItemRequest] | None = None
    date: datetime | None = None
    notes: str | None = None

    @field_validator(
        "date", "expiry_date", "due_date", "paid_date", "status", "payment_term_days",
        mode="before",
        check_fields=False,
    )
    @classmethod
    def _empty_as_absent(cls, v: Any) -> Any:
        # Forms post "" for cleared date and status inputs
        return None if v == "" else v


class QuotationCreateRequest(DocumentRequest):
    status: QuotationStatus | None = None
    expiry_date: datetime | None = None


class QuotationUpdateRequest(QuotationCreateRequest):
    pass


class InvoiceUpdateRequest(DocumentRequest):
    status: InvoiceStatus | None = None
    due_date: datetime | None = None
    paid_date: datetime | None = None
    payment_term_days: int | None = Field(default=None, ge=0)


class InvoiceCreateRequest(InvoiceUpdateRequest):
    quotation_id: str | None = None
    quotation_number: str | None = None
