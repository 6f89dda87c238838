"""Quotation and invoice domain entities."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import Field, field_validator, model_validator

from src.core.entities.base import CamelModel, new_id, utcnow
from src.core.services.totals import (
    DEFAULT_VAT_RATE,
    compute_totals,
    document_line_items,
    parse_vat_rate,
    to_number,
)


class QuotationStatus(str, Enum):
    """Lifecycle status of a quotation."""

    DRAFT = "draft"
    SENT = "sent"
    ACCEPTED = "accepted"


class InvoiceStatus(str, Enum):
    """
    Status of an invoice.

    OVERDUE is never stored; it is derived from SENT and a past due date.
    """

    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"


class LineItem(CamelModel):
    """A single billable line on a quotation or invoice."""

    id: str | None = None
    description: str = ""
    unit_price: float = 0.0
    quantity: float = 1.0
    vat_percentage: float = DEFAULT_VAT_RATE

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, v: Any) -> Any:
        return None if v is None else str(v)

    @field_validator("description", mode="before")
    @classmethod
    def _description_text(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("unit_price", mode="before")
    @classmethod
    def _parse_price(cls, v: Any) -> float:
        return to_number(v, 0.0)

    @field_validator("quantity", mode="before")
    @classmethod
    def _parse_quantity(cls, v: Any) -> float:
        return to_number(v, 1.0)

    @field_validator("vat_percentage", mode="before")
    @classmethod
    def _parse_vat(cls, v: Any) -> float:
        return parse_vat_rate(v)

    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity


class SalesDocument(CamelModel):
    """
    Fields shared by quotations and invoices.

    Client details are a snapshot taken when the document is written, not
    a live reference: deleting or editing the client leaves it intact.
    """

    id: str = Field(default_factory=new_id)
    user_id: str
    client_id: str | None = None
    client_name: str = ""
    client_address: str = ""
    description: str = ""
    price: float = 0.0
    vat_percentage: float = DEFAULT_VAT_RATE
    line_items: list[LineItem] = Field(default_factory=list)
    date: datetime = Field(default_factory=utcnow)
    notes: str = ""
    subtotal: float = 0.0
    vat_total: float = 0.0
    total: float = 0.0
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @field_validator("client_name", "client_address", "description", "notes", mode="before")
    @classmethod
    def _none_as_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("price", mode="before")
    @classmethod
    def _parse_price(cls, v: Any) -> float:
        return to_number(v, 0.0)

    @field_validator("vat_percentage", mode="before")
    @classmethod
    def _parse_vat(cls, v: Any) -> float:
        return parse_vat_rate(v)

    @model_validator(mode="after")
    def sync_totals(self) -> "SalesDocument":
        """Keep legacy price/description and stored totals in sync with the lines."""
        totals = compute_totals(document_line_items(self))
        if self.line_items:
            self.price = totals.subtotal
            self.description = "\n".join(
                item.description for item in self.line_items if item.description
            )
        self.subtotal = totals.subtotal
        self.vat_total = totals.vat_total
        self.total = totals.total
        return self

    def vat_breakdown(self) -> dict[float, float]:
        """VAT per rate, in order of first occurrence."""
        return compute_totals(document_line_items(self)).vat_by_rate


class Quotation(SalesDocument):
    """A price proposal, convertible to an invoice."""

    quotation_number: str
    status: QuotationStatus = QuotationStatus.DRAFT
    expiry_date: datetime | None = None
    invoice_id: str | None = None


class Invoice(SalesDocument):
    """A billing document with a due date and payment status."""

    invoice_number: str
    status: InvoiceStatus = InvoiceStatus.DRAFT
    due_date: datetime | None = None
    paid_date: datetime | None = None
    quotation_id: str | None = None
    quotation_number: str | None = None
    payment_term_days: int = 30

    @field_validator("payment_term_days", mode="before")
    @classmethod
    def _parse_term(cls, v: Any) -> int:
        term = int(to_number(v, 30))
        return term if term > 0 else 30

    @field_validator("status", mode="before")
    @classmethod
    def _stored_overdue_as_sent(cls, v: Any) -> Any:
        # Older records persisted the derived status
        return InvoiceStatus.SENT if v == InvoiceStatus.OVERDUE.value else v

    def effective_status(self, now: datetime | None = None) -> InvoiceStatus:
        """Status as displayed: SENT past its due date shows as OVERDUE."""
        now = now or utcnow()
        if (
            self.status == InvoiceStatus.SENT
            and self.due_date is not None
            and self.due_date < now
        ):
            return InvoiceStatus.OVERDUE
        return self.status

    @property
    def is_overdue(self) -> bool:
        return self.effective_status() == InvoiceStatus.OVERDUE
