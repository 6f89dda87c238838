"""Response DTOs for API endpoints.

Every payload is wrapped in a named envelope (``{"quotation": ...}``,
``{"invoices": [...]}``) and serialized with camelCase keys.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.core.entities import Client, Invoice, InvoiceStatus, Profile, Quotation
from src.core.entities.base import utcnow
from src.core.services.document_query import InvoiceStats, QuotationStats
from src.core.services.status_rules import (
    effective_invoice_status,
    invoice_status_label,
    quotation_status_label,
)


class ResponseModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class QuotationView(Quotation):
    """Stored quotation plus its Dutch status label."""

    status_label: str = ""

    @classmethod
    def from_entity(cls, quotation: Quotation) -> "QuotationView":
        return cls.model_validate({
            **quotation.model_dump(),
            "status_label": quotation_status_label(quotation.status),
        })


class InvoiceView(Invoice):
    """
    Stored invoice plus the status to display.

    ``status`` is what is persisted; ``display_status`` is OVERDUE for a
    sent invoice past its due date.
    """

    display_status: InvoiceStatus = InvoiceStatus.DRAFT
    status_label: str = ""

    @classmethod
    def from_entity(cls, invoice: Invoice, now: datetime | None = None) -> "InvoiceView":
        display = effective_invoice_status(invoice, now)
        return cls.model_validate({
            **invoice.model_dump(),
            "display_status": display,
            "status_label": invoice_status_label(display),
        })


class QuotationResponse(ResponseModel):
    quotation: QuotationView


class QuotationListResponse(ResponseModel):
    quotations: list[QuotationView]


class InvoiceResponse(ResponseModel):
    invoice: InvoiceView


class InvoiceListResponse(ResponseModel):
    invoices: list[InvoiceView]


class ClientResponse(ResponseModel):
    client: Client


class ClientListResponse(ResponseModel):
    clients: list[Client]


class ClientHistorySummary(ResponseModel):
    quotation_value: float = 0.0
    invoice_value: float = 0.0
    paid_value: float = 0.0


class ClientHistoryResponse(ResponseModel):
    """A client with the quotations and invoices addressed to it."""

    client: Client
    quotations: list[QuotationView]
    invoices: list[InvoiceView]
    summary: ClientHistorySummary


class ProfileResponse(ResponseModel):
    profile: Profile


class SuccessResponse(ResponseModel):
    success: bool = True


class SignupResponse(ResponseModel):
    user: dict[str, Any]


class QuotationStatsResponse(ResponseModel):
    total: int = 0
    draft: int = 0
    sent: int = 0
    accepted: int = 0
    total_value: float = 0.0

    @classmethod
    def from_stats(cls, stats: QuotationStats) -> "QuotationStatsResponse":
        return cls(**vars(stats))


class InvoiceStatsResponse(ResponseModel):
    total: int = 0
    draft: int = 0
    sent: int = 0
    paid: int = 0
    overdue: int = 0
    total_value: float = 0.0
    paid_value: float = 0.0
    open_value: float = 0.0

    @classmethod
    def from_stats(cls, stats: InvoiceStats) -> "InvoiceStatsResponse":
        return cls(**vars(stats))


class DashboardResponse(ResponseModel):
    quotations: QuotationStatsResponse
    invoices: InvoiceStatsResponse
    recent_quotations: list[QuotationView] = Field(default_factory=list)
    recent_invoices: list[InvoiceView] = Field(default_factory=list)


class HealthResponse(ResponseModel):
    """Liveness check response."""

    status: str = "ok"
    timestamp: datetime = Field(default_factory=utcnow)
    version: str = "1.0.0"
    uptime_seconds: float = 0.0


class DatabaseHealthResponse(ResponseModel):
    status: str
    database: str
    latency_ms: float | None = None


class ErrorResponse(ResponseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error: human-readable description
    - error_code: machine-readable code (e.g. INVOICE_NOT_FOUND)
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error: str = Field(..., description="Human-readable error description")
    error_code: str = Field(..., description="Machine-readable error code")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: Any = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=utcnow)

    def to_body(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
