"""
Dashboard Use Case.

Counts and totals over all of a user's quotations and invoices.
"""

from datetime import datetime

from src.application.dto.responses import (
    DashboardResponse,
    InvoiceStatsResponse,
    InvoiceView,
    QuotationStatsResponse,
    QuotationView,
)
from src.core.entities.base import utcnow
from src.core.services.document_query import invoice_stats, quotation_stats
from src.core.services.invoice_service import InvoiceService
from src.core.services.quotation_service import QuotationService

RECENT_LIMIT = 5


class GetDashboardUseCase:
    def __init__(self, quotations: QuotationService, invoices: InvoiceService):
        self._quotations = quotations
        self._invoices = invoices

    async def execute(self, user_id: str, now: datetime | None = None) -> DashboardResponse:
        now = now or utcnow()
        quotations = await self._quotations.list(user_id)
        invoices = await self._invoices.list(user_id, now=now)

        return DashboardResponse(
            quotations=QuotationStatsResponse.from_stats(quotation_stats(quotations)),
            invoices=InvoiceStatsResponse.from_stats(invoice_stats(invoices, now)),
            recent_quotations=[QuotationView.from_entity(q) for q in quotations[:RECENT_LIMIT]],
            recent_invoices=[InvoiceView.from_entity(i, now) for i in invoices[:RECENT_LIMIT]],
        )
