"""
Convert Quotation to Invoice Use Case.

Issues an invoice from a quotation and marks the quotation accepted.
"""

from dataclasses import dataclass
from datetime import datetime

from src.application.dto.responses import InvoiceResponse, InvoiceView
from src.config import get_logger
from src.core.entities import Invoice, Quotation, QuotationStatus
from src.core.entities.base import utcnow
from src.core.services.invoice_service import InvoiceService
from src.core.services.quotation_service import QuotationService

logger = get_logger(__name__)


@dataclass
class ConversionResult:
    invoice: Invoice
    quotation: Quotation
    quotation_updated: bool

    def to_response(self, now: datetime | None = None) -> InvoiceResponse:
        return InvoiceResponse(invoice=InvoiceView.from_entity(self.invoice, now))


class ConvertQuotationToInvoiceUseCase:
    """
    Flow:
    1. Load the quotation (404 if it is not the caller's)
    2. Create a sent invoice copying client, lines and VAT, due in 30 days
    3. Unless already accepted, set the quotation to accepted and link the invoice

    An already accepted quotation is left untouched, so converting it again
    yields a second invoice without moving the back-reference.
    """

    def __init__(self, quotations: QuotationService, invoices: InvoiceService):
        self._quotations = quotations
        self._invoices = invoices

    async def execute(
        self,
        user_id: str,
        quotation_id: str,
        now: datetime | None = None,
    ) -> ConversionResult:
        now = now or utcnow()
        quotation = await self._quotations.get(user_id, quotation_id)

        invoice = await self._invoices.create_from_quotation(quotation, now)

        updated = quotation.status != QuotationStatus.ACCEPTED
        if updated:
            quotation = quotation.model_copy(update={
                "status": QuotationStatus.ACCEPTED,
                "invoice_id": invoice.id,
                "updated_at": now,
            })
            await self._quotations.save(quotation)

        logger.info(
            "quotation_converted",
            user_id=user_id,
            quotation_id=quotation_id,
            invoice_id=invoice.id,
            invoice_number=invoice.invoice_number,
            quotation_updated=updated,
        )
        return ConversionResult(invoice=invoice, quotation=quotation, quotation_updated=updated)
