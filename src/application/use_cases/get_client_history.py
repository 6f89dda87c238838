"""
Client History Use Case.

A client together with every quotation and invoice addressed to it.
"""

from datetime import datetime

from src.application.dto.responses import (
    ClientHistoryResponse,
    ClientHistorySummary,
    InvoiceView,
    QuotationView,
)
from src.core.entities import Client, InvoiceStatus, SalesDocument
from src.core.entities.base import utcnow
from src.core.services.client_service import ClientService
from src.core.services.invoice_service import InvoiceService
from src.core.services.quotation_service import QuotationService


def belongs_to(document: SalesDocument, client: Client) -> bool:
    """
    Linked by client id, or for documents without one, by client name.

    Documents written before clients existed only carry the name.
    """
    if document.client_id:
        return document.client_id == client.id
    return document.client_name.strip().casefold() == client.name.strip().casefold()


class GetClientHistoryUseCase:
    def __init__(
        self,
        clients: ClientService,
        quotations: QuotationService,
        invoices: InvoiceService,
    ):
        self._clients = clients
        self._quotations = quotations
        self._invoices = invoices

    async def execute(
        self,
        user_id: str,
        client_id: str,
        now: datetime | None = None,
    ) -> ClientHistoryResponse:
        now = now or utcnow()
        client = await self._clients.get(user_id, client_id)

        quotations = [q for q in await self._quotations.list(user_id) if belongs_to(q, client)]
        invoices = [i for i in await self._invoices.list(user_id, now=now) if belongs_to(i, client)]

        summary = ClientHistorySummary(
            quotation_value=sum(q.subtotal for q in quotations),
            invoice_value=sum(i.subtotal for i in invoices),
            paid_value=sum(i.subtotal for i in invoices if i.status == InvoiceStatus.PAID),
        )
        return ClientHistoryResponse(
            client=client,
            quotations=[QuotationView.from_entity(q) for q in quotations],
            invoices=[InvoiceView.from_entity(i, now) for i in invoices],
            summary=summary,
        )
