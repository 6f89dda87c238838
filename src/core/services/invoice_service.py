"""Invoice CRUD, numbering and listing."""

from datetime import datetime, timedelta
from typing import Any

from src.config import get_logger
from src.core.entities import Invoice, InvoiceStatus, Quotation
from src.core.entities.base import utcnow
from src.core.exceptions import InvoiceNotFoundError
from src.core.services.document_query import (
    DEFAULT_SORT,
    SortOrder,
    filter_invoices,
    sort_documents,
)
from src.core.services.document_service import DOCUMENT_FIELDS, BaseDocumentService
from src.core.services.keys import invoice_key, invoice_prefix
from src.core.services.numbering import invoice_number
from src.core.services.status_rules import ensure_settable_invoice_status, transition_invoice

logger = get_logger(__name__)

INVOICE_UPDATE_FIELDS = DOCUMENT_FIELDS | {"status", "due_date", "paid_date", "payment_term_days"}


class InvoiceService(BaseDocumentService):
    """
    Create, read, update and delete a user's invoices.

    Only draft, sent and paid are ever stored; overdue is computed when
    reading. Moving an invoice to paid stamps the paid date if none is set.
    """

    editable_fields = INVOICE_UPDATE_FIELDS | {"quotation_id", "quotation_number"}

    async def next_number(self, user_id: str, now: datetime | None = None) -> str:
        records = await self._store.get_by_prefix(invoice_prefix(user_id))
        existing = [record.get("invoiceNumber") for record in records]
        return invoice_number(existing, now, self._settings.invoice_prefix)

    async def create(
        self,
        user_id: str,
        data: dict[str, Any],
        now: datetime | None = None,
    ) -> Invoice:
        now = now or utcnow()
        fields = self._apply_defaults(self._allowed(data), now)
        fields = await self._snapshot_client(user_id, fields)

        status = InvoiceStatus(fields.get("status") or InvoiceStatus.DRAFT)
        ensure_settable_invoice_status(status)
        fields["status"] = status

        if fields.get("payment_term_days") is None:
            fields["payment_term_days"] = self._settings.payment_term_days
        if status == InvoiceStatus.PAID and fields.get("paid_date") is None:
            fields["paid_date"] = now

        invoice = Invoice(
            user_id=user_id,
            invoice_number=await self.next_number(user_id, now),
            created_at=now,
            updated_at=now,
            **fields,
        )
        if invoice.due_date is None:
            invoice.due_date = invoice.date + timedelta(days=invoice.payment_term_days)

        await self.save(invoice)
        logger.info(
            "invoice_created",
            user_id=user_id,
            invoice_id=invoice.id,
            number=invoice.invoice_number,
            total=invoice.total,
        )
        return invoice

    async def create_from_quotation(self, quotation: Quotation, now: datetime | None = None) -> Invoice:
        """
        Invoice copying the quotation's client, lines and VAT verbatim.

        Issued as sent, dated now, due after the default payment term.
        """
        now = now or utcnow()
        term = self._settings.payment_term_days
        invoice = Invoice(
            user_id=quotation.user_id,
            invoice_number=await self.next_number(quotation.user_id, now),
            client_id=quotation.client_id,
            client_name=quotation.client_name,
            client_address=quotation.client_address,
            description=quotation.description,
            price=quotation.price,
            vat_percentage=quotation.vat_percentage,
            line_items=[item.model_copy() for item in quotation.line_items],
            status=InvoiceStatus.SENT,
            date=now,
            due_date=now + timedelta(days=term),
            payment_term_days=term,
            quotation_id=quotation.id,
            quotation_number=quotation.quotation_number,
            created_at=now,
            updated_at=now,
        )
        await self.save(invoice)
        return invoice

    async def list(
        self,
        user_id: str,
        status: InvoiceStatus | None = None,
        search: str | None = None,
        order: SortOrder = DEFAULT_SORT,
        now: datetime | None = None,
    ) -> list[Invoice]:
        records = await self._store.get_by_prefix(invoice_prefix(user_id))
        invoices = [Invoice.model_validate(record) for record in records]
        return sort_documents(filter_invoices(invoices, status, search, now), order)

    async def get(self, user_id: str, invoice_id: str) -> Invoice:
        record = await self._store.get(invoice_key(user_id, invoice_id))
        if record is None:
            raise InvoiceNotFoundError(invoice_id)
        return Invoice.model_validate(record)

    async def update(
        self,
        user_id: str,
        invoice_id: str,
        changes: dict[str, Any],
        now: datetime | None = None,
    ) -> Invoice:
        now = now or utcnow()
        current = await self.get(user_id, invoice_id)
        updates = {k: v for k, v in self._allowed(changes).items() if k in INVOICE_UPDATE_FIELDS}
        updates = await self._snapshot_client(user_id, updates)

        if updates.get("status") is not None:
            updates["status"] = transition_invoice(current.status, InvoiceStatus(updates["status"]))
        else:
            updates.pop("status", None)

        invoice = Invoice.model_validate({**current.model_dump(), **updates, "updated_at": now})
        if invoice.status == InvoiceStatus.PAID and invoice.paid_date is None:
            invoice.paid_date = now

        await self.save(invoice)
        logger.info(
            "invoice_updated",
            user_id=user_id,
            invoice_id=invoice_id,
            status=invoice.status.value,
            fields=sorted(updates),
        )
        return invoice

    async def save(self, invoice: Invoice) -> None:
        await self._store.set(invoice_key(invoice.user_id, invoice.id), invoice.to_record())

    async def delete(self, user_id: str, invoice_id: str) -> None:
        deleted = await self._store.delete(invoice_key(user_id, invoice_id))
        if not deleted:
            raise InvoiceNotFoundError(invoice_id)
        logger.info("invoice_deleted", user_id=user_id, invoice_id=invoice_id)
