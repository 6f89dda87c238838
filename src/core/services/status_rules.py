"""
Status rules for quotations and invoices.

Status changes are caller-driven: any stored status may be set from any
other. OVERDUE is derived at read time and can never be set.
"""

from datetime import datetime

from src.config import get_logger
from src.core.entities.document import Invoice, InvoiceStatus, QuotationStatus
from src.core.exceptions import ValidationError

logger = get_logger(__name__)

SETTABLE_INVOICE_STATUSES = frozenset({InvoiceStatus.DRAFT, InvoiceStatus.SENT, InvoiceStatus.PAID})

QUOTATION_STATUS_LABELS: dict[QuotationStatus, str] = {
    QuotationStatus.DRAFT: "Concept",
    QuotationStatus.SENT: "Verstuurd",
    QuotationStatus.ACCEPTED: "Geaccepteerd",
}

INVOICE_STATUS_LABELS: dict[InvoiceStatus, str] = {
    InvoiceStatus.DRAFT: "Concept",
    InvoiceStatus.SENT: "Verstuurd",
    InvoiceStatus.PAID: "Betaald",
    InvoiceStatus.OVERDUE: "Vervallen",
}


def ensure_settable_invoice_status(status: InvoiceStatus) -> None:
    """Reject statuses that only exist as a derived display value."""
    if status not in SETTABLE_INVOICE_STATUSES:
        raise ValidationError(
            "status",
            "Status 'overdue' is derived from the due date and cannot be set",
            status.value,
        )


def transition_quotation(current: QuotationStatus, target: QuotationStatus | str) -> QuotationStatus:
    target = QuotationStatus(target)
    if target != current:
        logger.debug("quotation_status_changed", old=current.value, new=target.value)
    return target


def transition_invoice(current: InvoiceStatus, target: InvoiceStatus | str) -> InvoiceStatus:
    """Status to store when *target* is requested on an invoice in *current*."""
    target = InvoiceStatus(target)
    ensure_settable_invoice_status(target)
    if target != current:
        logger.debug("invoice_status_changed", old=current.value, new=target.value)
    return target


def effective_invoice_status(invoice: Invoice, now: datetime | None = None) -> InvoiceStatus:
    """Displayed status; the stored status is left as is."""
    return invoice.effective_status(now)


def quotation_status_label(status: QuotationStatus | str) -> str:
    try:
        return QUOTATION_STATUS_LABELS[QuotationStatus(status)]
    except ValueError:
        return str(status)


def invoice_status_label(status: InvoiceStatus | str) -> str:
    try:
        return INVOICE_STATUS_LABELS[InvoiceStatus(status)]
    except ValueError:
        return str(status)
