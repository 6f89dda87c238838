"""
Filtering, searching, sorting and statistics for document lists.

Invoices are filtered and counted by their display status, so a sent
invoice past its due date counts as overdue. Money figures use the
subtotal (excluding VAT).
"""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TypeVar

from src.core.entities import Invoice, InvoiceStatus, Quotation, QuotationStatus, SalesDocument
from src.core.entities.base import utcnow
from src.core.exceptions import ValidationError

DocT = TypeVar("DocT", bound=SalesDocument)


class SortOrder(str, Enum):
    """Supported list orderings."""

    DATE_DESC = "date-desc"
    DATE_ASC = "date-asc"
    DUE_DESC = "due-desc"
    DUE_ASC = "due-asc"
    PRICE_DESC = "price-desc"
    PRICE_ASC = "price-asc"
    CLIENT_ASC = "client-asc"
    CLIENT_DESC = "client-desc"


DEFAULT_SORT = SortOrder.DATE_DESC


def parse_sort(value: str | None) -> SortOrder:
    if not value:
        return DEFAULT_SORT
    try:
        return SortOrder(value)
    except ValueError:
        allowed = ", ".join(order.value for order in SortOrder)
        raise ValidationError("sort", f"Unknown sort order, expected one of: {allowed}", value)


def document_number(document: SalesDocument) -> str:
    if isinstance(document, Invoice):
        return document.invoice_number
    if isinstance(document, Quotation):
        return document.quotation_number
    return ""


def _due(document: SalesDocument) -> datetime:
    if isinstance(document, Invoice) and document.due_date:
        return document.due_date
    if isinstance(document, Quotation) and document.expiry_date:
        return document.expiry_date
    return document.date


_SORT_KEYS: dict[SortOrder, tuple[Callable[[SalesDocument], object], bool]] = {
    SortOrder.DATE_DESC: (lambda d: d.date, True),
    SortOrder.DATE_ASC: (lambda d: d.date, False),
    SortOrder.DUE_DESC: (_due, True),
    SortOrder.DUE_ASC: (_due, False),
    SortOrder.PRICE_DESC: (lambda d: d.subtotal, True),
    SortOrder.PRICE_ASC: (lambda d: d.subtotal, False),
    SortOrder.CLIENT_ASC: (lambda d: d.client_name.casefold(), False),
    SortOrder.CLIENT_DESC: (lambda d: d.client_name.casefold(), True),
}


def sort_documents(documents: Iterable[DocT], order: SortOrder = DEFAULT_SORT) -> list[DocT]:
    key, reverse = _SORT_KEYS[order]
    return sorted(documents, key=key, reverse=reverse)


def matches_search(document: SalesDocument, term: str) -> bool:
    """Case-insensitive match on client name, document number or description."""
    needle = term.strip().casefold()
    if not needle:
        return True
    haystacks = (document.client_name, document_number(document), document.description)
    return any(needle in (text or "").casefold() for text in haystacks)


def filter_quotations(
    quotations: Iterable[Quotation],
    status: QuotationStatus | None = None,
    search: str | None = None,
) -> list[Quotation]:
    result = []
    for quotation in quotations:
        if status is not None and quotation.status != status:
            continue
        if search and not matches_search(quotation, search):
            continue
        result.append(quotation)
    return result


def filter_invoices(
    invoices: Iterable[Invoice],
    status: InvoiceStatus | None = None,
    search: str | None = None,
    now: datetime | None = None,
) -> list[Invoice]:
    now = now or utcnow()
    result = []
    for invoice in invoices:
        if status is not None and invoice.effective_status(now) != status:
            continue
        if search and not matches_search(invoice, search):
            continue
        result.append(invoice)
    return result


@dataclass
class QuotationStats:
    total: int = 0
    draft: int = 0
    sent: int = 0
    accepted: int = 0
    total_value: float = 0.0


@dataclass
class InvoiceStats:
    total: int = 0
    draft: int = 0
    sent: int = 0
    paid: int = 0
    overdue: int = 0
    total_value: float = 0.0
    paid_value: float = 0.0
    open_value: float = 0.0


def quotation_stats(quotations: Sequence[Quotation]) -> QuotationStats:
    stats = QuotationStats(total=len(quotations))
    for quotation in quotations:
        setattr(stats, quotation.status.value, getattr(stats, quotation.status.value) + 1)
        stats.total_value += quotation.subtotal
    return stats


def invoice_stats(invoices: Sequence[Invoice], now: datetime | None = None) -> InvoiceStats:
    now = now or utcnow()
    stats = InvoiceStats(total=len(invoices))
    for invoice in invoices:
        status = invoice.effective_status(now)
        setattr(stats, status.value, getattr(stats, status.value) + 1)
        stats.total_value += invoice.subtotal
        if status == InvoiceStatus.PAID:
            stats.paid_value += invoice.subtotal
        elif status in (InvoiceStatus.SENT, InvoiceStatus.OVERDUE):
            stats.open_value += invoice.subtotal
    return stats
