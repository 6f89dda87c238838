"""Core domain entities."""

from src.core.entities.base import CamelModel, new_id, utcnow
from src.core.entities.document import (
    Invoice,
    InvoiceStatus,
    LineItem,
    Quotation,
    QuotationStatus,
    SalesDocument,
)
from src.core.entities.party import HOME_COUNTRY, Client, Profile

__all__ = [
    # Base
    "CamelModel",
    "new_id",
    "utcnow",
    # Documents
    "LineItem",
    "SalesDocument",
    "Quotation",
    "QuotationStatus",
    "Invoice",
    "InvoiceStatus",
    # Parties
    "Client",
    "Profile",
    "HOME_COUNTRY",
]
