"""Shared behaviour of the quotation and invoice services."""

from datetime import datetime
from typing import Any

from src.config import DocumentSettings
from src.core.entities import Client
from src.core.exceptions import ClientNotFoundError
from src.core.interfaces import IKeyValueStore
from src.core.services.keys import client_key

DOCUMENT_FIELDS = frozenset({
    "client_id",
    "client_name",
    "client_address",
    "description",
    "price",
    "vat_percentage",
    "line_items",
    "date",
    "notes",
})

# Explicit nulls for these mean "leave unchanged"
NON_NULLABLE_FIELDS = frozenset({"date", "line_items", "payment_term_days"})

# Server-controlled; never taken from request data
PROTECTED_FIELDS = frozenset({
    "id",
    "user_id",
    "created_at",
    "updated_at",
    "subtotal",
    "vat_total",
    "total",
})


class BaseDocumentService:
    """Store access and client snapshotting common to both document types."""

    editable_fields: frozenset[str] = DOCUMENT_FIELDS

    def __init__(self, store: IKeyValueStore, settings: DocumentSettings | None = None):
        self._store = store
        self._settings = settings or DocumentSettings()

    def _allowed(self, data: dict[str, Any]) -> dict[str, Any]:
        return {
            k: v
            for k, v in data.items()
            if k in self.editable_fields
            and k not in PROTECTED_FIELDS
            and not (v is None and k in NON_NULLABLE_FIELDS)
        }

    def _apply_defaults(self, fields: dict[str, Any], now: datetime) -> dict[str, Any]:
        if fields.get("vat_percentage") is None:
            fields["vat_percentage"] = self._settings.default_vat_rate
        if fields.get("date") is None:
            fields["date"] = now
        return fields

    async def _snapshot_client(self, user_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        """
        Copy the referenced client's name and address onto the document.

        Only fills what the caller left empty; explicit values win.
        """
        client_id = fields.get("client_id")
        if not client_id:
            return fields
        if fields.get("client_name") and fields.get("client_address") is not None:
            return fields

        record = await self._store.get(client_key(user_id, client_id))
        if record is None:
            raise ClientNotFoundError(client_id)
        client = Client.model_validate(record)

        if not fields.get("client_name"):
            fields["client_name"] = client.name
        if fields.get("client_address") is None:
            fields["client_address"] = client.formatted_address()
        return fields
