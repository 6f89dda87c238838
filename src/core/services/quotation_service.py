"""Quotation CRUD and listing."""

from datetime import datetime
from typing import Any

from src.config import get_logger
from src.core.entities import Quotation, QuotationStatus
from src.core.entities.base import utcnow
from src.core.exceptions import QuotationNotFoundError
from src.core.services.document_query import (
    DEFAULT_SORT,
    SortOrder,
    filter_quotations,
    sort_documents,
)
from src.core.services.document_service import DOCUMENT_FIELDS, BaseDocumentService
from src.core.services.keys import quotation_key, quotation_prefix
from src.core.services.numbering import quotation_number
from src.core.services.status_rules import transition_quotation

logger = get_logger(__name__)


class QuotationService(BaseDocumentService):
    """Create, read, update and delete a user's quotations."""

    editable_fields = DOCUMENT_FIELDS | {"status", "expiry_date"}

    async def create(
        self,
        user_id: str,
        data: dict[str, Any],
        now: datetime | None = None,
    ) -> Quotation:
        now = now or utcnow()
        fields = self._apply_defaults(self._allowed(data), now)
        fields = await self._snapshot_client(user_id, fields)
        if fields.get("status") is None:
            fields["status"] = QuotationStatus.DRAFT

        quotation = Quotation(
            user_id=user_id,
            quotation_number=quotation_number(now, self._settings.quotation_prefix),
            created_at=now,
            updated_at=now,
            **fields,
        )
        await self.save(quotation)
        logger.info(
            "quotation_created",
            user_id=user_id,
            quotation_id=quotation.id,
            number=quotation.quotation_number,
            total=quotation.total,
        )
        return quotation

    async def list(
        self,
        user_id: str,
        status: QuotationStatus | None = None,
        search: str | None = None,
        order: SortOrder = DEFAULT_SORT,
    ) -> list[Quotation]:
        records = await self._store.get_by_prefix(quotation_prefix(user_id))
        quotations = [Quotation.model_validate(record) for record in records]
        return sort_documents(filter_quotations(quotations, status, search), order)

    async def get(self, user_id: str, quotation_id: str) -> Quotation:
        record = await self._store.get(quotation_key(user_id, quotation_id))
        if record is None:
            raise QuotationNotFoundError(quotation_id)
        return Quotation.model_validate(record)

    async def update(
        self,
        user_id: str,
        quotation_id: str,
        changes: dict[str, Any],
        now: datetime | None = None,
    ) -> Quotation:
        """Apply allow-listed changes; the status may be set to any quotation status."""
        current = await self.get(user_id, quotation_id)
        updates = await self._snapshot_client(user_id, self._allowed(changes))

        if updates.get("status") is not None:
            updates["status"] = transition_quotation(
                current.status, QuotationStatus(updates["status"])
            )
        else:
            updates.pop("status", None)

        quotation = Quotation.model_validate({
            **current.model_dump(),
            **updates,
            "updated_at": now or utcnow(),
        })
        await self.save(quotation)
        logger.info(
            "quotation_updated",
            user_id=user_id,
            quotation_id=quotation_id,
            fields=sorted(updates),
        )
        return quotation

    async def save(self, quotation: Quotation) -> None:
        await self._store.set(
            quotation_key(quotation.user_id, quotation.id), quotation.to_record()
        )

    async def delete(self, user_id: str, quotation_id: str) -> None:
        deleted = await self._store.delete(quotation_key(user_id, quotation_id))
        if not deleted:
            raise QuotationNotFoundError(quotation_id)
        logger.info("quotation_deleted", user_id=user_id, quotation_id=quotation_id)
