"""Tests for ConvertQuotationToInvoiceUseCase."""

from datetime import timedelta

import pytest

from src.application.use_cases.convert_quotation_to_invoice import ConvertQuotationToInvoiceUseCase
from src.core.entities import InvoiceStatus, QuotationStatus
from src.core.exceptions import QuotationNotFoundError


@pytest.fixture
def use_case(quotation_service, invoice_service) -> ConvertQuotationToInvoiceUseCase:
    return ConvertQuotationToInvoiceUseCase(quotation_service, invoice_service)


class TestConvertQuotationToInvoice:
    async def test_creates_sent_invoice_and_accepts_quotation(
        self, use_case, quotation_service, sample_line_items, now
    ):
        quotation = await quotation_service.create(
            "u1",
            {"client_name": "Jansen", "client_address": "Markt 3", "line_items": sample_line_items},
            now=now - timedelta(days=7),
        )

        result = await use_case.execute("u1", quotation.id, now=now)

        invoice = result.invoice
        assert invoice.status == InvoiceStatus.SENT
        assert invoice.invoice_number == "FAC-2024-0001"
        assert invoice.date == now
        assert invoice.due_date == now + timedelta(days=30)
        assert invoice.payment_term_days == 30
        assert invoice.quotation_id == quotation.id
        assert invoice.quotation_number == quotation.quotation_number
        assert invoice.client_name == "Jansen"
        assert invoice.client_address == "Markt 3"
        assert invoice.total == 296.5

        stored = await quotation_service.get("u1", quotation.id)
        assert result.quotation_updated
        assert stored.status == QuotationStatus.ACCEPTED
        assert stored.invoice_id == invoice.id

    async def test_already_accepted_quotation_is_left_untouched(
        self, use_case, quotation_service, invoice_service, now
    ):
        quotation = await quotation_service.create("u1", {"price": 100}, now=now)
        first = await use_case.execute("u1", quotation.id, now=now)

        second = await use_case.execute("u1", quotation.id, now=now)

        assert not second.quotation_updated
        assert second.invoice.invoice_number == "FAC-2024-0002"
        stored = await quotation_service.get("u1", quotation.id)
        assert stored.invoice_id == first.invoice.id
        assert len(await invoice_service.list("u1", now=now)) == 2

    async def test_other_users_quotation(self, use_case, quotation_service, kv_store):
        quotation = await quotation_service.create("u1", {})
        writes = kv_store.writes

        with pytest.raises(QuotationNotFoundError):
            await use_case.execute("u2", quotation.id)
        assert kv_store.writes == writes

    async def test_response_envelope(self, use_case, quotation_service, now):
        quotation = await quotation_service.create("u1", {"price": 10}, now=now)

        response = (await use_case.execute("u1", quotation.id, now=now)).to_response(now)
        body = response.model_dump(mode="json", by_alias=True)

        assert body["invoice"]["status"] == "sent"
        assert body["invoice"]["displayStatus"] == "sent"
        assert body["invoice"]["quotationId"] == quotation.id
