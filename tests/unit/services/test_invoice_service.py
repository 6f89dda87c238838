"""Tests for InvoiceService."""

from datetime import UTC, datetime, timedelta

import pytest

from src.config import DocumentSettings
from src.core.entities import InvoiceStatus, LineItem, Quotation
from src.core.exceptions import InvoiceNotFoundError, ValidationError
from src.core.services.invoice_service import InvoiceService


class TestNumbering:
    async def test_sequential_per_user(self, invoice_service: InvoiceService, now):
        first = await invoice_service.create("u1", {}, now=now)
        second = await invoice_service.create("u1", {}, now=now)
        other = await invoice_service.create("u2", {}, now=now)

        assert first.invoice_number == "FAC-2024-0001"
        assert second.invoice_number == "FAC-2024-0002"
        assert other.invoice_number == "FAC-2024-0001"

    async def test_new_year_restarts(self, invoice_service: InvoiceService, now):
        await invoice_service.create("u1", {}, now=now)

        next_year = datetime(2025, 1, 3, tzinfo=UTC)
        assert (await invoice_service.create("u1", {}, now=next_year)).invoice_number == "FAC-2025-0001"

    async def test_custom_prefix(self, kv_store, now):
        service = InvoiceService(kv_store, DocumentSettings(invoice_prefix="F"))
        assert (await service.create("u1", {}, now=now)).invoice_number == "F-2024-0001"


class TestCreate:
    async def test_defaults(self, invoice_service: InvoiceService, now):
        invoice = await invoice_service.create("u1", {"client_name": "Jansen"}, now=now)

        assert invoice.status == InvoiceStatus.DRAFT
        assert invoice.payment_term_days == 30
        assert invoice.date == now
        assert invoice.due_date == now + timedelta(days=30)
        assert invoice.paid_date is None

    async def test_due_date_follows_payment_term(self, invoice_service: InvoiceService, now):
        invoice = await invoice_service.create("u1", {"payment_term_days": 14}, now=now)
        assert invoice.due_date == now + timedelta(days=14)

    async def test_explicit_due_date(self, invoice_service: InvoiceService, now):
        due = now + timedelta(days=3)
        invoice = await invoice_service.create("u1", {"due_date": due}, now=now)
        assert invoice.due_date == due

    async def test_created_paid_gets_paid_date(self, invoice_service: InvoiceService, now):
        invoice = await invoice_service.create("u1", {"status": "paid"}, now=now)
        assert invoice.paid_date == now

    async def test_overdue_cannot_be_created(self, invoice_service: InvoiceService, kv_store):
        with pytest.raises(ValidationError):
            await invoice_service.create("u1", {"status": InvoiceStatus.OVERDUE})
        assert kv_store.data == {}


class TestCreateFromQuotation:
    async def test_copies_quotation(self, invoice_service: InvoiceService, now):
        quotation = Quotation(
            user_id="u1",
            quotation_number="OFF-1700000000000",
            client_id="c1",
            client_name="Jansen",
            client_address="Markt 3\n2611 GP Delft",
            vat_percentage=9,
            line_items=[LineItem(description="Tegelwerk", unit_price=80, quantity=5, vat_percentage=9)],
        )

        invoice = await invoice_service.create_from_quotation(quotation, now)

        assert invoice.status == InvoiceStatus.SENT
        assert invoice.date == now
        assert invoice.due_date == now + timedelta(days=30)
        assert invoice.quotation_id == quotation.id
        assert invoice.quotation_number == "OFF-1700000000000"
        assert invoice.client_id == "c1"
        assert invoice.client_address == "Markt 3\n2611 GP Delft"
        assert invoice.line_items == quotation.line_items
        assert invoice.total == quotation.total == 436


class TestList:
    async def test_status_filter_uses_display_status(self, invoice_service: InvoiceService, now):
        overdue = await invoice_service.create(
            "u1", {"status": "sent", "due_date": now - timedelta(days=2)}, now=now - timedelta(days=40)
        )
        await invoice_service.create("u1", {"status": "sent"}, now=now)

        listed = await invoice_service.list("u1", status=InvoiceStatus.OVERDUE, now=now)

        assert [i.id for i in listed] == [overdue.id]
        assert listed[0].status == InvoiceStatus.SENT


class TestUpdate:
    async def test_paid_sets_paid_date(self, invoice_service: InvoiceService, now):
        invoice = await invoice_service.create("u1", {"status": "sent"}, now=now)

        paid = await invoice_service.update("u1", invoice.id, {"status": "paid"}, now=now + timedelta(days=5))

        assert paid.status == InvoiceStatus.PAID
        assert paid.paid_date == now + timedelta(days=5)

    async def test_explicit_paid_date_is_kept(self, invoice_service: InvoiceService, now):
        invoice = await invoice_service.create("u1", {}, now=now)
        paid_on = now + timedelta(days=2)

        paid = await invoice_service.update("u1", invoice.id, {"status": "paid", "paid_date": paid_on})

        assert paid.paid_date == paid_on

    async def test_paid_can_be_corrected(self, invoice_service: InvoiceService):
        invoice = await invoice_service.create("u1", {"status": "paid"})

        corrected = await invoice_service.update("u1", invoice.id, {"status": "sent"})

        assert corrected.status == InvoiceStatus.SENT
        assert corrected.paid_date == invoice.paid_date

    async def test_overdue_is_rejected(self, invoice_service: InvoiceService):
        invoice = await invoice_service.create("u1", {"status": "sent"})

        with pytest.raises(ValidationError):
            await invoice_service.update("u1", invoice.id, {"status": "overdue"})

    async def test_link_fields_are_not_updatable(self, invoice_service: InvoiceService):
        invoice = await invoice_service.create("u1", {"quotation_id": "q1", "quotation_number": "OFF-1"})

        updated = await invoice_service.update(
            "u1", invoice.id, {"quotation_id": "q2", "invoice_number": "FAC-1999-0001", "notes": "x"}
        )

        assert updated.quotation_id == "q1"
        assert updated.invoice_number == invoice.invoice_number
        assert updated.notes == "x"

    async def test_legacy_overdue_record_can_be_paid(self, invoice_service: InvoiceService, kv_store, now):
        invoice = await invoice_service.create("u1", {"status": "sent"}, now=now)
        kv_store.data[f"invoice:u1:{invoice.id}"]["status"] = "overdue"

        paid = await invoice_service.update("u1", invoice.id, {"status": "paid"}, now=now)

        assert paid.status == InvoiceStatus.PAID

    async def test_legacy_overdue_record_reads_as_sent(self, invoice_service: InvoiceService, kv_store, now):
        invoice = await invoice_service.create("u1", {"status": "sent"}, now=now)
        kv_store.data[f"invoice:u1:{invoice.id}"]["status"] = "overdue"

        loaded = await invoice_service.get("u1", invoice.id)

        assert loaded.status == InvoiceStatus.SENT

    async def test_missing(self, invoice_service: InvoiceService):
        with pytest.raises(InvoiceNotFoundError):
            await invoice_service.update("u1", "nope", {})
