"""Tests for the fpdf2 quotation/invoice renderer."""

import base64
import zlib
from datetime import timedelta

import pytest

from src.config import PdfSettings
from src.core.entities import Invoice, InvoiceStatus, LineItem, Profile, Quotation
from src.infrastructure.pdf import Fpdf2DocumentRenderer

# 1x1 transparent PNG
_PNG_1PX = (
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)


def _extract_pdf_text(pdf_bytes: bytes) -> str:
    """Decompress FlateDecode streams in *pdf_bytes* and return all text.

    fpdf2 compresses page content with zlib, so each ``stream ... endstream``
    block is inflated where possible and concatenated with the raw bytes.
    """
    texts = [pdf_bytes.decode("latin-1")]

    start_marker = b"stream\n"
    end_marker = b"\nendstream"
    idx = 0
    while True:
        s = pdf_bytes.find(start_marker, idx)
        if s == -1:
            break
        s += len(start_marker)
        e = pdf_bytes.find(end_marker, s)
        if e == -1:
            break
        try:
            texts.append(zlib.decompress(pdf_bytes[s:e]).decode("latin-1", errors="replace"))
        except zlib.error:
            pass
        idx = e + len(end_marker)

    return "\n".join(texts)


@pytest.fixture
def renderer() -> Fpdf2DocumentRenderer:
    return Fpdf2DocumentRenderer(PdfSettings(footer_text="Algemene voorwaarden van toepassing"))


@pytest.fixture
def profile() -> Profile:
    return Profile(
        user_id="u1",
        company_name="Schildersbedrijf Alice",
        address="Kerkstraat 12\n3511 AB Utrecht",
        kvk_number="12345678",
        vat_number="NL001234567B01",
        iban="NL91ABNA0417164300",
    )


@pytest.fixture
def quotation(sample_line_items, now) -> Quotation:
    return Quotation.model_validate({
        "userId": "u1",
        "quotationNumber": "OFF-1710498600000",
        "clientName": "Bakkerij De Vries",
        "clientAddress": "Dorpsstraat 1\n1234 AB Ede",
        "lineItems": sample_line_items,
        "date": now,
        "expiryDate": now + timedelta(days=30),
        "notes": "Prijzen inclusief materiaal",
    })


@pytest.fixture
def invoice(sample_line_items, now) -> Invoice:
    return Invoice.model_validate({
        "userId": "u1",
        "invoiceNumber": "FAC-2024-0007",
        "clientName": "Bakkerij De Vries",
        "lineItems": sample_line_items,
        "status": "sent",
        "date": now,
        "dueDate": now + timedelta(days=30),
        "quotationNumber": "OFF-1710498600000",
    })


class TestRenderQuotation:
    def test_produces_pdf(self, renderer, quotation, profile):
        pdf_bytes = renderer.render_quotation(quotation, profile)

        assert pdf_bytes.startswith(b"%PDF")
        text = _extract_pdf_text(pdf_bytes)
        assert "Offerte" in text
        assert "OFF-1710498600000" in text
        assert "Schildersbedrijf Alice" in text
        assert "KvK: 12345678" in text
        assert "Bakkerij De Vries" in text
        assert "Subtotaal" in text
        assert "EUR 250,00" in text
        assert "21% btw" in text
        assert "9% btw" in text
        assert "EUR 296,50" in text
        assert "15-03-2024" in text
        assert "Bedankt voor uw vertrouwen!" in text

    def test_without_profile_uses_fallback_name(self, renderer, quotation):
        text = _extract_pdf_text(renderer.render_quotation(quotation, None))
        assert "Bedrijfsnaam" in text

    def test_with_logo(self, renderer, quotation, profile):
        profile.logo = f"data:image/png;base64,{_PNG_1PX}"

        pdf_bytes = renderer.render_quotation(quotation, profile)

        assert pdf_bytes.startswith(b"%PDF")
        assert b"/Subtype /Image" in pdf_bytes

    def test_broken_logo_falls_back_to_name(self, renderer, quotation, profile):
        profile.logo = "data:image/png;base64," + base64.b64encode(b"not an image").decode()

        text = _extract_pdf_text(renderer.render_quotation(quotation, profile))

        assert "Schildersbedrijf Alice" in text

    def test_legacy_quotation_without_lines(self, renderer, profile, now):
        legacy = Quotation.model_validate({
            "userId": "u1",
            "quotationNumber": "OFF-1",
            "description": "Dakgoot vervangen",
            "price": 400,
            "vatPercentage": 21,
            "date": now,
        })

        text = _extract_pdf_text(renderer.render_quotation(legacy, profile))

        assert "Dakgoot vervangen" in text
        assert "EUR 484,00" in text

    def test_non_latin_text_does_not_fail(self, renderer, quotation, profile):
        quotation.line_items.append(LineItem(description="Schilderwerk – fase 2 ✅", unit_price=1))
        assert renderer.render_quotation(quotation, profile).startswith(b"%PDF")


class TestRenderInvoice:
    def test_open_invoice(self, renderer, invoice, profile, now):
        text = _extract_pdf_text(renderer.render_invoice(invoice, profile, now))

        assert "Factuur" in text
        assert "FAC-2024-0007" in text
        assert "Vervaldatum:" in text
        assert "Offerte ref:" in text
        assert "Betalingsgegevens:" in text
        assert "IBAN: NL91ABNA0417164300" in text
        assert "o.v.v. FAC-2024-0007" in text
        assert "BETAALD" not in text

    def test_paid_invoice_is_stamped(self, renderer, invoice, profile, now):
        invoice.status = InvoiceStatus.PAID
        text = _extract_pdf_text(renderer.render_invoice(invoice, profile, now))
        assert "BETAALD" in text

    def test_currency_from_settings(self, invoice, profile, now):
        renderer = Fpdf2DocumentRenderer(PdfSettings(currency_symbol="EURO"))
        text = _extract_pdf_text(renderer.render_invoice(invoice, profile, now))
        assert "EURO 296,50" in text
