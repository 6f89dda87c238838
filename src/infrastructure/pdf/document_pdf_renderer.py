"""
Quotation and invoice PDF renderer using fpdf2.

Layout follows the Dutch invoice convention: company block top-right,
client block top-left, document metadata, a line item table
(Omschrijving / Bedrag / Aantal / Totaal), subtotal with VAT per rate,
payment details and a closing payment request.
"""

import base64
import binascii
import io
from abc import ABC, abstractmethod
from datetime import datetime

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from src.config import get_logger
from src.config.settings import PdfSettings, get_settings
from src.core.entities import Invoice, InvoiceStatus, Profile, Quotation, SalesDocument
from src.core.exceptions import PdfRenderError
from src.core.services.totals import (
    document_line_items,
    format_amount,
    format_rate,
    line_total,
    to_number,
)

logger = get_logger(__name__)

PRIMARY = (0, 102, 153)
GRAY = (100, 100, 100)
DARK = (40, 40, 40)
ACCENT = (34, 139, 34)

MARGIN = 20
RIGHT_COL = 120
COL_WIDTHS = (90, 30, 20, 30)


def _latin1(text: str | None) -> str:
    """Core PDF fonts are latin-1 only; replace anything outside it."""
    return (text or "").encode("latin-1", "replace").decode("latin-1")


def _format_date(value: datetime | None) -> str:
    return value.strftime("%d-%m-%Y") if value else ""


def _decode_logo(data_url: str | None) -> io.BytesIO | None:
    """Image bytes from a ``data:image/...;base64,`` URL."""
    if not data_url or not data_url.startswith("data:") or "," not in data_url:
        return None
    header, encoded = data_url.split(",", 1)
    if ";base64" not in header:
        return None
    try:
        return io.BytesIO(base64.b64decode(encoded, validate=False))
    except (binascii.Error, ValueError):
        return None


class IDocumentPdfRenderer(ABC):
    """Interface for quotation/invoice PDF rendering."""

    @abstractmethod
    def render_quotation(self, quotation: Quotation, profile: Profile | None) -> bytes:
        """Render a quotation into PDF bytes."""
        ...

    @abstractmethod
    def render_invoice(
        self,
        invoice: Invoice,
        profile: Profile | None,
        now: datetime | None = None,
    ) -> bytes:
        """Render an invoice into PDF bytes."""
        ...


class _DocumentPdf(FPDF):
    """FPDF subclass with an optional footer line and page numbers."""

    def __init__(self, pdf_settings: PdfSettings) -> None:
        super().__init__()
        self._pdf_settings = pdf_settings

    def footer(self) -> None:
        self.set_y(-12)
        self.set_font("Helvetica", "", 7)
        self.set_text_color(*GRAY)
        if self._pdf_settings.footer_text:
            self.cell(0, 4, _latin1(self._pdf_settings.footer_text), align="L")
            self.set_x(MARGIN)
        self.cell(0, 4, f"Pagina {self.page_no()} van {{nb}}", align="R")
        self.set_text_color(0, 0, 0)


class Fpdf2DocumentRenderer(IDocumentPdfRenderer):
    """Renders quotations and invoices with fpdf2."""

    def __init__(self, pdf_settings: PdfSettings | None = None) -> None:
        if pdf_settings is None:
            pdf_settings = get_settings().pdf
        self._settings = pdf_settings

    @property
    def currency(self) -> str:
        return self._settings.currency_symbol

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def render_quotation(self, quotation: Quotation, profile: Profile | None) -> bytes:
        meta = [
            ("Offertenummer:", quotation.quotation_number),
            ("Offertedatum:", _format_date(quotation.date)),
        ]
        if quotation.expiry_date:
            meta.append(("Geldig tot:", _format_date(quotation.expiry_date)))

        return self._render(
            document=quotation,
            number=quotation.quotation_number,
            profile=profile,
            title="Offerte",
            meta=meta,
            stamp=None,
            closing="Bedankt voor uw vertrouwen!",
            payment_reference=None,
        )

    def render_invoice(
        self,
        invoice: Invoice,
        profile: Profile | None,
        now: datetime | None = None,
    ) -> bytes:
        meta = [
            ("Factuurnummer:", invoice.invoice_number),
            ("Factuurdatum:", _format_date(invoice.date)),
        ]
        if invoice.due_date:
            meta.append(("Vervaldatum:", _format_date(invoice.due_date)))
        if invoice.quotation_number:
            meta.append(("Offerte ref:", invoice.quotation_number))

        closing = (
            f"Wij verzoeken u vriendelijk het totaalbedrag van {self.currency} "
            f"{format_amount(invoice.total)} binnen {invoice.payment_term_days} dagen "
            "over te maken."
        )
        paid = invoice.effective_status(now) == InvoiceStatus.PAID

        return self._render(
            document=invoice,
            number=invoice.invoice_number,
            profile=profile,
            title="Factuur",
            meta=meta,
            stamp="BETAALD" if paid else None,
            closing=closing,
            payment_reference=invoice.invoice_number,
        )

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def _render(
        self,
        document: SalesDocument,
        number: str,
        profile: Profile | None,
        title: str,
        meta: list[tuple[str, str]],
        stamp: str | None,
        closing: str,
        payment_reference: str | None,
    ) -> bytes:
        profile = profile or Profile(user_id=document.user_id)
        try:
            pdf = _DocumentPdf(self._settings)
            pdf.alias_nb_pages()
            pdf.set_margins(MARGIN, MARGIN, MARGIN)
            pdf.set_auto_page_break(auto=True, margin=25)
            pdf.add_page()

            self._render_company(pdf, profile)
            self._render_client(pdf, document)
            self._render_title(pdf, title, stamp)
            self._render_meta(pdf, meta)
            self._render_items(pdf, document)
            self._render_totals(pdf, document)
            if payment_reference:
                self._render_payment_details(pdf, profile, payment_reference)
            self._render_closing(pdf, closing, document.notes)

            data = bytes(pdf.output())
        except (RuntimeError, ValueError) as e:
            logger.error("pdf_render_failed", number=number, error=str(e))
            raise PdfRenderError(number, str(e)) from e

        logger.info("pdf_rendered", number=number, size=len(data))
        return data

    def _render_company(self, pdf: FPDF, profile: Profile) -> None:
        company_name = profile.company_name or self._settings.fallback_company_name

        logo = _decode_logo(profile.logo)
        drawn = False
        if logo is not None:
            try:
                pdf.image(logo, x=MARGIN, y=MARGIN, w=50, h=25)
                drawn = True
            except Exception as e:  # fpdf2/Pillow raise assorted errors on bad images
                logger.warning("pdf_logo_skipped", error=str(e))
        if not drawn:
            pdf.set_xy(MARGIN, MARGIN + 5)
            pdf.set_font("Helvetica", "B", 20)
            pdf.set_text_color(*PRIMARY)
            pdf.cell(90, 12, _latin1(company_name))

        # Company info, right column
        pdf.set_xy(RIGHT_COL, MARGIN)
        pdf.set_font("Helvetica", "B", 10)
        pdf.set_text_color(*DARK)
        pdf.cell(0, 5, _latin1(profile.company_name), new_x=XPos.LMARGIN, new_y=YPos.NEXT)

        pdf.set_font("Helvetica", "", 9)
        pdf.set_text_color(*GRAY)
        lines = [line for line in profile.address.splitlines() if line.strip()]
        if profile.phone:
            lines.append(profile.phone)
        if profile.email:
            lines.append(profile.email)
        if profile.kvk_number:
            lines.append(f"KvK: {profile.kvk_number}")
        if profile.vat_number:
            lines.append(f"BTW: {profile.vat_number}")
        if profile.iban:
            lines.append(f"IBAN: {profile.iban}")
        for line in lines:
            pdf.set_x(RIGHT_COL)
            pdf.cell(0, 4.5, _latin1(line), new_x=XPos.LMARGIN, new_y=YPos.NEXT)

        pdf.set_y(max(pdf.get_y(), MARGIN + 30) + 8)

    def _render_client(self, pdf: FPDF, document: SalesDocument) -> None:
        pdf.set_font("Helvetica", "", 10)
        pdf.set_text_color(*DARK)
        pdf.cell(0, 5, _latin1(document.client_name), new_x=XPos.LMARGIN, new_y=YPos.NEXT)

        pdf.set_text_color(*GRAY)
        for line in document.client_address.splitlines():
            pdf.cell(0, 5, _latin1(line), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.ln(10)

    @staticmethod
    def _render_title(pdf: FPDF, title: str, stamp: str | None) -> None:
        y = pdf.get_y()
        pdf.set_font("Helvetica", "B", 24)
        pdf.set_text_color(*DARK)
        pdf.cell(0, 10, title)
        if stamp:
            pdf.set_xy(MARGIN, y)
            pdf.set_font("Helvetica", "B", 16)
            pdf.set_text_color(*ACCENT)
            pdf.cell(0, 10, stamp, align="R")
        pdf.set_y(y + 14)

    @staticmethod
    def _render_meta(pdf: FPDF, meta: list[tuple[str, str]]) -> None:
        pdf.set_font("Helvetica", "", 10)
        for label, value in meta:
            pdf.set_text_color(*GRAY)
            pdf.cell(40, 6, label)
            pdf.set_text_color(*DARK)
            pdf.cell(0, 6, _latin1(value), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.ln(6)

    def _render_items(self, pdf: FPDF, document: SalesDocument) -> None:
        width = sum(COL_WIDTHS)
        pdf.set_draw_color(*PRIMARY)
        pdf.set_line_width(0.5)
        pdf.line(MARGIN, pdf.get_y(), MARGIN + width, pdf.get_y())
        pdf.ln(1)

        pdf.set_font("Helvetica", "", 9)
        pdf.set_text_color(*PRIMARY)
        for header, col_width, align in zip(
            ("Omschrijving", "Bedrag", "Aantal", "Totaal"),
            COL_WIDTHS,
            ("L", "R", "R", "R"),
        ):
            pdf.cell(col_width, 7, header, align=align)
        pdf.ln()
        pdf.line(MARGIN, pdf.get_y(), MARGIN + width, pdf.get_y())
        pdf.ln(2)

        pdf.set_font("Helvetica", "", 10)
        pdf.set_text_color(*DARK)
        for item in document_line_items(document):
            if isinstance(item, dict):
                description = item.get("description") or ""
                unit_price = to_number(item.get("unitPrice"), 0.0)
                quantity = to_number(item.get("quantity"), 1.0)
            else:
                description = item.description
                unit_price = item.unit_price
                quantity = item.quantity

            lines = description.splitlines() or [""]
            pdf.cell(COL_WIDTHS[0], 6, _latin1(lines[0][:60]))
            pdf.cell(COL_WIDTHS[1], 6, f"{self.currency} {format_amount(unit_price)}", align="R")
            pdf.cell(COL_WIDTHS[2], 6, f"{quantity:g}", align="R")
            pdf.cell(
                COL_WIDTHS[3], 6,
                f"{self.currency} {format_amount(line_total(item))}",
                align="R", new_x=XPos.LMARGIN, new_y=YPos.NEXT,
            )
            if len(lines) > 1:
                pdf.set_font("Helvetica", "", 9)
                pdf.set_text_color(*GRAY)
                for extra in lines[1:]:
                    pdf.cell(COL_WIDTHS[0], 5, _latin1(extra[:70]), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
                pdf.set_font("Helvetica", "", 10)
                pdf.set_text_color(*DARK)

        pdf.ln(2)
        pdf.set_draw_color(*GRAY)
        pdf.set_line_width(0.2)
        pdf.line(MARGIN, pdf.get_y(), MARGIN + width, pdf.get_y())
        pdf.ln(4)

    def _render_totals(self, pdf: FPDF, document: SalesDocument) -> None:
        label_width = 120
        value_width = sum(COL_WIDTHS) - label_width

        def row(label: str, amount: float) -> None:
            pdf.set_text_color(*GRAY)
            pdf.cell(label_width, 6, label, align="R")
            pdf.set_text_color(*DARK)
            pdf.cell(
                value_width, 6, f"{self.currency} {format_amount(amount)}",
                align="R", new_x=XPos.LMARGIN, new_y=YPos.NEXT,
            )

        pdf.set_font("Helvetica", "", 10)
        row("Subtotaal", document.subtotal)
        for rate, amount in document.vat_breakdown().items():
            if amount > 0:
                row(f"{format_rate(rate)}% btw", amount)

        pdf.ln(1)
        pdf.set_font("Helvetica", "B", 12)
        row("Totaal", document.total)
        pdf.ln(8)

    @staticmethod
    def _render_payment_details(pdf: FPDF, profile: Profile, reference: str) -> None:
        pdf.set_font("Helvetica", "", 10)
        pdf.set_text_color(*DARK)
        pdf.cell(0, 6, "Betalingsgegevens:", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.set_text_color(*GRAY)
        if profile.iban:
            pdf.cell(0, 5, _latin1(f"IBAN: {profile.iban}"), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        if profile.company_name:
            pdf.cell(0, 5, _latin1(f"t.n.v. {profile.company_name}"), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.cell(0, 5, _latin1(f"o.v.v. {reference}"), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.ln(8)

    @staticmethod
    def _render_closing(pdf: FPDF, closing: str, notes: str) -> None:
        pdf.set_font("Helvetica", "I", 9)
        pdf.set_text_color(*ACCENT)
        pdf.multi_cell(0, 5, _latin1(closing), align="C", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        if notes:
            pdf.ln(2)
            pdf.set_font("Helvetica", "", 8)
            pdf.set_text_color(*GRAY)
            pdf.multi_cell(
                0, 4, _latin1(f"Opmerking: {notes}"),
                align="C", new_x=XPos.LMARGIN, new_y=YPos.NEXT,
            )
        pdf.set_text_color(0, 0, 0)
