"""
Generate Document PDF Use Case.

Renders a quotation or invoice together with the owner's company profile.
"""

from dataclasses import dataclass
from datetime import datetime

from src.config import get_logger
from src.core.services.invoice_service import InvoiceService
from src.core.services.profile_service import ProfileService
from src.core.services.quotation_service import QuotationService
from src.infrastructure.pdf import IDocumentPdfRenderer

logger = get_logger(__name__)


@dataclass
class DocumentPdfResult:
    """Rendered PDF with its download name."""

    pdf_bytes: bytes
    filename: str
    file_size: int


class GenerateDocumentPdfUseCase:
    """
    Flow:
    1. Load the document (404 if it is not the caller's)
    2. Load the profile; a missing profile renders with placeholders
    3. Render via the injected renderer
    """

    def __init__(
        self,
        quotations: QuotationService,
        invoices: InvoiceService,
        profiles: ProfileService,
        renderer: IDocumentPdfRenderer,
    ):
        self._quotations = quotations
        self._invoices = invoices
        self._profiles = profiles
        self._renderer = renderer

    async def quotation_pdf(self, user_id: str, quotation_id: str) -> DocumentPdfResult:
        quotation = await self._quotations.get(user_id, quotation_id)
        profile = await self._profiles.find(user_id)

        pdf_bytes = self._renderer.render_quotation(quotation, profile)
        logger.info("quotation_pdf_generated", quotation_id=quotation_id, size_bytes=len(pdf_bytes))
        return DocumentPdfResult(
            pdf_bytes=pdf_bytes,
            filename=f"Offerte-{quotation.quotation_number}.pdf",
            file_size=len(pdf_bytes),
        )

    async def invoice_pdf(
        self,
        user_id: str,
        invoice_id: str,
        now: datetime | None = None,
    ) -> DocumentPdfResult:
        invoice = await self._invoices.get(user_id, invoice_id)
        profile = await self._profiles.find(user_id)

        pdf_bytes = self._renderer.render_invoice(invoice, profile, now)
        logger.info("invoice_pdf_generated", invoice_id=invoice_id, size_bytes=len(pdf_bytes))
        return DocumentPdfResult(
            pdf_bytes=pdf_bytes,
            filename=f"Factuur-{invoice.invoice_number}.pdf",
            file_size=len(pdf_bytes),
        )
