"""Application use cases."""

from src.application.use_cases.convert_quotation_to_invoice import (
    ConversionResult,
    ConvertQuotationToInvoiceUseCase,
)
from src.application.use_cases.generate_document_pdf import (
    DocumentPdfResult,
    GenerateDocumentPdfUseCase,
)
from src.application.use_cases.get_client_history import GetClientHistoryUseCase
from src.application.use_cases.get_dashboard import GetDashboardUseCase
from src.application.use_cases.signup import SignupResult, SignupUseCase

__all__ = [
    "SignupUseCase",
    "SignupResult",
    "ConvertQuotationToInvoiceUseCase",
    "ConversionResult",
    "GenerateDocumentPdfUseCase",
    "DocumentPdfResult",
    "GetClientHistoryUseCase",
    "GetDashboardUseCase",
]
