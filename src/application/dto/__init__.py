"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.
"""

from src.application.dto.requests import (
    ClientCreateRequest,
    ClientUpdateRequest,
    InvoiceCreateRequest,
    InvoiceUpdateRequest,
    LineItemRequest,
    ProfileUpdateRequest,
    QuotationCreateRequest,
    QuotationUpdateRequest,
    SignupRequest,
)
from src.application.dto.responses import (
    ClientHistoryResponse,
    ClientListResponse,
    ClientResponse,
    DashboardResponse,
    DatabaseHealthResponse,
    ErrorResponse,
    HealthResponse,
    InvoiceListResponse,
    InvoiceResponse,
    InvoiceView,
    ProfileResponse,
    QuotationListResponse,
    QuotationResponse,
    QuotationView,
    SignupResponse,
    SuccessResponse,
)

__all__ = [
    # Requests
    "SignupRequest",
    "ProfileUpdateRequest",
    "ClientCreateRequest",
    "ClientUpdateRequest",
    "LineItemRequest",
    "QuotationCreateRequest",
    "QuotationUpdateRequest",
    "InvoiceCreateRequest",
    "InvoiceUpdateRequest",
    # Responses
    "QuotationView",
    "InvoiceView",
    "QuotationResponse",
    "QuotationListResponse",
    "InvoiceResponse",
    "InvoiceListResponse",
    "ClientResponse",
    "ClientListResponse",
    "ClientHistoryResponse",
    "ProfileResponse",
    "SignupResponse",
    "SuccessResponse",
    "DashboardResponse",
    "HealthResponse",
    "DatabaseHealthResponse",
    "ErrorResponse",
]
