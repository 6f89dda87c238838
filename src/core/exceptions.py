"""
Domain exceptions for the quotation/invoice application.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class QuoteAppError(Exception):
    """Base exception for all application errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.message,
            "errorCode": self.code,
            "details": self.details,
        }


# Authentication Exceptions
class AuthenticationError(QuoteAppError):
    """Caller could not be authenticated."""

    def __init__(self, reason: str = "Unauthorized"):
        super().__init__(
            "Unauthorized",
            code="UNAUTHORIZED",
            details={"reason": reason},
        )


class MissingTokenError(AuthenticationError):
    """No bearer token on the request."""

    def __init__(self):
        super().__init__("No authorization header")


class InvalidTokenError(AuthenticationError):
    """Bearer token rejected by the identity provider."""

    def __init__(self, reason: str = "Token verification failed"):
        super().__init__(reason)


class IdentityProviderError(QuoteAppError):
    """Identity provider refused or failed an operation."""

    def __init__(self, operation: str, reason: str, status_code: int | None = None):
        super().__init__(
            reason,
            code="IDENTITY_PROVIDER_ERROR",
            details={"operation": operation, "status_code": status_code},
        )
        self.status_code = status_code


# Storage Exceptions
class StorageError(QuoteAppError):
    """Base exception for storage operations."""

    pass


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class RecordNotFoundError(QuoteAppError):
    """Base exception for records missing for the calling user."""

    resource = "Record"
    error_code = "NOT_FOUND"

    def __init__(self, record_id: str | None = None):
        super().__init__(
            f"{self.resource} not found",
            code=self.error_code,
            details={"id": record_id},
        )


class QuotationNotFoundError(RecordNotFoundError):
    """Quotation not found for the calling user."""

    resource = "Quotation"
    error_code = "QUOTATION_NOT_FOUND"


class InvoiceNotFoundError(RecordNotFoundError):
    """Invoice not found for the calling user."""

    resource = "Invoice"
    error_code = "INVOICE_NOT_FOUND"


class ClientNotFoundError(RecordNotFoundError):
    """Client not found for the calling user."""

    resource = "Client"
    error_code = "CLIENT_NOT_FOUND"


class ProfileNotFoundError(RecordNotFoundError):
    """Profile not found for the calling user."""

    resource = "Profile"
    error_code = "PROFILE_NOT_FOUND"


# Validation Exceptions
class ValidationError(QuoteAppError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            message,
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "value": str(value)[:100] if value else None,
            },
        )


# PDF Exceptions
class PdfRenderError(QuoteAppError):
    """PDF rendering failed."""

    def __init__(self, document_number: str, reason: str):
        super().__init__(
            f"Failed to render PDF for {document_number}: {reason}",
            code="PDF_RENDER_FAILED",
            details={"document_number": document_number, "reason": reason},
        )
