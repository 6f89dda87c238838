"""
Dependency injection container for FastAPI.

The key-value store, identity provider and PDF renderer are created once
in the application lifespan and kept on ``app.state``; everything else is
built per request from them. Tests swap any of these through
``app.dependency_overrides``.
"""

from collections.abc import Callable, Coroutine
from typing import Any

from fastapi import Depends, Request, Response
from fastapi.routing import APIRoute
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.application.use_cases import (
    ConvertQuotationToInvoiceUseCase,
    GenerateDocumentPdfUseCase,
    GetClientHistoryUseCase,
    GetDashboardUseCase,
    SignupUseCase,
)
from src.config import Settings, get_logger, get_settings
from src.core.exceptions import MissingTokenError
from src.core.interfaces import AuthUser, IIdentityProvider, IKeyValueStore
from src.core.services.client_service import ClientService
from src.core.services.invoice_service import InvoiceService
from src.core.services.profile_service import ProfileService
from src.core.services.quotation_service import QuotationService
from src.infrastructure.pdf import IDocumentPdfRenderer

logger = get_logger(__name__)

_bearer = HTTPBearer(auto_error=False)


def get_app_settings() -> Settings:
    """Get application settings."""
    return get_settings()


# Shared resources
def get_kv_store(request: Request) -> IKeyValueStore:
    return request.app.state.kv_store


def get_identity_provider(request: Request) -> IIdentityProvider:
    return request.app.state.identity


def get_pdf_renderer(request: Request) -> IDocumentPdfRenderer:
    return request.app.state.pdf_renderer


# Authentication
async def authenticate(request: Request) -> AuthUser:
    """
    Resolve the bearer token to a user, once per request.

    Raises MissingTokenError/InvalidTokenError, both answered with 401.
    """
    user = getattr(request.state, "user", None)
    if user is not None:
        return user
    credentials = await _bearer(request)
    token = credentials.credentials.strip() if credentials else ""
    if not token:
        logger.info("auth_failed", reason="missing_token", path=request.url.path)
        raise MissingTokenError()
    request.state.user = await get_identity_provider(request).get_user(token)
    return request.state.user


class AuthenticatedRoute(APIRoute):
    """Route that rejects unauthenticated requests before the body is parsed."""

    def get_route_handler(self) -> Callable[[Request], Coroutine[Any, Any, Response]]:
        handler = super().get_route_handler()

        async def authenticated_handler(request: Request) -> Response:
            await authenticate(request)
            return await handler(request)

        return authenticated_handler


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> AuthUser:
    return await authenticate(request)


# Service dependencies
def get_profile_service(store: IKeyValueStore = Depends(get_kv_store)) -> ProfileService:
    return ProfileService(store)


def get_client_service(store: IKeyValueStore = Depends(get_kv_store)) -> ClientService:
    return ClientService(store)


def get_quotation_service(
    store: IKeyValueStore = Depends(get_kv_store),
    settings: Settings = Depends(get_app_settings),
) -> QuotationService:
    return QuotationService(store, settings.documents)


def get_invoice_service(
    store: IKeyValueStore = Depends(get_kv_store),
    settings: Settings = Depends(get_app_settings),
) -> InvoiceService:
    return InvoiceService(store, settings.documents)


# Use case dependencies
def get_signup_use_case(
    identity: IIdentityProvider = Depends(get_identity_provider),
    profiles: ProfileService = Depends(get_profile_service),
) -> SignupUseCase:
    return SignupUseCase(identity, profiles)


def get_convert_use_case(
    quotations: QuotationService = Depends(get_quotation_service),
    invoices: InvoiceService = Depends(get_invoice_service),
) -> ConvertQuotationToInvoiceUseCase:
    return ConvertQuotationToInvoiceUseCase(quotations, invoices)


def get_document_pdf_use_case(
    quotations: QuotationService = Depends(get_quotation_service),
    invoices: InvoiceService = Depends(get_invoice_service),
    profiles: ProfileService = Depends(get_profile_service),
    renderer: IDocumentPdfRenderer = Depends(get_pdf_renderer),
) -> GenerateDocumentPdfUseCase:
    return GenerateDocumentPdfUseCase(quotations, invoices, profiles, renderer)


def get_client_history_use_case(
    clients: ClientService = Depends(get_client_service),
    quotations: QuotationService = Depends(get_quotation_service),
    invoices: InvoiceService = Depends(get_invoice_service),
) -> GetClientHistoryUseCase:
    return GetClientHistoryUseCase(clients, quotations, invoices)


def get_dashboard_use_case(
    quotations: QuotationService = Depends(get_quotation_service),
    invoices: InvoiceService = Depends(get_invoice_service),
) -> GetDashboardUseCase:
    return GetDashboardUseCase(quotations, invoices)
