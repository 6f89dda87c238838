"""Invoice endpoints."""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from src.api.dependencies import (
    AuthenticatedRoute,
    get_current_user,
    get_document_pdf_use_case,
    get_invoice_service,
)
from src.application.dto.requests import InvoiceCreateRequest, InvoiceUpdateRequest
from src.application.dto.responses import (
    ErrorResponse,
    InvoiceListResponse,
    InvoiceResponse,
    InvoiceView,
    SuccessResponse,
)
from src.application.use_cases.generate_document_pdf import GenerateDocumentPdfUseCase
from src.core.entities import InvoiceStatus
from src.core.entities.base import utcnow
from src.core.interfaces import AuthUser
from src.core.services.document_query import parse_sort
from src.core.services.invoice_service import InvoiceService

router = APIRouter(
    prefix="/invoices",
    route_class=AuthenticatedRoute,
    tags=["invoices"],
    responses={401: {"model": ErrorResponse}},
)


@router.post(
    "",
    response_model=InvoiceResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def create_invoice(
    request: InvoiceCreateRequest,
    user: AuthUser = Depends(get_current_user),
    invoices: InvoiceService = Depends(get_invoice_service),
) -> InvoiceResponse:
    """Create an invoice numbered ``FAC-<year>-<NNNN>``."""
    invoice = await invoices.create(user.id, request.changes())
    return InvoiceResponse(invoice=InvoiceView.from_entity(invoice))


@router.get("", response_model=InvoiceListResponse, responses={400: {"model": ErrorResponse}})
async def list_invoices(
    status: InvoiceStatus | None = Query(default=None, description="Filters on display status"),
    search: str | None = Query(default=None, max_length=200),
    sort: str | None = Query(default=None, examples=["due-asc"]),
    user: AuthUser = Depends(get_current_user),
    invoices: InvoiceService = Depends(get_invoice_service),
) -> InvoiceListResponse:
    """
    The caller's invoices.

    ``status=overdue`` returns sent invoices past their due date.
    """
    now = utcnow()
    items = await invoices.list(user.id, status=status, search=search, order=parse_sort(sort), now=now)
    return InvoiceListResponse(invoices=[InvoiceView.from_entity(i, now) for i in items])


@router.get("/{invoice_id}", response_model=InvoiceResponse, responses={404: {"model": ErrorResponse}})
async def get_invoice(
    invoice_id: str,
    user: AuthUser = Depends(get_current_user),
    invoices: InvoiceService = Depends(get_invoice_service),
) -> InvoiceResponse:
    invoice = await invoices.get(user.id, invoice_id)
    return InvoiceResponse(invoice=InvoiceView.from_entity(invoice))


@router.put(
    "/{invoice_id}",
    response_model=InvoiceResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)
async def update_invoice(
    invoice_id: str,
    request: InvoiceUpdateRequest,
    user: AuthUser = Depends(get_current_user),
    invoices: InvoiceService = Depends(get_invoice_service),
) -> InvoiceResponse:
    invoice = await invoices.update(user.id, invoice_id, request.changes())
    return InvoiceResponse(invoice=InvoiceView.from_entity(invoice))


@router.delete("/{invoice_id}", response_model=SuccessResponse, responses={404: {"model": ErrorResponse}})
async def delete_invoice(
    invoice_id: str,
    user: AuthUser = Depends(get_current_user),
    invoices: InvoiceService = Depends(get_invoice_service),
) -> SuccessResponse:
    await invoices.delete(user.id, invoice_id)
    return SuccessResponse()


@router.get(
    "/{invoice_id}/pdf",
    response_class=Response,
    responses={
        200: {"content": {"application/pdf": {}}},
        404: {"model": ErrorResponse},
    },
)
async def get_invoice_pdf(
    invoice_id: str,
    user: AuthUser = Depends(get_current_user),
    use_case: GenerateDocumentPdfUseCase = Depends(get_document_pdf_use_case),
) -> Response:
    """Download the invoice as PDF, stamped BETAALD once paid."""
    result = await use_case.invoice_pdf(user.id, invoice_id)
    return Response(
        content=result.pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{result.filename}"'},
    )
