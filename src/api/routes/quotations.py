"""Quotation endpoints."""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from src.api.dependencies import (
    AuthenticatedRoute,
    get_convert_use_case,
    get_current_user,
    get_document_pdf_use_case,
    get_quotation_service,
)
from src.application.dto.requests import QuotationCreateRequest, QuotationUpdateRequest
from src.application.dto.responses import (
    ErrorResponse,
    InvoiceResponse,
    QuotationListResponse,
    QuotationResponse,
    QuotationView,
    SuccessResponse,
)
from src.application.use_cases.convert_quotation_to_invoice import (
    ConvertQuotationToInvoiceUseCase,
)
from src.application.use_cases.generate_document_pdf import GenerateDocumentPdfUseCase
from src.core.entities import QuotationStatus
from src.core.interfaces import AuthUser
from src.core.services.document_query import parse_sort
from src.core.services.quotation_service import QuotationService

router = APIRouter(
    prefix="/quotations",
    route_class=AuthenticatedRoute,
    tags=["quotations"],
    responses={401: {"model": ErrorResponse}},
)


@router.post("", response_model=QuotationResponse, responses={404: {"model": ErrorResponse}})
async def create_quotation(
    request: QuotationCreateRequest,
    user: AuthUser = Depends(get_current_user),
    quotations: QuotationService = Depends(get_quotation_service),
) -> QuotationResponse:
    """Create a quotation numbered ``OFF-<epoch millis>``."""
    quotation = await quotations.create(user.id, request.changes())
    return QuotationResponse(quotation=QuotationView.from_entity(quotation))


@router.get("", response_model=QuotationListResponse, responses={400: {"model": ErrorResponse}})
async def list_quotations(
    status: QuotationStatus | None = Query(default=None),
    search: str | None = Query(default=None, max_length=200),
    sort: str | None = Query(default=None, examples=["date-desc"]),
    user: AuthUser = Depends(get_current_user),
    quotations: QuotationService = Depends(get_quotation_service),
) -> QuotationListResponse:
    items = await quotations.list(user.id, status=status, search=search, order=parse_sort(sort))
    return QuotationListResponse(quotations=[QuotationView.from_entity(q) for q in items])


@router.get("/{quotation_id}", response_model=QuotationResponse, responses={404: {"model": ErrorResponse}})
async def get_quotation(
    quotation_id: str,
    user: AuthUser = Depends(get_current_user),
    quotations: QuotationService = Depends(get_quotation_service),
) -> QuotationResponse:
    quotation = await quotations.get(user.id, quotation_id)
    return QuotationResponse(quotation=QuotationView.from_entity(quotation))


@router.put(
    "/{quotation_id}",
    response_model=QuotationResponse,
    responses={404: {"model": ErrorResponse}},
)
async def update_quotation(
    quotation_id: str,
    request: QuotationUpdateRequest,
    user: AuthUser = Depends(get_current_user),
    quotations: QuotationService = Depends(get_quotation_service),
) -> QuotationResponse:
    quotation = await quotations.update(user.id, quotation_id, request.changes())
    return QuotationResponse(quotation=QuotationView.from_entity(quotation))


@router.delete("/{quotation_id}", response_model=SuccessResponse, responses={404: {"model": ErrorResponse}})
async def delete_quotation(
    quotation_id: str,
    user: AuthUser = Depends(get_current_user),
    quotations: QuotationService = Depends(get_quotation_service),
) -> SuccessResponse:
    await quotations.delete(user.id, quotation_id)
    return SuccessResponse()


@router.post(
    "/{quotation_id}/convert-to-invoice",
    response_model=InvoiceResponse,
    responses={404: {"model": ErrorResponse}},
)
async def convert_to_invoice(
    quotation_id: str,
    user: AuthUser = Depends(get_current_user),
    use_case: ConvertQuotationToInvoiceUseCase = Depends(get_convert_use_case),
) -> InvoiceResponse:
    """Issue a sent invoice from the quotation and mark the quotation accepted."""
    result = await use_case.execute(user.id, quotation_id)
    return result.to_response()


@router.get(
    "/{quotation_id}/pdf",
    response_class=Response,
    responses={
        200: {"content": {"application/pdf": {}}},
        404: {"model": ErrorResponse},
    },
)
async def get_quotation_pdf(
    quotation_id: str,
    user: AuthUser = Depends(get_current_user),
    use_case: GenerateDocumentPdfUseCase = Depends(get_document_pdf_use_case),
) -> Response:
    """Download the quotation as PDF."""
    result = await use_case.quotation_pdf(user.id, quotation_id)
    return Response(
        content=result.pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{result.filename}"'},
    )
