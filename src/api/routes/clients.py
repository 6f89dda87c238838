"""Client endpoints."""

from fastapi import APIRouter, Depends

from src.api.dependencies import (
    AuthenticatedRoute,
    get_client_history_use_case,
    get_client_service,
    get_current_user,
)
from src.application.dto.requests import ClientCreateRequest, ClientUpdateRequest
from src.application.dto.responses import (
    ClientHistoryResponse,
    ClientListResponse,
    ClientResponse,
    ErrorResponse,
    SuccessResponse,
)
from src.application.use_cases.get_client_history import GetClientHistoryUseCase
from src.core.interfaces import AuthUser
from src.core.services.client_service import ClientService

router = APIRouter(
    prefix="/clients",
    route_class=AuthenticatedRoute,
    tags=["clients"],
    responses={401: {"model": ErrorResponse}},
)


@router.post("", response_model=ClientResponse, responses={400: {"model": ErrorResponse}})
async def create_client(
    request: ClientCreateRequest,
    user: AuthUser = Depends(get_current_user),
    clients: ClientService = Depends(get_client_service),
) -> ClientResponse:
    return ClientResponse(client=await clients.create(user.id, request.changes()))


@router.get("", response_model=ClientListResponse)
async def list_clients(
    user: AuthUser = Depends(get_current_user),
    clients: ClientService = Depends(get_client_service),
) -> ClientListResponse:
    """All clients of the caller, by name."""
    return ClientListResponse(clients=await clients.list(user.id))


@router.get("/{client_id}", response_model=ClientResponse, responses={404: {"model": ErrorResponse}})
async def get_client(
    client_id: str,
    user: AuthUser = Depends(get_current_user),
    clients: ClientService = Depends(get_client_service),
) -> ClientResponse:
    return ClientResponse(client=await clients.get(user.id, client_id))


@router.get(
    "/{client_id}/history",
    response_model=ClientHistoryResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_client_history(
    client_id: str,
    user: AuthUser = Depends(get_current_user),
    use_case: GetClientHistoryUseCase = Depends(get_client_history_use_case),
) -> ClientHistoryResponse:
    """The client with its quotations and invoices."""
    return await use_case.execute(user.id, client_id)


@router.put(
    "/{client_id}",
    response_model=ClientResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_client(
    client_id: str,
    request: ClientUpdateRequest,
    user: AuthUser = Depends(get_current_user),
    clients: ClientService = Depends(get_client_service),
) -> ClientResponse:
    return ClientResponse(client=await clients.update(user.id, client_id, request.changes()))


@router.delete("/{client_id}", response_model=SuccessResponse, responses={404: {"model": ErrorResponse}})
async def delete_client(
    client_id: str,
    user: AuthUser = Depends(get_current_user),
    clients: ClientService = Depends(get_client_service),
) -> SuccessResponse:
    """Delete the client. Its quotations and invoices are kept as they are."""
    await clients.delete(user.id, client_id)
    return SuccessResponse()
