"""Pytest configuration and fixtures."""

import copy
from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from src.api.dependencies import get_identity_provider, get_kv_store, get_pdf_renderer
from src.api.main import create_app
from src.config import DocumentSettings, get_settings
from src.core.exceptions import InvalidTokenError
from src.core.interfaces import AuthUser, IIdentityProvider, IKeyValueStore, JsonValue
from src.core.services.client_service import ClientService
from src.core.services.invoice_service import InvoiceService
from src.core.services.profile_service import ProfileService
from src.core.services.quotation_service import QuotationService
from src.infrastructure.pdf import IDocumentPdfRenderer

ALICE = AuthUser(id="user-alice", email="alice@schilder.nl")
BOB = AuthUser(id="user-bob", email="bob@loodgieter.nl")


class InMemoryKeyValueStore(IKeyValueStore):
    """Dict-backed store; values are deep-copied like a real round trip."""

    def __init__(self) -> None:
        self.data: dict[str, JsonValue] = {}
        self.writes = 0

    async def get(self, key: str) -> JsonValue | None:
        value = self.data.get(key)
        return copy.deepcopy(value) if value is not None else None

    async def set(self, key: str, value: JsonValue) -> None:
        self.writes += 1
        self.data[key] = copy.deepcopy(value)

    async def delete(self, key: str) -> bool:
        self.writes += 1
        return self.data.pop(key, None) is not None

    async def get_by_prefix(self, prefix: str) -> list[JsonValue]:
        return [copy.deepcopy(self.data[key]) for key in sorted(self.data) if key.startswith(prefix)]


class FakeIdentityProvider(IIdentityProvider):
    """Knows a fixed set of tokens; created accounts get sequential ids."""

    def __init__(self, users: dict[str, AuthUser] | None = None) -> None:
        self.users = dict(users or {})
        self.created: list[dict] = []

    async def get_user(self, token: str) -> AuthUser:
        try:
            return self.users[token]
        except KeyError:
            raise InvalidTokenError("invalid JWT") from None

    async def create_user(self, email: str, password: str, metadata: dict | None = None) -> AuthUser:
        self.created.append({"email": email, "password": password, "metadata": metadata or {}})
        return AuthUser(id=f"new-user-{len(self.created)}", email=email, user_metadata=metadata or {})


# ---------------------------------------------------------------------------
# Time
# ---------------------------------------------------------------------------


@pytest.fixture
def now() -> datetime:
    """A fixed reference time."""
    return datetime(2024, 3, 15, 10, 30, tzinfo=UTC)


# ---------------------------------------------------------------------------
# Ports
# ---------------------------------------------------------------------------


@pytest.fixture
def kv_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def identity() -> FakeIdentityProvider:
    return FakeIdentityProvider({"token-alice": ALICE, "token-bob": BOB})


@pytest.fixture
def pdf_renderer() -> MagicMock:
    """Mock renderer returning fixed PDF bytes."""
    renderer = MagicMock(spec=IDocumentPdfRenderer)
    renderer.render_quotation.return_value = b"%PDF-1.4 mock quotation"
    renderer.render_invoice.return_value = b"%PDF-1.4 mock invoice"
    return renderer


# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------


@pytest.fixture
def document_settings() -> DocumentSettings:
    return DocumentSettings()


@pytest.fixture
def profile_service(kv_store: InMemoryKeyValueStore) -> ProfileService:
    return ProfileService(kv_store)


@pytest.fixture
def client_service(kv_store: InMemoryKeyValueStore) -> ClientService:
    return ClientService(kv_store)


@pytest.fixture
def quotation_service(
    kv_store: InMemoryKeyValueStore, document_settings: DocumentSettings
) -> QuotationService:
    return QuotationService(kv_store, document_settings)


@pytest.fixture
def invoice_service(
    kv_store: InMemoryKeyValueStore, document_settings: DocumentSettings
) -> InvoiceService:
    return InvoiceService(kv_store, document_settings)


@pytest.fixture
def sample_line_items() -> list[dict]:
    """Two lines at different VAT rates: subtotal 250, VAT 46.5, total 296.5."""
    return [
        {"description": "Schilderwerk woonkamer", "unitPrice": 100, "quantity": 2, "vatPercentage": 21},
        {"description": "Verf", "unitPrice": 50, "quantity": 1, "vatPercentage": 9},
    ]


# ---------------------------------------------------------------------------
# API
# ---------------------------------------------------------------------------


@pytest.fixture
def app(
    kv_store: InMemoryKeyValueStore,
    identity: FakeIdentityProvider,
    pdf_renderer: MagicMock,
) -> FastAPI:
    """Application with its shared resources replaced by fakes."""
    application = create_app()
    # Route-level authentication reads the provider from app.state
    application.state.identity = identity
    application.dependency_overrides[get_kv_store] = lambda: kv_store
    application.dependency_overrides[get_identity_provider] = lambda: identity
    application.dependency_overrides[get_pdf_renderer] = lambda: pdf_renderer
    return application


@pytest_asyncio.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def api_prefix() -> str:
    """Base path all routes are mounted under."""
    return get_settings().api.base_path


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": "Bearer token-alice"}


@pytest.fixture
def other_auth_headers() -> dict[str, str]:
    return {"Authorization": "Bearer token-bob"}
