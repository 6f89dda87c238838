"""Client CRUD. Clients are keyed ``client:<userId>:<id>``."""

from typing import Any

from src.config import get_logger
from src.core.entities import Client
from src.core.entities.base import utcnow
from src.core.exceptions import ClientNotFoundError, ValidationError
from src.core.interfaces import IKeyValueStore
from src.core.services.keys import client_key, client_prefix

logger = get_logger(__name__)

CLIENT_FIELDS = frozenset({
    "name",
    "email",
    "phone",
    "address",
    "postal_code",
    "city",
    "country",
    "kvk_number",
    "vat_number",
    "notes",
})


def _require_name(value: Any) -> str:
    name = (value or "").strip() if isinstance(value, str) else ""
    if not name:
        raise ValidationError("name", "Client name is required", value)
    return name


class ClientService:
    """
    Manage a user's clients.

    Deleting a client never touches quotations or invoices; those keep
    their own copy of the client name and address.
    """

    def __init__(self, store: IKeyValueStore):
        self._store = store

    async def create(self, user_id: str, data: dict[str, Any]) -> Client:
        fields = {k: v for k, v in data.items() if k in CLIENT_FIELDS}
        fields["name"] = _require_name(fields.get("name"))

        client = Client(user_id=user_id, **fields)
        await self._store.set(client_key(user_id, client.id), client.to_record())
        logger.info("client_created", user_id=user_id, client_id=client.id)
        return client

    async def list(self, user_id: str) -> list[Client]:
        records = await self._store.get_by_prefix(client_prefix(user_id))
        clients = [Client.model_validate(record) for record in records]
        return sorted(clients, key=lambda c: c.name.casefold())

    async def find(self, user_id: str, client_id: str) -> Client | None:
        record = await self._store.get(client_key(user_id, client_id))
        return Client.model_validate(record) if record else None

    async def get(self, user_id: str, client_id: str) -> Client:
        client = await self.find(user_id, client_id)
        if client is None:
            raise ClientNotFoundError(client_id)
        return client

    async def update(self, user_id: str, client_id: str, changes: dict[str, Any]) -> Client:
        current = await self.get(user_id, client_id)

        updates = {k: v for k, v in changes.items() if k in CLIENT_FIELDS}
        if "name" in updates:
            updates["name"] = _require_name(updates["name"])

        client = Client.model_validate({
            **current.model_dump(),
            **updates,
            "id": current.id,
            "user_id": user_id,
            "created_at": current.created_at,
            "updated_at": utcnow(),
        })
        await self._store.set(client_key(user_id, client_id), client.to_record())
        logger.info("client_updated", user_id=user_id, client_id=client_id, fields=sorted(updates))
        return client

    async def delete(self, user_id: str, client_id: str) -> None:
        deleted = await self._store.delete(client_key(user_id, client_id))
        if not deleted:
            raise ClientNotFoundError(client_id)
        logger.info("client_deleted", user_id=user_id, client_id=client_id)
