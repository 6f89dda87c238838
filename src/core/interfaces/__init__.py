"""Core interfaces (ports) for dependency injection."""

from src.core.interfaces.identity import AuthUser, IIdentityProvider
from src.core.interfaces.kv_store import IKeyValueStore, JsonValue

__all__ = [
    # Storage interfaces
    "IKeyValueStore",
    "JsonValue",
    # Identity interfaces
    "IIdentityProvider",
    "AuthUser",
]
