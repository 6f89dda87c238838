"""
Key layout of the key-value store.

Ownership lives in the key: every per-user record is stored under a prefix
that contains the owner's user id, so a prefix scan never crosses users.
"""


def profile_key(user_id: str) -> str:
    return f"user:{user_id}"


def client_prefix(user_id: str) -> str:
    return f"client:{user_id}:"


def client_key(user_id: str, client_id: str) -> str:
    return f"{client_prefix(user_id)}{client_id}"


def quotation_prefix(user_id: str) -> str:
    return f"quotation:{user_id}:"


def quotation_key(user_id: str, quotation_id: str) -> str:
    return f"{quotation_prefix(user_id)}{quotation_id}"


def invoice_prefix(user_id: str) -> str:
    return f"invoice:{user_id}:"


def invoice_key(user_id: str, invoice_id: str) -> str:
    return f"{invoice_prefix(user_id)}{invoice_id}"
