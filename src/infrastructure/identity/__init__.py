"""Identity provider implementations."""

from src.infrastructure.identity.supabase_auth import SupabaseIdentityProvider

__all__ = ["SupabaseIdentityProvider"]
