"""
Supabase access for profiles, quests and inventory.

One service-role client per process. Row level security is bypassed, so every
query must scope itself to the caller's user_id.
"""

from typing import Optional

from supabase import Client, ClientOptions, create_client

from focusforge.core.config import get_settings

_supabase_client: Optional[Client] = None


def get_supabase() -> Client:
    global _supabase_client
    if _supabase_client is None:
        settings = get_settings()
        options = ClientOptions(
            postgrest_client_timeout=settings.supabase_timeout_seconds,
            auto_refresh_token=False,
            persist_session=False,
        )
        _supabase_client = create_client(
            settings.supabase_url, settings.supabase_service_role_key, options=options
        )
    return _supabase_client


def reset_supabase_client() -> None:
    """Drop the cached client (tests, settings reload)."""
    global _supabase_client
    _supabase_client = None
