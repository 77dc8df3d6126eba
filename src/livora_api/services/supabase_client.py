"""Supabase (PostgreSQL) client access shared by the repositories."""
import logging
import os
from typing import Any, Optional

from supabase import create_client

from livora_api.errors import StorageUnavailableError

logger = logging.getLogger(__name__)

_client: Optional[Any] = None


def get_supabase_client() -> Optional[Any]:
    """Get the Supabase client, or None when credentials are not configured."""
    global _client
    if _client is not None:
        return _client

    supabase_url = os.getenv("SUPABASE_URL")
    supabase_key = os.getenv("SUPABASE_SERVICE_ROLE_KEY") or os.getenv("SUPABASE_ANON_KEY")

    if not supabase_url or not supabase_key:
        logger.warning("Supabase credentials not configured. Persistence is disabled.")
        return None

    try:
        _client = create_client(supabase_url, supabase_key)
    except Exception as e:
        logger.error(f"Failed to create Supabase client: {e}")
        return None
    return _client


class SupabaseRepository:
    """Base class for table repositories; resolves the client lazily."""

    def __init__(self, client: Optional[Any] = None):
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = get_supabase_client()
        if self._client is None:
            raise StorageUnavailableError("Database not available")
        return self._client

    @staticmethod
    def is_unique_violation(error: Exception) -> bool:
        message = str(error).lower()
        return "duplicate" in message or "unique" in message or "23505" in message
