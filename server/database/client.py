"""Supabase client used by the state repository."""
from typing import Optional
import logging

from supabase import Client, create_client

from config.settings import settings

logger = logging.getLogger(__name__)

_client: Optional[Client] = None


def get_supabase_client() -> Client:
    """Return the shared Supabase client, creating it on first use."""
    global _client

    if _client is None:
        if not (settings.SUPABASE_URL and settings.SUPABASE_KEY):
            raise RuntimeError("SUPABASE_URL and SUPABASE_KEY must be set to use Supabase state storage")
        _client = create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
        logger.info(f"Supabase state storage connected (table={settings.STATE_TABLE})")

    return _client
