"""Bot state repository backed by a Supabase table."""
from asyncio import to_thread
from datetime import datetime, timezone
from typing import Any, Iterable
from supabase import Client
import logging

from database.storage import Storage

logger = logging.getLogger(__name__)


class StateRepository(Storage):
    """
    Persist user and conversation state documents.

    Table layout: key (text, primary key), document (jsonb), updated_at (timestamptz).
    """

    def __init__(self, supabase: Client, table: str = "bot_state"):
        self.supabase = supabase
        self.table = table

    async def read(self, keys: Iterable[str]) -> dict[str, dict[str, Any]]:
        """Raises on database errors so a turn never runs against missing state."""
        keys = list(keys)
        if not keys:
            return {}
        try:
            response = await to_thread(
                lambda: self.supabase.table(self.table)
                .select("key, document")
                .in_("key", keys)
                .execute()
            )
            return {
                row["key"]: row["document"] or {}
                for row in (response.data or [])
            }
        except Exception as e:
            logger.error(f"Error reading state: {e}")
            raise

    async def write(self, changes: dict[str, dict[str, Any]]) -> None:
        if not changes:
            return
        now = datetime.now(timezone.utc).isoformat()
        rows = [
            {"key": key, "document": document, "updated_at": now}
            for key, document in changes.items()
        ]
        try:
            await to_thread(
                lambda: self.supabase.table(self.table)
                .upsert(rows, on_conflict="key")
                .execute()
            )
        except Exception as e:
            logger.error(f"Error writing state: {e}", exc_info=True)
            raise

    async def delete(self, keys: Iterable[str]) -> None:
        keys = list(keys)
        if not keys:
            return
        try:
            await to_thread(
                lambda: self.supabase.table(self.table)
                .delete()
                .in_("key", keys)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error deleting state: {e}")
            raise
