"""
Shared singleton dependencies for the application.

The bot, its service clients and its state stores are created once at
startup and reused across requests. VenueBot holds no per-turn state of
its own; everything a turn mutates lives in the TurnContext or in storage.
"""
import logging
from typing import Optional

from config.settings import settings
from core.bot import VenueBot
from core.bot_state import ConversationState, UserState
from core.services import BotServices
from database.client import get_supabase_client
from database.repositories.state_repo import StateRepository
from database.storage import MemoryStorage, Storage

logger = logging.getLogger(__name__)

# Module-level singletons, initialized once via init_dependencies()
_services: Optional[BotServices] = None
_bot: Optional[VenueBot] = None


def _create_storage() -> Storage:
    if settings.STATE_STORAGE == "supabase":
        logger.info("Using Supabase state storage")
        return StateRepository(get_supabase_client(), table=settings.STATE_TABLE)

    logger.warning("Using in-memory state storage, state is lost on restart")
    return MemoryStorage()


def init_dependencies() -> None:
    """
    Initialize all shared singletons. Called once at application startup.

    Raises ConfigurationError if the LUIS or QnA bindings are incomplete.
    """
    global _services, _bot

    logger.info("Initializing shared dependencies...")

    _services = BotServices.from_settings(settings)
    storage = _create_storage()

    _bot = VenueBot(
        services=_services,
        user_state=UserState(storage),
        conversation_state=ConversationState(storage),
    )

    logger.info(
        f"Dependencies initialized: {len(_services.qna_services)} knowledge base(s) bound"
    )


async def shutdown_dependencies() -> None:
    """Clean up resources on shutdown."""
    global _services, _bot
    if _services:
        await _services.close()
        logger.info("Service clients closed")
    _services = None
    _bot = None


def get_services() -> BotServices:
    if _services is None:
        raise RuntimeError("Dependencies not initialized. Call init_dependencies() first.")
    return _services


def get_bot() -> VenueBot:
    if _bot is None:
        raise RuntimeError("Dependencies not initialized. Call init_dependencies() first.")
    return _bot
