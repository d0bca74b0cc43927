"""Messages route: runs one bot turn per inbound activity."""
from fastapi import APIRouter, Depends
import asyncio
import hashlib
import logging

from api.schemas.request_schemas import ActivityRequest
from api.schemas.response_schemas import TurnResponse
from config.settings import settings
from core.bot import VenueBot
from core.dependencies import get_bot
from core.errors import classify_error, is_retryable
from core.turn_context import TurnContext

logger = logging.getLogger(__name__)
router = APIRouter()

# ---------------------------------------------------------------------------
# Turns for the same conversation must not interleave: state is read and
# written within a turn with no concurrency check. Conversations are hashed
# onto a fixed set of locks.
# ---------------------------------------------------------------------------
_NUM_SHARDS = max(1, settings.TURN_LOCK_SHARDS)
_turn_locks = [asyncio.Lock() for _ in range(_NUM_SHARDS)]


def _shard_for(channel_id: str, conversation_id: str) -> int:
    digest = hashlib.sha256(f"{channel_id}/{conversation_id}".encode()).hexdigest()
    return int(digest[:8], 16) % _NUM_SHARDS


@router.post("/messages", response_model=TurnResponse)
async def post_activity(
    request: ActivityRequest,
    bot: VenueBot = Depends(get_bot),
):
    """
    Process one activity and return every reply the bot sent.

    Collaborator failures (LUIS, QnA, storage) are reported in the body with
    an error code instead of failing the request.
    """
    turn_context = TurnContext(request.to_activity())

    try:
        async with _turn_locks[_shard_for(request.channel_id, request.conversation_id)]:
            await bot.on_turn(turn_context)
    except Exception as e:
        retryable = is_retryable(e)
        error_code = classify_error(e)
        logger.error(
            f"Error processing turn (code={error_code}, retryable={retryable}): {e}",
            exc_info=True,
        )
        return TurnResponse(
            responses=turn_context.sent_activities,
            error_code=error_code,
            error_retryable=retryable,
        )

    return TurnResponse(responses=turn_context.sent_activities)
