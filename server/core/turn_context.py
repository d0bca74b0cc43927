"""Turn context: one inbound activity and the replies produced for it."""
from typing import Any
import logging

from models.message import Activity

logger = logging.getLogger(__name__)


class TurnContext:
    """
    Carries a single turn through the bot.

    - activity: the inbound message/event
    - turn_state: per-turn cache (loaded bot state lives here)
    - sent_activities: every reply sent during the turn, in order; the
      messages route returns them as the response body
    """

    def __init__(self, activity: Activity):
        if activity is None:
            raise ValueError("activity is required")
        self.activity = activity
        self.turn_state: dict[str, Any] = {}
        self.sent_activities: list[str] = []

    @property
    def responded(self) -> bool:
        return bool(self.sent_activities)

    async def send_activity(self, text: str) -> None:
        """Queue a reply to the user."""
        self.sent_activities.append(text)
        logger.debug(f"Reply to {self.activity.conversation_id}: {text}")
