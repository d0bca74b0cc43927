"""Interruption Detector: cancel and help take priority over any active dialog."""
import logging

from core.dialogs import DialogContext
from models.intent import Intent

logger = logging.getLogger(__name__)

CANCELED_MESSAGE = "Ok. I've canceled our last activity."
NOTHING_TO_CANCEL_MESSAGE = "I don't have anything to cancel."
HELP_MESSAGES = (
    "Let me try to provide some help.",
    "I understand greetings, being asked for help, or being asked to cancel what I am doing.",
)


class InterruptionDetector:

    async def check(self, dc: DialogContext, top_intent: Intent) -> bool:
        """Handle cancel/help before the active dialog sees the turn. Returns True if handled."""
        if top_intent is Intent.CANCEL:
            if dc.active_dialog is not None:
                await dc.cancel_all_dialogs()
                await dc.context.send_activity(CANCELED_MESSAGE)
            else:
                await dc.context.send_activity(NOTHING_TO_CANCEL_MESSAGE)
            logger.info("Turn interrupted by cancel")
            return True

        if top_intent is Intent.HELP:
            for message in HELP_MESSAGES:
                await dc.context.send_activity(message)
            if dc.active_dialog is not None:
                await dc.reprompt_dialog()
            logger.info("Turn interrupted by help")
            return True

        return False
