"""VenueBot: per-turn orchestration of interruptions, dialogs and answers."""
from typing import Iterable
import logging

from core.answer_dispatcher import AnswerDispatcher
from core.bot_state import ConversationState, UserState
from core.dialogs import Dialog, DialogContext, DialogSet, DialogTurnStatus
from core.interruptions import InterruptionDetector
from core.services import LUIS_CONFIGURATION, BotServices
from core.turn_context import TurnContext
from core.venue_disambiguator import VenueDisambiguator
from models.intent import Intent, ProviderKey, RecognizerResult
from models.message import ActivityType
from models.state import DialogState, IntentState

logger = logging.getLogger(__name__)

DIDNT_UNDERSTAND_MESSAGE = "I didn't understand what you just said to me."


class VenueBot:
    """
    Main entry point for every inbound activity.

    Message turns run in a fixed order:
    classify → interruptions (cancel/help) → continue active dialog →
    route by intent when no dialog is active. User and conversation state
    are saved once at the end of every turn.
    """

    def __init__(
        self,
        services: BotServices,
        user_state: UserState,
        conversation_state: ConversationState,
        dialogs: Iterable[Dialog] = (),
    ):
        if services is None:
            raise ValueError("services is required")
        if user_state is None:
            raise ValueError("user_state is required")
        if conversation_state is None:
            raise ValueError("conversation_state is required")

        # Missing classifier or knowledge base is fatal at startup
        services.validate()

        self.services = services
        self.user_state = user_state
        self.conversation_state = conversation_state

        self.dialog_state = conversation_state.create_property("DialogState", DialogState)
        self.intent_state = user_state.create_property("IntentState", IntentState)

        self.dialogs = DialogSet(self.dialog_state)
        for dialog in dialogs:
            self.dialogs.add(dialog)

        self.dispatcher = AnswerDispatcher(services.qna_services)
        self.disambiguator = VenueDisambiguator(self.intent_state, self.dispatcher, services.qna_services)
        self.interruptions = InterruptionDetector()

    async def on_turn(self, turn_context: TurnContext) -> None:
        dc = await self.dialogs.create_context(turn_context)

        if turn_context.activity.type is ActivityType.MESSAGE:
            await self._on_message(dc)
        else:
            logger.debug(f"Ignoring {turn_context.activity.type.value} activity")

        await self.conversation_state.save_changes(turn_context)
        await self.user_state.save_changes(turn_context)

    async def _on_message(self, dc: DialogContext) -> None:
        turn_context = dc.context
        recognizer = self.services.luis_services[LUIS_CONFIGURATION]
        recognizer_result = await recognizer.recognize(turn_context.activity.text)
        top_intent, _ = recognizer_result.get_top_scoring_intent()

        if await self.interruptions.check(dc, top_intent):
            return

        dialog_result = await dc.continue_dialog()

        # The active dialog already answered this turn
        if turn_context.responded:
            return

        status = dialog_result.status
        if status is DialogTurnStatus.EMPTY:
            await self._route(dc, top_intent, recognizer_result)
        elif status is DialogTurnStatus.WAITING:
            pass
        elif status is DialogTurnStatus.COMPLETE:
            await dc.end_dialog()
        else:
            logger.warning(f"Unexpected dialog status {status.value}, cancelling all dialogs")
            await dc.cancel_all_dialogs()

    async def _route(self, dc: DialogContext, top_intent: Intent, recognizer_result: RecognizerResult) -> None:
        turn_context = dc.context
        logger.info(f"Routing intent {top_intent.value}")

        if top_intent is Intent.NONE:
            await self.dispatcher.dispatch(turn_context, ProviderKey.GENERIC)
        elif top_intent is Intent.EVENT_FAQ:
            await self.disambiguator.handle(recognizer_result, turn_context)
        else:
            # Greeting and Unknown have no knowledge base behind them
            await turn_context.send_activity(DIDNT_UNDERSTAND_MESSAGE)
