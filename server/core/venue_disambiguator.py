"""Venue Disambiguator: route event questions to the right venue's knowledge base."""
import logging

from core.answer_dispatcher import AnswerDispatcher
from core.bot_state import StatePropertyAccessor
from core.services import VENUE_PROVIDERS
from core.turn_context import TurnContext
from integrations.qna.client import QnAMakerClient
from models.intent import EVENT_PLACE_ENTITY, ProviderKey, RecognizerResult, Venue
from models.state import IntentState

logger = logging.getLogger(__name__)

# Generic answers must beat this score when no venue is known
PREVIOUS_INTENT_THRESHOLD = 0.6

ASK_FOR_VENUE = "Can you repeat the question with the venue you are interested in."


class VenueDisambiguator:
    """
    Works out which venue an event question is about.

    A venue entity in the current utterance wins and is remembered in the
    user's IntentState; otherwise the remembered venue is used. With no
    venue at all, the generic knowledge base answers only if it is confident.
    """

    def __init__(
        self,
        intent_state: StatePropertyAccessor,
        dispatcher: AnswerDispatcher,
        qna_services: dict[ProviderKey, QnAMakerClient],
    ):
        if intent_state is None or dispatcher is None or qna_services is None:
            raise ValueError("intent_state, dispatcher and qna_services are required")
        self.intent_state = intent_state
        self.dispatcher = dispatcher
        self.qna_services = qna_services

    async def handle(self, recognizer_result: RecognizerResult, turn_context: TurnContext) -> None:
        text = turn_context.activity.text
        if not text:
            return

        state: IntentState = await self.intent_state.get(turn_context, IntentState)

        matches = recognizer_result.entities.get(EVENT_PLACE_ENTITY)
        if matches:
            state.event_place_name = matches[0].text
            await self.intent_state.set(turn_context, state)
            logger.info(f"Venue extracted: {state.event_place_name}")

        venue = Venue.parse(state.event_place_name)
        if venue is not None:
            await self.dispatcher.dispatch(turn_context, VENUE_PROVIDERS[venue])
            return

        if state.event_place_name:
            logger.warning(f"Unrecognized venue '{state.event_place_name}', falling back to generic answers")

        answers = await self.qna_services[ProviderKey.GENERIC].get_answers(text)
        if answers and answers[0].score > PREVIOUS_INTENT_THRESHOLD:
            await turn_context.send_activity(answers[0].answer)
        else:
            logger.info("No venue known and no confident generic answer, asking for venue")
            await turn_context.send_activity(ASK_FOR_VENUE)
