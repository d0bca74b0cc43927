"""Answer Dispatcher: reply with the top answer from a named knowledge base."""
import logging

from core.turn_context import TurnContext
from integrations.qna.client import QnAMakerClient
from models.intent import ProviderKey

logger = logging.getLogger(__name__)


class AnswerDispatcher:
    """Queries one QnA binding and sends its best answer, with no confidence gate."""

    def __init__(self, qna_services: dict[ProviderKey, QnAMakerClient]):
        if qna_services is None:
            raise ValueError("qna_services is required")
        self.qna_services = qna_services

    async def dispatch(self, turn_context: TurnContext, provider_key: ProviderKey) -> None:
        text = turn_context.activity.text
        if not text:
            return

        answers = await self.qna_services[provider_key].get_answers(text)
        if answers:
            logger.info(f"Answering from {provider_key.value} (score={answers[0].score:.2f})")
            await turn_context.send_activity(answers[0].answer)
        else:
            logger.info(f"No answer in {provider_key.value}")
            await turn_context.send_activity(f"Couldn't find an answer in the {provider_key.value}.")
