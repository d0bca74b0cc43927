"""Tests for AnswerDispatcher."""
import pytest

from core.answer_dispatcher import AnswerDispatcher
from models.intent import ProviderKey
from models.message import QnAAnswer


@pytest.fixture
def dispatcher(qna_services):
    return AnswerDispatcher(qna_services)


class TestDispatch:
    @pytest.mark.asyncio
    async def test_sends_top_answer_verbatim(self, dispatcher, qna_services, make_context):
        qna_services[ProviderKey.WIMBLEDON].get_answers.return_value = [
            QnAAnswer(answer="Strawberries are £2.50", score=0.95),
            QnAAnswer(answer="Ask a steward", score=0.4),
        ]
        ctx = make_context("price of strawberries")

        await dispatcher.dispatch(ctx, ProviderKey.WIMBLEDON)

        assert ctx.sent_activities == ["Strawberries are £2.50"]
        qna_services[ProviderKey.WIMBLEDON].get_answers.assert_awaited_once_with("price of strawberries")

    @pytest.mark.asyncio
    async def test_low_score_still_sent(self, dispatcher, qna_services, make_context):
        """No confidence gate on direct dispatch."""
        qna_services[ProviderKey.GENERIC].get_answers.return_value = [
            QnAAnswer(answer="Maybe", score=0.31),
        ]
        ctx = make_context("?")

        await dispatcher.dispatch(ctx, ProviderKey.GENERIC)

        assert ctx.sent_activities == ["Maybe"]

    @pytest.mark.asyncio
    async def test_no_answers_names_the_provider(self, dispatcher, make_context):
        ctx = make_context("where is gate 3")

        await dispatcher.dispatch(ctx, ProviderKey.TWICKENHAM)

        assert ctx.sent_activities == ["Couldn't find an answer in the TwickenhamQnABot."]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", None])
    async def test_empty_text_is_noop(self, dispatcher, qna_services, make_context, text):
        ctx = make_context(text)

        await dispatcher.dispatch(ctx, ProviderKey.GENERIC)

        qna_services[ProviderKey.GENERIC].get_answers.assert_not_awaited()
        assert ctx.sent_activities == []

    def test_requires_services(self):
        with pytest.raises(ValueError):
            AnswerDispatcher(None)
