"""Tests for LuisRecognizer and LUIS prediction parsing."""
import httpx
import pytest

from integrations.luis.client import LuisRecognizer, _parse_prediction
from models.intent import Intent


PREDICTION = {
    "query": "Where do I park at Wimbledon?",
    "topScoringIntent": {"intent": "EventFAQ", "score": 0.92},
    "intents": [
        {"intent": "EventFAQ", "score": 0.92},
        {"intent": "None", "score": 0.05},
        {"intent": "Help", "score": 0.01},
    ],
    "entities": [
        {
            "entity": "wimbledon",
            "type": "Event_PlaceName",
            "startIndex": 19,
            "endIndex": 27,
            "score": 0.88,
        },
    ],
}


def _recognizer(handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return LuisRecognizer(
        app_id="app-123",
        api_key="key-abc",
        endpoint="https://westus.api.cognitive.microsoft.com/",
        client=client,
    )


class TestParsePrediction:
    def test_intents_and_top_intent(self):
        result = _parse_prediction(PREDICTION["query"], PREDICTION)
        assert result.intents["EventFAQ"] == pytest.approx(0.92)
        assert result.get_top_scoring_intent() == (Intent.EVENT_FAQ, pytest.approx(0.92))

    def test_entity_text_keeps_utterance_casing(self):
        result = _parse_prediction(PREDICTION["query"], PREDICTION)
        match = result.entities["Event_PlaceName"][0]
        assert match.text == "Wimbledon"
        assert match.start_index == 19
        assert match.score == pytest.approx(0.88)

    def test_entity_without_indices_uses_entity_field(self):
        payload = {"entities": [{"entity": "twickenham", "type": "Event_PlaceName"}]}
        result = _parse_prediction("twickenham", payload)
        assert result.entities["Event_PlaceName"][0].text == "twickenham"

    def test_top_intent_only_payload(self):
        payload = {"topScoringIntent": {"intent": "Cancel", "score": 0.7}}
        result = _parse_prediction("stop", payload)
        assert result.get_top_scoring_intent()[0] is Intent.CANCEL


class TestRecognize:
    @pytest.mark.asyncio
    async def test_request_shape(self):
        seen = {}

        def handler(request):
            seen["url"] = request.url
            return httpx.Response(200, json=PREDICTION)

        recognizer = _recognizer(handler)
        result = await recognizer.recognize(PREDICTION["query"])

        assert seen["url"].path == "/luis/v2.0/apps/app-123"
        assert seen["url"].params["q"] == PREDICTION["query"]
        assert seen["url"].params["subscription-key"] == "key-abc"
        assert seen["url"].params["verbose"] == "true"
        assert result.get_top_scoring_intent()[0] is Intent.EVENT_FAQ
        await recognizer.close()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   ", None])
    async def test_blank_text_not_sent(self, text):
        def handler(request):
            raise AssertionError("LUIS should not be called")

        recognizer = _recognizer(handler)
        result = await recognizer.recognize(text)

        assert result.intents == {}
        assert result.get_top_scoring_intent() == (Intent.UNKNOWN, 0.0)

    @pytest.mark.asyncio
    async def test_timeout_raises_timeout_error(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        recognizer = _recognizer(handler)
        with pytest.raises(TimeoutError):
            await recognizer.recognize("hello")

    @pytest.mark.asyncio
    async def test_connect_error_raises_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        recognizer = _recognizer(handler)
        with pytest.raises(ConnectionError):
            await recognizer.recognize("hello")

    @pytest.mark.asyncio
    async def test_http_error_propagates(self):
        recognizer = _recognizer(lambda request: httpx.Response(401, json={"error": "denied"}))
        with pytest.raises(httpx.HTTPStatusError):
            await recognizer.recognize("hello")

    def test_requires_credentials(self):
        with pytest.raises(ValueError):
            LuisRecognizer(app_id="", api_key="k", endpoint="https://x")
