"""Tests for QnAMakerClient and answer parsing."""
import json

import httpx
import pytest

from integrations.qna.client import QnAMakerClient, _parse_answers


def _client(handler, **kwargs):
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return QnAMakerClient(
        knowledge_base_id="kb-wimbledon",
        endpoint_key="secret",
        host="https://example.azurewebsites.net/qnamaker/",
        client=http,
        **kwargs,
    )


class TestParseAnswers:
    def test_scores_scaled_and_sorted(self):
        payload = {"answers": [
            {"answer": "B", "score": 45.0, "id": 2},
            {"answer": "A", "score": 91.5, "id": 1, "questions": ["q?"], "source": "faq.tsv"},
        ]}
        answers = _parse_answers(payload, score_threshold=0.3)
        assert [a.answer for a in answers] == ["A", "B"]
        assert answers[0].score == pytest.approx(0.915)
        assert answers[0].questions == ["q?"]

    def test_weak_matches_dropped(self):
        payload = {"answers": [
            {"answer": "No good match found in KB.", "score": 0, "id": -1},
            {"answer": "Borderline", "score": 30.0},
        ]}
        assert _parse_answers(payload, score_threshold=0.3) == []

    def test_missing_answers_key(self):
        assert _parse_answers({}, score_threshold=0.3) == []


class TestGetAnswers:
    @pytest.mark.asyncio
    async def test_request_shape(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"answers": [{"answer": "Gates open at 10", "score": 80}]})

        client = _client(handler, top=3)
        answers = await client.get_answers("when do gates open")

        assert seen["path"] == "/qnamaker/knowledgebases/kb-wimbledon/generateAnswer"
        assert seen["body"] == {"question": "when do gates open", "top": 3}
        assert answers[0].answer == "Gates open at 10"
        assert answers[0].score == pytest.approx(0.8)
        await client.close()

    def test_default_client_sends_endpoint_key(self):
        client = QnAMakerClient(
            knowledge_base_id="kb",
            endpoint_key="secret",
            host="https://example.azurewebsites.net/qnamaker",
        )
        assert client.client.headers["Authorization"] == "EndpointKey secret"

    @pytest.mark.asyncio
    async def test_blank_question_not_sent(self):
        def handler(request):
            raise AssertionError("QnA should not be called")

        assert await _client(handler).get_answers("  ") == []

    @pytest.mark.asyncio
    async def test_timeout_raises_timeout_error(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(TimeoutError):
            await _client(handler).get_answers("hours?")

    @pytest.mark.asyncio
    async def test_server_error_propagates(self):
        client = _client(lambda request: httpx.Response(503))
        with pytest.raises(httpx.HTTPStatusError):
            await client.get_answers("hours?")
