"""QnA Maker client: ranked answers from a single knowledge base."""
import httpx
from typing import Any, Optional
import logging

from models.message import QnAAnswer

logger = logging.getLogger(__name__)


def _parse_answers(payload: dict[str, Any], score_threshold: float) -> list[QnAAnswer]:
    """Scale service scores (0-100) to 0..1, drop weak matches, best first."""
    answers = []
    for item in payload.get("answers") or []:
        score = float(item.get("score") or 0.0) / 100.0
        if score <= score_threshold:
            continue
        answers.append(QnAAnswer(
            answer=item.get("answer", ""),
            score=score,
            questions=item.get("questions") or [],
            source=item.get("source"),
            id=item.get("id"),
        ))
    answers.sort(key=lambda a: a.score, reverse=True)
    return answers


class QnAMakerClient:
    """Wrapper for the generateAnswer endpoint of one knowledge base."""

    def __init__(
        self,
        knowledge_base_id: str,
        endpoint_key: str,
        host: str,
        score_threshold: float = 0.3,
        top: int = 1,
        timeout_s: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        if not knowledge_base_id or not endpoint_key or not host:
            raise ValueError("QnA knowledge_base_id, endpoint_key and host are required")
        self.knowledge_base_id = knowledge_base_id
        self.host = host.rstrip("/")
        self.score_threshold = score_threshold
        self.top = top
        self.timeout_s = timeout_s
        self.client = client or httpx.AsyncClient(
            timeout=timeout_s,
            headers={"Authorization": f"EndpointKey {endpoint_key}"},
        )

    async def get_answers(self, question: Optional[str]) -> list[QnAAnswer]:
        """Return answers for a question, highest score first. May be empty."""
        if not question or not question.strip():
            return []

        try:
            response = await self.client.post(
                f"{self.host}/knowledgebases/{self.knowledge_base_id}/generateAnswer",
                json={"question": question, "top": self.top},
                timeout=self.timeout_s,
            )
            response.raise_for_status()
            answers = _parse_answers(response.json(), self.score_threshold)
        except httpx.TimeoutException:
            logger.error(f"QnA request timed out after {self.timeout_s}s")
            raise TimeoutError(f"QnA request timed out after {self.timeout_s}s")
        except httpx.TransportError as e:
            logger.error(f"QnA connection error: {e}")
            raise ConnectionError(f"QnA Maker unreachable: {e}") from e
        except Exception as e:
            logger.error(f"QnA query error: {e}", exc_info=True)
            raise

        logger.info(f"QnA {self.knowledge_base_id}: {len(answers)} answer(s)")
        return answers

    async def close(self):
        """Close HTTP client."""
        await self.client.aclose()
