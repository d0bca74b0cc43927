"""LUIS client: intent classification and entity extraction over the v2 prediction API."""
import httpx
from typing import Any, Optional
import logging

from models.intent import EntityMatch, RecognizerResult

logger = logging.getLogger(__name__)


def _parse_prediction(query: str, payload: dict[str, Any]) -> RecognizerResult:
    """
    Convert a LUIS v2 verbose prediction into a RecognizerResult.

    Entity text is taken from the utterance span when the indices
    are present, so casing survives; LUIS' own "entity" field is lowercased.
    """
    intents: dict[str, float] = {}
    for item in payload.get("intents") or []:
        label = item.get("intent")
        if label:
            intents[label] = float(item.get("score") or 0.0)

    top = payload.get("topScoringIntent")
    if top and top.get("intent") and top["intent"] not in intents:
        intents[top["intent"]] = float(top.get("score") or 0.0)

    entities: dict[str, list[EntityMatch]] = {}
    for item in payload.get("entities") or []:
        entity_type = item.get("type")
        if not entity_type:
            continue
        start = item.get("startIndex")
        end = item.get("endIndex")
        if start is not None and end is not None and 0 <= start <= end < len(query):
            text = query[start:end + 1]
        else:
            text = item.get("entity", "")
        entities.setdefault(entity_type, []).append(EntityMatch(
            text=text,
            type=entity_type,
            start_index=start,
            end_index=end,
            score=item.get("score"),
        ))

    return RecognizerResult(text=query, intents=intents, entities=entities)


class LuisRecognizer:
    """Wrapper for a published LUIS application."""

    def __init__(
        self,
        app_id: str,
        api_key: str,
        endpoint: str,
        timeout_s: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        if not app_id or not api_key or not endpoint:
            raise ValueError("LUIS app_id, api_key and endpoint are required")
        self.app_id = app_id
        self.api_key = api_key
        self.endpoint = endpoint.rstrip("/")
        self.timeout_s = timeout_s
        self.client = client or httpx.AsyncClient(timeout=timeout_s)

    async def recognize(self, text: Optional[str]) -> RecognizerResult:
        """Classify an utterance. Blank utterances are not sent to LUIS."""
        if not text or not text.strip():
            return RecognizerResult(text=text or "")

        try:
            response = await self.client.get(
                f"{self.endpoint}/luis/v2.0/apps/{self.app_id}",
                params={
                    "subscription-key": self.api_key,
                    "q": text,
                    "verbose": "true",
                    "timezoneOffset": "0",
                },
                timeout=self.timeout_s,
            )
            response.raise_for_status()
            result = _parse_prediction(text, response.json())
        except httpx.TimeoutException:
            logger.error(f"LUIS request timed out after {self.timeout_s}s")
            raise TimeoutError(f"LUIS request timed out after {self.timeout_s}s")
        except httpx.TransportError as e:
            logger.error(f"LUIS connection error: {e}")
            raise ConnectionError(f"LUIS unreachable: {e}") from e
        except Exception as e:
            logger.error(f"LUIS recognition error: {e}", exc_info=True)
            raise

        intent, score = result.get_top_scoring_intent()
        logger.info(f"LUIS top intent: {intent.value} ({score:.2f}), entities: {list(result.entities)}")
        return result

    async def close(self):
        """Close HTTP client."""
        await self.client.aclose()
