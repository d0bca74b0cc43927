"""Intent, entity and knowledge-base key models"""
from enum import Enum
from pydantic import BaseModel
from typing import Optional


class Intent(str, Enum):
    """Intents published by the LUIS application."""
    GREETING = "Greeting"
    CANCEL = "Cancel"
    HELP = "Help"
    NONE = "None"
    EVENT_FAQ = "EventFAQ"
    UNKNOWN = "Unknown"  # any label the bot does not know about

    @classmethod
    def parse(cls, label: Optional[str]) -> "Intent":
        for intent in cls:
            if intent is not cls.UNKNOWN and intent.value == label:
                return intent
        return cls.UNKNOWN


class Venue(str, Enum):
    """Venues with their own knowledge base."""
    WIMBLEDON = "wimbledon"
    TWICKENHAM = "twickenham"

    @classmethod
    def parse(cls, text: Optional[str]) -> Optional["Venue"]:
        if not text:
            return None
        normalized = text.strip().lower()
        for venue in cls:
            if venue.value == normalized:
                return venue
        return None


class ProviderKey(str, Enum):
    """Names of the QnA Maker bindings the bot requires."""
    GENERIC = "GenericQnABot"
    WIMBLEDON = "WimbledonQnABot"
    TWICKENHAM = "TwickenhamQnABot"


# Entity LUIS extracts for a venue mention
EVENT_PLACE_ENTITY = "Event_PlaceName"


class EntityMatch(BaseModel):
    """One candidate value of an extracted entity"""
    text: str
    type: Optional[str] = None
    start_index: Optional[int] = None
    end_index: Optional[int] = None
    score: Optional[float] = None


class RecognizerResult(BaseModel):
    """Classifier output for a single utterance"""
    text: str = ""
    intents: dict[str, float] = {}  # label -> score
    entities: dict[str, list[EntityMatch]] = {}  # entity name -> candidates

    model_config = {"frozen": True}

    def get_top_scoring_intent(self) -> tuple[Intent, float]:
        if not self.intents:
            return Intent.UNKNOWN, 0.0
        label, score = max(self.intents.items(), key=lambda item: item[1])
        return Intent.parse(label), score
