"""External service bindings: the LUIS classifier and the QnA knowledge bases."""
from typing import Optional
import logging

from config.settings import Settings
from core.errors import ConfigurationError
from integrations.luis.client import LuisRecognizer
from integrations.qna.client import QnAMakerClient
from models.intent import ProviderKey, Venue

logger = logging.getLogger(__name__)

# Name of the LUIS binding the bot requires
LUIS_CONFIGURATION = "VenueFaqLuisApplication"


def _build_venue_providers() -> dict[Venue, ProviderKey]:
    providers = {
        Venue.WIMBLEDON: ProviderKey.WIMBLEDON,
        Venue.TWICKENHAM: ProviderKey.TWICKENHAM,
    }
    missing = [venue.value for venue in Venue if venue not in providers]
    if missing:
        raise ConfigurationError(f"No knowledge base mapped for venue(s): {', '.join(missing)}")
    return providers


VENUE_PROVIDERS: dict[Venue, ProviderKey] = _build_venue_providers()

# Every binding the bot checks for at construction
REQUIRED_PROVIDERS: tuple[ProviderKey, ...] = (ProviderKey.GENERIC, *VENUE_PROVIDERS.values())


class BotServices:
    """Holds the classifier and knowledge-base clients, keyed by binding name."""

    def __init__(
        self,
        luis_services: Optional[dict[str, LuisRecognizer]] = None,
        qna_services: Optional[dict[ProviderKey, QnAMakerClient]] = None,
    ):
        self.luis_services = dict(luis_services or {})
        self.qna_services = dict(qna_services or {})

    @classmethod
    def from_settings(cls, settings: Settings) -> "BotServices":
        """Build a binding for every service whose settings are complete."""
        luis_services: dict[str, LuisRecognizer] = {}
        if settings.LUIS_APP_ID and settings.LUIS_API_KEY:
            luis_services[LUIS_CONFIGURATION] = LuisRecognizer(
                app_id=settings.LUIS_APP_ID,
                api_key=settings.LUIS_API_KEY,
                endpoint=settings.LUIS_ENDPOINT,
                timeout_s=settings.LUIS_TIMEOUT,
            )
        else:
            logger.warning("LUIS settings incomplete, classifier binding not created")

        kb_ids = {
            ProviderKey.GENERIC: settings.GENERIC_QNA_KB_ID,
            ProviderKey.WIMBLEDON: settings.WIMBLEDON_QNA_KB_ID,
            ProviderKey.TWICKENHAM: settings.TWICKENHAM_QNA_KB_ID,
        }
        qna_services: dict[ProviderKey, QnAMakerClient] = {}
        for key, kb_id in kb_ids.items():
            if not (kb_id and settings.QNA_ENDPOINT_KEY and settings.QNA_ENDPOINT_HOST):
                logger.warning(f"QnA settings incomplete, '{key.value}' binding not created")
                continue
            qna_services[key] = QnAMakerClient(
                knowledge_base_id=kb_id,
                endpoint_key=settings.QNA_ENDPOINT_KEY,
                host=settings.QNA_ENDPOINT_HOST,
                score_threshold=settings.QNA_SCORE_THRESHOLD,
                top=settings.QNA_TOP,
                timeout_s=settings.QNA_TIMEOUT,
            )

        return cls(luis_services, qna_services)

    def validate(self) -> None:
        """Raise ConfigurationError unless the classifier and every knowledge base are bound."""
        if LUIS_CONFIGURATION not in self.luis_services:
            raise ConfigurationError(
                f"The bot configuration does not contain a LUIS service named '{LUIS_CONFIGURATION}'."
            )
        for key in REQUIRED_PROVIDERS:
            if key not in self.qna_services:
                raise ConfigurationError(
                    f"Invalid configuration. Please check your settings for a QnA service named '{key.value}'."
                )

    def status(self) -> dict:
        """Which bindings are configured (for the health endpoint)."""
        return {
            "luis": {LUIS_CONFIGURATION: LUIS_CONFIGURATION in self.luis_services},
            "qna": {key.value: key in self.qna_services for key in ProviderKey},
        }

    async def close(self) -> None:
        for recognizer in self.luis_services.values():
            await recognizer.close()
        for kb in self.qna_services.values():
            await kb.close()
