"""Application configuration settings."""
from pathlib import Path
from pydantic_settings import BaseSettings
from pydantic import model_validator
from typing import Literal, Optional

# Get the server directory path
SERVER_DIR = Path(__file__).parent.parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # LUIS (intent classifier)
    LUIS_APP_ID: Optional[str] = None
    LUIS_API_KEY: Optional[str] = None
    LUIS_ENDPOINT: str = "https://westus.api.cognitive.microsoft.com"
    LUIS_TIMEOUT: int = 10

    # QnA Maker (knowledge bases)
    QNA_ENDPOINT_HOST: Optional[str] = None
    QNA_ENDPOINT_KEY: Optional[str] = None
    GENERIC_QNA_KB_ID: Optional[str] = None
    WIMBLEDON_QNA_KB_ID: Optional[str] = None
    TWICKENHAM_QNA_KB_ID: Optional[str] = None
    QNA_SCORE_THRESHOLD: float = 0.3
    QNA_TOP: int = 1
    QNA_TIMEOUT: int = 10

    # State storage
    STATE_STORAGE: Literal["memory", "supabase"] = "memory"
    SUPABASE_URL: Optional[str] = None
    SUPABASE_KEY: Optional[str] = None
    STATE_TABLE: str = "bot_state"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3978
    LOG_LEVEL: str = "INFO"

    # Number of lock shards used to serialize turns per conversation
    TURN_LOCK_SHARDS: int = 16

    @model_validator(mode="after")
    def _validate_storage(self) -> "Settings":
        if self.STATE_STORAGE == "supabase" and not (self.SUPABASE_URL and self.SUPABASE_KEY):
            raise ValueError(
                "STATE_STORAGE=supabase requires SUPABASE_URL and SUPABASE_KEY. "
                "Set them in .env or use STATE_STORAGE=memory."
            )
        if not 0.0 <= self.QNA_SCORE_THRESHOLD <= 1.0:
            raise ValueError("QNA_SCORE_THRESHOLD must be between 0 and 1")
        return self

    class Config:
        env_file = str(SERVER_DIR / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


# Global settings instance
settings = Settings()
