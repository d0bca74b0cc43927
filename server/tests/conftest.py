"""Shared test fixtures and configuration."""
import sys
import os

# Ensure the server package is importable
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Set environment variables BEFORE any application module is imported.
# These are dummy values used only in tests; no real connections are made.
os.environ.setdefault("STATE_STORAGE", "memory")
os.environ.setdefault("LUIS_APP_ID", "test-luis-app")
os.environ.setdefault("LUIS_API_KEY", "test-luis-key")
os.environ.setdefault("QNA_ENDPOINT_HOST", "https://test-qna.azurewebsites.net/qnamaker")
os.environ.setdefault("QNA_ENDPOINT_KEY", "test-qna-key")
os.environ.setdefault("GENERIC_QNA_KB_ID", "kb-generic")
os.environ.setdefault("WIMBLEDON_QNA_KB_ID", "kb-wimbledon")
os.environ.setdefault("TWICKENHAM_QNA_KB_ID", "kb-twickenham")

import pytest
from unittest.mock import AsyncMock, MagicMock

from core.bot_state import ConversationState, UserState
from core.services import LUIS_CONFIGURATION, BotServices
from core.turn_context import TurnContext
from database.storage import MemoryStorage
from models.intent import ProviderKey
from models.message import Activity, ActivityType


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def user_state(storage):
    return UserState(storage)


@pytest.fixture
def conversation_state(storage):
    return ConversationState(storage)


@pytest.fixture
def make_context():
    """Factory for a TurnContext on the 'test' channel."""
    def _make(text="hello", activity_type=ActivityType.MESSAGE, user_id="user-1", conversation_id="conv-1"):
        return TurnContext(Activity(
            type=activity_type,
            text=text,
            channel_id="test",
            conversation_id=conversation_id,
            user_id=user_id,
        ))
    return _make


@pytest.fixture
def qna_services():
    """One mock knowledge base per provider key, all returning no answers."""
    services = {}
    for key in ProviderKey:
        kb = MagicMock()
        kb.get_answers = AsyncMock(return_value=[])
        services[key] = kb
    return services


@pytest.fixture
def luis():
    recognizer = MagicMock()
    recognizer.recognize = AsyncMock()
    return recognizer


@pytest.fixture
def services(luis, qna_services):
    return BotServices({LUIS_CONFIGURATION: luis}, qna_services)
