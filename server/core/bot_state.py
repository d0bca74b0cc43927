"""Bot state: user and conversation scoped property bags over a Storage."""
from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, Optional, Type, TypeVar
import json
import logging

from pydantic import BaseModel

from core.turn_context import TurnContext
from database.storage import Storage

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _CachedState:
    """State document loaded for the current turn plus a fingerprint of what was read."""

    def __init__(self, document: dict[str, Any]):
        self.state: dict[str, Any] = dict(document)
        self.fingerprint = _fingerprint(document)

    def serialize(self) -> dict[str, Any]:
        return {
            name: value.model_dump(mode="json") if isinstance(value, BaseModel) else value
            for name, value in self.state.items()
        }


def _fingerprint(document: dict[str, Any]) -> str:
    return json.dumps(document, sort_keys=True, default=str)


class BotState(ABC):
    """
    Base class for user and conversation state.

    State is read from storage at most once per turn and cached in
    turn_context.turn_state; save_changes() writes it back only when the
    serialized document differs from what was read.
    """

    def __init__(self, storage: Storage, context_service_key: str):
        if storage is None:
            raise ValueError("storage is required")
        self._storage = storage
        self._context_service_key = context_service_key

    @abstractmethod
    def get_storage_key(self, turn_context: TurnContext) -> str:
        ...

    def create_property(self, name: str, model: Optional[Type[BaseModel]] = None) -> "StatePropertyAccessor":
        if not name:
            raise ValueError("property name is required")
        return StatePropertyAccessor(self, name, model)

    async def load(self, turn_context: TurnContext, force: bool = False) -> None:
        cached = turn_context.turn_state.get(self._context_service_key)
        if force or cached is None:
            key = self.get_storage_key(turn_context)
            items = await self._storage.read([key])
            turn_context.turn_state[self._context_service_key] = _CachedState(items.get(key, {}))

    async def save_changes(self, turn_context: TurnContext, force: bool = False) -> None:
        cached: Optional[_CachedState] = turn_context.turn_state.get(self._context_service_key)
        if cached is None:
            return

        document = cached.serialize()
        fingerprint = _fingerprint(document)
        if force or fingerprint != cached.fingerprint:
            key = self.get_storage_key(turn_context)
            await self._storage.write({key: document})
            cached.fingerprint = fingerprint
            logger.debug(f"Saved state {key}")

    async def clear_state(self, turn_context: TurnContext) -> None:
        """Reset the cached document; the next save_changes() persists the empty state."""
        cached = _CachedState({})
        cached.fingerprint = ""
        turn_context.turn_state[self._context_service_key] = cached

    async def delete(self, turn_context: TurnContext) -> None:
        turn_context.turn_state.pop(self._context_service_key, None)
        await self._storage.delete([self.get_storage_key(turn_context)])

    def _cached(self, turn_context: TurnContext) -> _CachedState:
        cached = turn_context.turn_state.get(self._context_service_key)
        if cached is None:
            raise RuntimeError(f"{type(self).__name__} has not been loaded for this turn")
        return cached

    def get_property_value(self, turn_context: TurnContext, name: str) -> Any:
        return self._cached(turn_context).state.get(name)

    def set_property_value(self, turn_context: TurnContext, name: str, value: Any) -> None:
        self._cached(turn_context).state[name] = value

    def delete_property_value(self, turn_context: TurnContext, name: str) -> None:
        self._cached(turn_context).state.pop(name, None)


class StatePropertyAccessor(Generic[T]):
    """Typed handle on one named property of a BotState."""

    def __init__(self, bot_state: BotState, name: str, model: Optional[Type[BaseModel]] = None):
        self._bot_state = bot_state
        self.name = name
        self._model = model

    async def get(
        self,
        turn_context: TurnContext,
        default_factory: Optional[Callable[[], T]] = None,
    ) -> Optional[T]:
        """
        Return the property value, creating it with default_factory when absent.

        Stored documents are re-hydrated into the accessor's pydantic model.
        """
        await self._bot_state.load(turn_context)
        value = self._bot_state.get_property_value(turn_context, self.name)

        if value is None:
            if default_factory is None:
                return None
            value = default_factory()
            self._bot_state.set_property_value(turn_context, self.name, value)
        elif self._model is not None and isinstance(value, dict):
            value = self._model.model_validate(value)
            self._bot_state.set_property_value(turn_context, self.name, value)

        return value

    async def set(self, turn_context: TurnContext, value: T) -> None:
        await self._bot_state.load(turn_context)
        self._bot_state.set_property_value(turn_context, self.name, value)

    async def delete(self, turn_context: TurnContext) -> None:
        await self._bot_state.load(turn_context)
        self._bot_state.delete_property_value(turn_context, self.name)


class UserState(BotState):
    """State scoped to a user on a channel."""

    def __init__(self, storage: Storage):
        super().__init__(storage, "UserState")

    def get_storage_key(self, turn_context: TurnContext) -> str:
        activity = turn_context.activity
        if not activity.channel_id:
            raise ValueError("activity.channel_id is required for user state")
        if not activity.user_id:
            raise ValueError("activity.user_id is required for user state")
        return f"{activity.channel_id}/users/{activity.user_id}"


class ConversationState(BotState):
    """State scoped to a conversation on a channel."""

    def __init__(self, storage: Storage):
        super().__init__(storage, "ConversationState")

    def get_storage_key(self, turn_context: TurnContext) -> str:
        activity = turn_context.activity
        if not activity.channel_id:
            raise ValueError("activity.channel_id is required for conversation state")
        if not activity.conversation_id:
            raise ValueError("activity.conversation_id is required for conversation state")
        return f"{activity.channel_id}/conversations/{activity.conversation_id}"
