"""Dialog engine: a stack of multi-turn dialogs persisted in conversation state."""
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Optional
import logging

from pydantic import BaseModel

from core.bot_state import StatePropertyAccessor
from core.turn_context import TurnContext
from models.state import DialogInstance, DialogState

logger = logging.getLogger(__name__)


class DialogTurnStatus(str, Enum):
    EMPTY = "empty"          # no dialog on the stack
    WAITING = "waiting"      # active dialog expects more input
    COMPLETE = "complete"    # dialog finished this turn
    CANCELLED = "cancelled"  # dialog stack was cancelled


class DialogTurnResult(BaseModel):
    status: DialogTurnStatus
    result: Any = None


class Dialog(ABC):
    """Base class for a multi-turn dialog step."""

    END_OF_TURN = DialogTurnResult(status=DialogTurnStatus.WAITING)

    def __init__(self, dialog_id: str):
        if not dialog_id:
            raise ValueError("dialog_id is required")
        self.id = dialog_id

    @abstractmethod
    async def begin_dialog(self, dc: "DialogContext", options: Any = None) -> DialogTurnResult:
        ...

    async def continue_dialog(self, dc: "DialogContext") -> DialogTurnResult:
        return await dc.end_dialog()

    async def resume_dialog(self, dc: "DialogContext", result: Any = None) -> DialogTurnResult:
        return await dc.end_dialog(result)

    async def reprompt_dialog(self, turn_context: TurnContext, instance: DialogInstance) -> None:
        """Ask the current question again. No-op by default."""

    async def end_dialog(self, turn_context: TurnContext, instance: DialogInstance, cancelled: bool) -> None:
        """Called when the dialog is popped off the stack."""


class DialogSet:
    """Registry of dialogs sharing one dialog-state property."""

    def __init__(self, dialog_state: StatePropertyAccessor):
        if dialog_state is None:
            raise ValueError("dialog_state is required")
        self._dialog_state = dialog_state
        self._dialogs: dict[str, Dialog] = {}

    def add(self, dialog: Dialog) -> "DialogSet":
        if dialog.id in self._dialogs:
            raise ValueError(f"Dialog '{dialog.id}' is already registered")
        self._dialogs[dialog.id] = dialog
        logger.info(f"Registered dialog: {dialog.id}")
        return self

    def find(self, dialog_id: str) -> Optional[Dialog]:
        return self._dialogs.get(dialog_id)

    async def create_context(self, turn_context: TurnContext) -> "DialogContext":
        state = await self._dialog_state.get(turn_context, DialogState)
        return DialogContext(self, turn_context, state)


class DialogContext:
    """Operations on the dialog stack for the current turn."""

    def __init__(self, dialogs: DialogSet, context: TurnContext, state: DialogState):
        self.dialogs = dialogs
        self.context = context
        self._state = state

    @property
    def stack(self) -> list[DialogInstance]:
        return self._state.dialog_stack

    @property
    def active_dialog(self) -> Optional[DialogInstance]:
        return self.stack[0] if self.stack else None

    async def begin_dialog(self, dialog_id: str, options: Any = None) -> DialogTurnResult:
        dialog = self.dialogs.find(dialog_id)
        if dialog is None:
            raise KeyError(f"Dialog '{dialog_id}' is not registered")

        self.stack.insert(0, DialogInstance(id=dialog_id))
        return await dialog.begin_dialog(self, options)

    async def continue_dialog(self) -> DialogTurnResult:
        if self.active_dialog is None:
            return DialogTurnResult(status=DialogTurnStatus.EMPTY)
        return await self._active().continue_dialog(self)

    async def end_dialog(self, result: Any = None) -> DialogTurnResult:
        await self._end_active_dialog(cancelled=False)

        if self.active_dialog is not None:
            return await self._active().resume_dialog(self, result)
        return DialogTurnResult(status=DialogTurnStatus.COMPLETE, result=result)

    async def cancel_all_dialogs(self) -> DialogTurnResult:
        if not self.stack:
            return DialogTurnResult(status=DialogTurnStatus.EMPTY)

        while self.stack:
            await self._end_active_dialog(cancelled=True)
        return DialogTurnResult(status=DialogTurnStatus.CANCELLED)

    async def reprompt_dialog(self) -> None:
        instance = self.active_dialog
        if instance is not None:
            await self._active().reprompt_dialog(self.context, instance)

    def _active(self) -> Dialog:
        instance = self.active_dialog
        dialog = self.dialogs.find(instance.id)
        if dialog is None:
            raise KeyError(f"Active dialog '{instance.id}' is not registered")
        return dialog

    async def _end_active_dialog(self, cancelled: bool) -> None:
        instance = self.active_dialog
        if instance is None:
            return
        dialog = self.dialogs.find(instance.id)
        if dialog is not None:
            await dialog.end_dialog(self.context, instance, cancelled)
        self.stack.pop(0)
