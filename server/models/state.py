"""Persisted user and conversation state models"""
from pydantic import BaseModel
from typing import Any, Optional


class IntentState(BaseModel):
    """Per-user memory of the last venue the user asked about"""
    event_place_name: Optional[str] = None


class DialogInstance(BaseModel):
    """One entry of the dialog stack"""
    id: str
    state: dict[str, Any] = {}


class DialogState(BaseModel):
    """Per-conversation dialog stack, top of stack first"""
    dialog_stack: list[DialogInstance] = []
