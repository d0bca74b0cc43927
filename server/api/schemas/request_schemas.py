"""API request schemas"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from models.message import Activity, ActivityType


class ActivityRequest(BaseModel):
    """Inbound activity posted by a channel connector."""
    type: ActivityType = ActivityType.MESSAGE
    id: Optional[str] = None
    text: Optional[str] = Field(None, max_length=4096)
    channel_id: str = Field(..., min_length=1, max_length=128)
    conversation_id: str = Field(..., min_length=1, max_length=256)
    user_id: str = Field(..., min_length=1, max_length=256)
    timestamp: Optional[datetime] = None

    def to_activity(self) -> Activity:
        return Activity(**self.model_dump())
