"""Message data models"""
from enum import Enum
from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class ActivityType(str, Enum):
    MESSAGE = "message"
    CONVERSATION_UPDATE = "conversationUpdate"
    TYPING = "typing"
    EVENT = "event"
    END_OF_CONVERSATION = "endOfConversation"


class Activity(BaseModel):
    """Inbound activity from a channel"""
    type: ActivityType = ActivityType.MESSAGE
    id: Optional[str] = None
    text: Optional[str] = None
    channel_id: str
    conversation_id: str
    user_id: str
    timestamp: Optional[datetime] = None


class QnAAnswer(BaseModel):
    """Knowledge-base answer candidate"""
    answer: str
    score: float  # 0..1
    questions: list[str] = []
    source: Optional[str] = None
    id: Optional[int] = None
