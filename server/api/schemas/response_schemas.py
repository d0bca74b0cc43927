"""API response schemas"""
from pydantic import BaseModel
from typing import List, Optional


class TurnResponse(BaseModel):
    responses: List[str] = []
    error_code: Optional[str] = None
    error_retryable: Optional[bool] = None


class ServicesHealthResponse(BaseModel):
    status: str  # ok | degraded
    luis: dict[str, bool]
    qna: dict[str, bool]
