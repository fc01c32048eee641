"""
Suggestion-related Pydantic models
"""

from typing import Optional
from datetime import datetime
from pydantic import BaseModel


class Suggestion(BaseModel):
    id: int
    name: str
    suggestion: str
    created_at: datetime
    updated_at: datetime


class SuggestionCreateRequest(BaseModel):
    name: Optional[str] = None
    suggestion: Optional[str] = None


class SuggestionUpdateRequest(BaseModel):
    """Partial update body: a field left out (or sent as null) is not modified"""
    name: Optional[str] = None
    suggestion: Optional[str] = None
