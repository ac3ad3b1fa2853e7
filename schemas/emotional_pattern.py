"""
Emotional Pattern Schema

Rolling summary derived from the most recent turns of one user.
"""
from typing import List, Literal

from pydantic import BaseModel, Field

Trend = Literal["improving", "stable", "declining"]


class EmotionalPattern(BaseModel):
    average_mood: float = Field(default=3.0, ge=1.0, le=5.0)
    trend: Trend = Field(default="stable")
    dominant_emotions: List[str] = Field(default_factory=list, description="Most frequent first")
    window_size: int = Field(default=0, ge=0, description="Turns the summary was computed from")
