"""
Recommendation Schema

Catalog entries come from the content collaborator; recommendations only
point at them by id.
"""
from typing import List, Literal

from pydantic import BaseModel, Field

Priority = Literal["low", "medium", "high", "urgent"]
PRIORITY_ORDER = {"urgent": 4, "high": 3, "medium": 2, "low": 1}


class CatalogItem(BaseModel):
    id: str = Field(..., min_length=1)
    category: str = Field(default="general")
    difficulty: Literal["beginner", "intermediate", "advanced"] = Field(default="beginner")
    tags: List[str] = Field(default_factory=list)


class Recommendation(BaseModel):
    kind: Literal["article", "technique", "game", "insight"]
    ref_id: str = Field(..., description="Catalog id or built-in content id")
    reason: str
    priority: Priority = Field(default="medium")
    category: str = Field(default="general")


class PatternSummary(BaseModel):
    """Human-readable reading of a user's recovery context."""

    risk_level: Literal["low", "medium", "high"] = "low"
    trends: List[str] = Field(default_factory=list)
    strengths: List[str] = Field(default_factory=list)
    concerns: List[str] = Field(default_factory=list)
