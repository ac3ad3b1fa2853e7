"""
Turn Schema

One exchange in a user's conversation log and the suggestions it may carry.
Turns are frozen once created; the conversation memory owns them.
"""
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from schemas.analysis import Analysis

SuggestionCategory = Literal["technique", "exercise", "contact", "distraction", "emergency"]
TurnCategory = Literal["plain", "suggestion", "emergency", "celebration"]
Originator = Literal["user", "engine"]


class Suggestion(BaseModel):
    """Recommended action. `action` is resolved by the UI layer, e.g. 'start_grounding_technique'."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    category: SuggestionCategory
    title: str
    description: str = ""
    action: str = Field(..., description="Opaque action reference for the caller")


class Turn(BaseModel):
    """Single conversation turn."""

    model_config = ConfigDict(frozen=True)

    originator: Originator = Field(..., description="Who produced the text")
    text: str = Field(default="", description="Message content")
    category: TurnCategory = Field(default="plain")
    timestamp: datetime = Field(default_factory=datetime.now)
    analysis: Optional[Analysis] = Field(default=None)
    suggestions: List[Suggestion] = Field(default_factory=list)
    mood: Optional[float] = Field(default=None, ge=1.0, le=5.0, description="Self-reported mood at this turn")

    def effective_mood(self) -> Optional[float]:
        """Mood used for trend math: explicit, then a mood the caller put in the context, else None."""
        if self.mood is not None:
            return float(self.mood)
        ctx = self.analysis.context if self.analysis is not None else None
        if ctx is not None and ctx.supplied("mood"):
            return float(ctx.mood)
        return None

    def model_dump_for_storage(self) -> Dict[str, Any]:
        """Serialize for storage (JSON-safe). Context defaults are left out so they never read back as reported."""
        data = self.model_dump(mode="json", exclude_none=True)
        if self.analysis is not None and self.analysis.context is not None:
            data["analysis"]["context"] = self.analysis.context.model_dump(mode="json", exclude_unset=True)
        return data

    @classmethod
    def from_storage(cls, data: Dict[str, Any]) -> "Turn":
        return cls.model_validate(data)
