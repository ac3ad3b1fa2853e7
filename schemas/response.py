"""
Engine Response Schema
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from schemas.analysis import Analysis
from schemas.emotional_pattern import EmotionalPattern
from schemas.risk_profile import RiskProfile
from schemas.turn import Suggestion, TurnCategory


class ResponseSegment(BaseModel):
    text: str
    category: TurnCategory = Field(default="plain")


class EngineResponse(BaseModel):
    segments: List[ResponseSegment] = Field(default_factory=list)
    suggestions: List[Suggestion] = Field(default_factory=list)
    crisis_plan: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Escalation plan for high/critical urgency"
    )

    def texts(self) -> List[str]:
        return [s.text for s in self.segments]

    def has_category(self, category: str) -> bool:
        return any(s.category == category for s in self.segments)


class ExchangeResult(BaseModel):
    """Everything one process_message call derived, for callers and the CLI."""

    analysis: Analysis
    pattern: EmotionalPattern
    risk: RiskProfile
    response: EngineResponse
