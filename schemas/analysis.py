"""
Analysis Schema

Pydantic models for the numeric context a message arrives with and the
analysis the lexical analyzer derives from it.
"""
import math
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from backend.logging_config import get_logger

Emotion = Literal["sad", "angry", "anxious", "happy", "frustrated", "hopeful", "neutral"]
Intent = Literal["seeking_support", "sharing_progress", "asking_advice", "expressing_struggle", "casual_chat"]
Urgency = Literal["low", "medium", "high", "critical"]

URGENCY_ORDER: List[str] = ["low", "medium", "high", "critical"]
NEGATIVE_EMOTIONS = frozenset({"sad", "angry", "anxious", "frustrated"})

# app clients send camelCase keys
CONTEXT_ALIASES = {
    "cravingLevel": "craving_level",
    "stressLevel": "stress_level",
    "timeOfDay": "time_of_day",
    "soberDays": "sober_days",
    "completedTechniques": "completed_techniques",
    "readArticles": "read_articles",
    "readArticleIds": "read_article_ids",
}

logger = get_logger(__name__)


def urgency_rank(level: str) -> int:
    """Position of an urgency level; unknown levels rank as low."""
    try:
        return URGENCY_ORDER.index(level)
    except ValueError:
        return 0


def max_urgency(a: str, b: str) -> str:
    return a if urgency_rank(a) >= urgency_rank(b) else b


def finite_number(value: Any) -> Optional[float]:
    """Float value of a number or numeric string; None for anything else, NaN and infinities."""
    if value is None or isinstance(value, bool):
        return None
    try:
        num = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return num if math.isfinite(num) else None


def _scale(value: Any, default: Optional[int], lo: int, hi: int) -> Optional[int]:
    num = finite_number(value)
    if num is None:
        return default
    return max(lo, min(hi, int(round(num))))


def context_fields(raw: Dict[str, Any], fields: Any) -> Dict[str, Any]:
    """
    Known context keys (snake_case or camelCase) with readable values.

    Unreadable values are dropped here, so a field counts as supplied only
    when the caller sent something usable for it.
    """
    data: Dict[str, Any] = {}
    for key, value in raw.items():
        name = CONTEXT_ALIASES.get(key, key)
        if name not in fields:
            logger.debug("Ignoring unknown context key %r", key)
            continue
        if not isinstance(value, (list, tuple, set)) and finite_number(value) is None:
            logger.debug("Ignoring unreadable context value %s=%r", key, value)
            continue
        data[name] = value
    return data


class NumericContext(BaseModel):
    """
    Self-reported state sent along with a message. Bad values fall back to mid-scale.

    `model_fields_set` tells which values the caller actually supplied.
    """

    mood: int = Field(default=3, ge=1, le=5, description="Mood 1 (worst) .. 5 (best)")
    craving_level: int = Field(default=2, ge=1, le=5, description="Craving 1 .. 5")
    stress_level: int = Field(default=3, ge=1, le=5, description="Stress 1 .. 5")
    time_of_day: Optional[int] = Field(default=None, ge=0, le=23, description="Local hour of the message, if known")

    @field_validator("mood", mode="before")
    @classmethod
    def _mood(cls, v: Any) -> int:
        return _scale(v, 3, 1, 5)

    @field_validator("craving_level", mode="before")
    @classmethod
    def _craving(cls, v: Any) -> int:
        return _scale(v, 2, 1, 5)

    @field_validator("stress_level", mode="before")
    @classmethod
    def _stress(cls, v: Any) -> int:
        return _scale(v, 3, 1, 5)

    @field_validator("time_of_day", mode="before")
    @classmethod
    def _hour(cls, v: Any) -> Optional[int]:
        return _scale(v, None, 0, 23)

    def supplied(self, name: str) -> bool:
        return name in self.model_fields_set

    @classmethod
    def coerce(cls, raw: Any) -> Optional["NumericContext"]:
        """Build from a model, a dict or None. Anything else is treated as absent."""
        if raw is None or isinstance(raw, cls):
            return raw
        if isinstance(raw, dict):
            try:
                return cls(**context_fields(raw, cls.model_fields))
            except ValueError as e:
                logger.warning("Unusable message context, ignoring it: %s", e)
                return None
        return None


class Analysis(BaseModel):
    """Lexical reading of a single message."""

    emotion: Emotion = Field(default="neutral")
    intensity: float = Field(default=0.0, ge=0.0, le=1.0)
    intent: Intent = Field(default="casual_chat")
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    urgency: Urgency = Field(default="low")
    triggers: List[str] = Field(default_factory=list, description="Trigger categories in table order")
    themes: List[str] = Field(default_factory=list, description="Topical tags in table order")
    needs_support: bool = Field(default=False)

    matched: Dict[str, List[str]] = Field(
        default_factory=dict,
        description="Channel -> keywords that fired (explainability only)"
    )
    context: Optional[NumericContext] = Field(default=None)

    @classmethod
    def neutral(cls, context: Optional[NumericContext] = None) -> "Analysis":
        return cls(context=context)
