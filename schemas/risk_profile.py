"""
Risk Profile Schema

Input context for relapse-risk scoring and the explainable profile it yields.
Factor lists are for the person reading them; they never feed back into scoring.
"""
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from backend.logging_config import get_logger
from schemas.analysis import NumericContext, context_fields, finite_number

RiskLevel = Literal["low", "medium", "high"]

logger = get_logger(__name__)


def _count(v: Any) -> Optional[int]:
    # engagement counters may arrive as the id lists the app keeps
    if isinstance(v, (list, tuple, set)):
        return len(v)
    num = finite_number(v)
    if num is None:
        return None
    return max(0, int(num))


class RiskContext(NumericContext):
    """
    NumericContext plus recovery counters.

    A counter the caller did not send (or sent unreadable) stays None, and
    the factors that depend on it are skipped.
    """

    sober_days: Optional[int] = Field(default=None, ge=0)
    completed_techniques: Optional[int] = Field(default=None, ge=0)
    read_articles: Optional[int] = Field(default=None, ge=0)
    read_article_ids: List[str] = Field(default_factory=list, description="Catalog ids already read")

    @field_validator("sober_days", "completed_techniques", "read_articles", mode="before")
    @classmethod
    def _counter(cls, v: Any) -> Optional[int]:
        return _count(v)

    @field_validator("read_article_ids", mode="before")
    @classmethod
    def _ids(cls, v: Any) -> List[str]:
        if isinstance(v, (list, tuple, set)):
            return [str(x) for x in v if x is not None]
        return []

    @classmethod
    def coerce(cls, raw: Any) -> "RiskContext":
        """Always returns a context; unknown input becomes all defaults."""
        if isinstance(raw, cls):
            return raw
        if isinstance(raw, NumericContext):
            return cls(**raw.model_dump(exclude_unset=True))
        if isinstance(raw, dict):
            data = context_fields(raw, cls.model_fields)
            if "read_article_ids" not in data and isinstance(data.get("read_articles"), (list, tuple)):
                data["read_article_ids"] = data["read_articles"]
            try:
                return cls(**data)
            except ValueError as e:
                logger.warning("Unusable risk context, using defaults: %s", e)
                return cls()
        return cls()


class RiskProfile(BaseModel):
    level: RiskLevel = Field(default="low")
    score: int = Field(default=0, description="Raw additive score, may be negative")
    risk_factors: List[str] = Field(default_factory=list)
    protective_factors: List[str] = Field(default_factory=list)
    advice: List[str] = Field(default_factory=list)

    @classmethod
    def coerce(cls, raw: Optional[Any]) -> "RiskProfile":
        if isinstance(raw, cls):
            return raw
        if isinstance(raw, dict):
            try:
                return cls.model_validate(raw)
            except ValueError:
                return cls()
        return cls()
