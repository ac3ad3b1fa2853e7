"""
Coach engine facade.

Wires analyzer -> conversation memory -> risk scorer -> response resolver for
one exchange, and exposes each stage for callers that need only one of them.
"""
import random
import time
from typing import Any, Dict, Iterable, List, Optional

from agents.analyzer.main import analyze_message
from agents.memory.conversation_memory import ConversationMemory
from agents.memory.json_store import MemoryStore
from agents.recommend.main import generate_recommendations, summarize_patterns
from agents.responder.resolver import ResponseResolver
from agents.risk_scorer.main import score_risk
from backend.config import AppConfig, config as default_config
from backend.logging_config import get_logger
from backend.metrics.engine_telemetry import EngineTelemetry, get_telemetry
from schemas.analysis import Analysis
from schemas.emotional_pattern import EmotionalPattern
from schemas.recommendation import PatternSummary, Recommendation
from schemas.response import EngineResponse, ExchangeResult
from schemas.risk_profile import RiskContext, RiskProfile
from schemas.turn import Turn

logger = get_logger(__name__)


class CoachEngine:
    """
    One engine instance serves many users; per-user state lives in the memory.

    Args:
        store: MemoryStore hooks (in-process when omitted)
        rng: Seedable random source for template choice
        config: AppConfig, the module-level config when omitted
        telemetry: EngineTelemetry; taken from TELEMETRY_DIR when omitted
    """

    def __init__(
        self,
        store: Optional[MemoryStore] = None,
        rng: Optional[random.Random] = None,
        config: Optional[AppConfig] = None,
        telemetry: Optional[EngineTelemetry] = None,
    ):
        self.config = config or default_config
        self.memory = ConversationMemory(store, self.config.memory, self.config.responder.default_tone)
        self.resolver = ResponseResolver(self.memory, rng=rng, cfg=self.config.responder)
        self.telemetry = telemetry if telemetry is not None else get_telemetry()

    # ---------------- single stages ---------------- #
    def analyze_message(self, text: Any, context: Any = None) -> Analysis:
        return analyze_message(text, context, cfg=self.config.analyzer)

    def record_turn(self, user_id: str, turn: Turn | Dict[str, Any]) -> EmotionalPattern:
        return self.memory.record(user_id, turn)

    def get_emotional_pattern(self, user_id: str) -> EmotionalPattern:
        return self.memory.get_pattern(user_id)

    def score_risk(self, context: Any, pattern: Optional[EmotionalPattern] = None) -> RiskProfile:
        return score_risk(context, pattern, self.config.risk)

    def generate_response(
        self,
        user_id: str,
        analysis: Any,
        risk_profile: Any = None,
        text: Optional[str] = None,
    ) -> EngineResponse:
        return self.resolver.generate_response(user_id, analysis, risk_profile, text=text)

    def generate_recommendations(
        self,
        context: Any,
        catalog: Optional[Iterable[Any]] = None,
        user_id: Optional[str] = None,
    ) -> List[Recommendation]:
        t0 = time.time()
        pattern = self.memory.get_pattern(user_id) if user_id else None
        risk = self.score_risk(context, pattern)
        recs = generate_recommendations(context, catalog, risk)
        if self.telemetry is not None and user_id:
            self.telemetry.log_recommendations(user_id, risk.level, [r.ref_id for r in recs],
                                               (time.time() - t0) * 1000)
        return recs

    def summarize_patterns(self, context: Any) -> PatternSummary:
        return summarize_patterns(context, self.score_risk(context))

    def insights(self, user_id: str) -> Dict[str, Any]:
        return self.memory.insights(user_id)

    # ---------------- full exchange ---------------- #
    def process_message(self, user_id: str, text: Any, context: Any = None) -> ExchangeResult:
        """
        Analyze, remember, score and answer one user message.

        The user's memory lock is held for the whole exchange, so concurrent
        messages of one user are answered one after the other.
        """
        t0 = time.time()
        with self.memory.lock(user_id):
            analysis = self.analyze_message(text, context)
            mood = None
            if analysis.context is not None and analysis.context.supplied("mood"):
                mood = analysis.context.mood
            self.memory.record(user_id, Turn(
                originator="user",
                text=text if isinstance(text, str) else "",
                analysis=analysis,
                mood=mood,
            ))

            pattern = self.memory.get_pattern(user_id)
            risk = self.score_risk(RiskContext.coerce(context), pattern)
            response = self.resolver.generate_response(
                user_id, analysis, risk, text=text if isinstance(text, str) else None
            )

            for seg in response.segments:
                self.memory.record(user_id, Turn(
                    originator="engine",
                    text=seg.text,
                    category=seg.category,
                    suggestions=response.suggestions if seg.category == "suggestion" else [],
                ))
            history_size = self.memory.size(user_id)

        if analysis.urgency == "critical":
            logger.warning("Critical urgency for user exchange; crisis plan attached")

        if self.telemetry is not None:
            self.telemetry.log_exchange(
                user_id=user_id,
                urgency=analysis.urgency,
                intent=analysis.intent,
                emotion=analysis.emotion,
                risk_level=risk.level,
                suggestion_ids=[s.id for s in response.suggestions],
                segment_categories=[s.category for s in response.segments],
                history_size=history_size,
                latency_ms=(time.time() - t0) * 1000,
            )

        return ExchangeResult(analysis=analysis, pattern=pattern, risk=risk, response=response)
