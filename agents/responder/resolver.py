#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ResponseResolver - analysis + memory + risk -> ordered reply segments and
ranked suggestions.

Segment order:
  1. primary path (exclusive): emergency | urgent support | regular-by-intent
  2. supportive segment when the analysis says the person needs support
  3. trigger-management segment for the first trigger
  4. closing segment introducing the suggestions
"""
import random
from collections import Counter
from typing import Any, Dict, List, Optional

from agents.lexicon.lexicon_loader import load_lexicon
from agents.lexicon.text_utils import match_keywords, normalize_text
from agents.memory.conversation_memory import ConversationMemory
from agents.responder import templates as T
from agents.responder.crisis import build_crisis_plan
from agents.responder.personalize import personalize
from agents.responder.suggestions import rank_suggestions
from backend.config import ResponderConfig, config
from backend.logging_config import dlog, get_logger
from schemas.analysis import Analysis
from schemas.persona_profile import PersonaProfile
from schemas.response import EngineResponse, ResponseSegment
from schemas.risk_profile import RiskProfile
from schemas.turn import Suggestion

logger = get_logger(__name__)

RECENT_TURNS = 5

# themes/triggers standing in for advice topics when no text is at hand
_TOPIC_FALLBACK = {
    "work": "work",
    "relationships": "relationships",
    "family": "family",
}


def coerce_analysis(raw: Any) -> Analysis:
    """Analysis from a model or dict; anything malformed becomes neutral."""
    if isinstance(raw, Analysis):
        return raw
    if isinstance(raw, dict):
        try:
            return Analysis.model_validate(raw)
        except ValueError as e:
            logger.warning("Malformed analysis, answering as neutral: %s", e)
            return Analysis.neutral()
    logger.warning("Analysis of type %s is not usable, answering as neutral", type(raw).__name__)
    return Analysis.neutral()


class ResponseResolver:
    """
    Builds the engine reply for one analysed user message.

    Args:
        memory: ConversationMemory for persona, pattern and recent themes
        rng: Seedable random source for template choice
        cfg: ResponderConfig
        lexicon: Lexicon tables (progress wording, advice topics)
    """

    def __init__(
        self,
        memory: ConversationMemory,
        rng: Optional[random.Random] = None,
        cfg: Optional[ResponderConfig] = None,
        lexicon: Optional[Dict[str, Any]] = None,
    ):
        self.memory = memory
        self.cfg = cfg or config.responder
        self.rng = rng or random.Random(self.cfg.seed)
        self.lexicon = lexicon or load_lexicon(config.analyzer.lexicon_path)

    def _pick(self, pool: List[str]) -> str:
        return self.rng.choice(pool)

    # ---------------- primary path ---------------- #
    def _support_text(self, a: Analysis) -> str:
        return self._pick(T.SUPPORT_BY_EMOTION.get(a.emotion, T.SUPPORT_DEFAULT))

    def _has_positive_wording(self, a: Analysis, text: Optional[str]) -> bool:
        if text:
            return bool(match_keywords(normalize_text(text), self.lexicon["POSITIVE_PROGRESS"]))
        hits = a.matched.get("intent", []) + a.matched.get("emotion", [])
        positive = set(self.lexicon["POSITIVE_PROGRESS"])
        return any(h in positive for h in hits) or a.emotion in ("happy", "hopeful")

    def _advice_text(self, a: Analysis, text: Optional[str]) -> str:
        topic = None
        if text:
            t = normalize_text(text)
            for name, keywords in self.lexicon["ADVICE_TOPICS"]:
                if match_keywords(t, keywords):
                    topic = name
                    break
        else:
            for tag in a.themes + a.triggers:
                if tag in _TOPIC_FALLBACK:
                    topic = _TOPIC_FALLBACK[tag]
                    break
        if topic in T.ADVICE_BY_TOPIC:
            return T.ADVICE_BY_TOPIC[topic] + T.ADVICE_FOLLOWUP
        return T.ADVICE_DEFAULT

    def _regular(self, a: Analysis, text: Optional[str]) -> ResponseSegment:
        if a.intent == "seeking_support":
            return ResponseSegment(text=self._support_text(a))
        if a.intent == "sharing_progress":
            if self._has_positive_wording(a, text):
                return ResponseSegment(text=self._pick(T.CELEBRATION), category="celebration")
            return ResponseSegment(text=self._pick(T.ENCOURAGEMENT))
        if a.intent == "asking_advice":
            return ResponseSegment(text=self._advice_text(a, text))
        if a.intent == "expressing_struggle":
            return ResponseSegment(text=self._pick(T.STRUGGLE))
        if a.intent == "casual_chat":
            return ResponseSegment(text=self._pick(T.CASUAL))
        return ResponseSegment(text=self._pick(T.DEFAULT))

    def _memory_notes(self, user_id: str, a: Analysis) -> List[str]:
        notes: List[str] = []
        trend = self.memory.get_pattern(user_id).trend
        if trend in T.TREND_NOTES:
            notes.append(T.TREND_NOTES[trend])

        recent = [t for t in self.memory.history(user_id) if t.originator == "user"][-RECENT_TURNS:]
        counts: Counter = Counter()
        for turn in recent:
            if turn.analysis is not None:
                counts.update(set(turn.analysis.themes))
        for theme in a.themes:
            if counts[theme] >= 2:
                notes.append(T.THEME_NOTE.format(theme=T.THEME_LABELS.get(theme, theme)))
                break
        return notes

    def _primary(self, user_id: str, a: Analysis, text: Optional[str]) -> ResponseSegment:
        if a.urgency == "critical":
            return ResponseSegment(text=self._pick(T.EMERGENCY), category="emergency")
        if a.urgency == "high":
            return ResponseSegment(text=self._pick(T.URGENT_SUPPORT))
        seg = self._regular(a, text)
        notes = self._memory_notes(user_id, a)
        if notes:
            seg = ResponseSegment(text="\n\n".join([seg.text] + notes), category=seg.category)
        return seg

    # ---------------- orthogonal segments ---------------- #
    def _trigger_segment(self, a: Analysis) -> ResponseSegment:
        first = a.triggers[0]
        return ResponseSegment(text=T.TRIGGER_MANAGEMENT.get(first, T.TRIGGER_GENERIC))

    @staticmethod
    def _suggestion_segment(suggestions: List[Suggestion]) -> ResponseSegment:
        titles = ", ".join(s.title for s in suggestions)
        return ResponseSegment(text=T.SUGGESTION_INTRO.format(titles=titles), category="suggestion")

    def _decorate(self, segments: List[ResponseSegment], persona: PersonaProfile) -> List[ResponseSegment]:
        out = []
        for seg in segments:
            if seg.category == "emergency":
                out.append(seg)
            else:
                out.append(ResponseSegment(text=personalize(seg.text, persona), category=seg.category))
        return out

    # ---------------- API ---------------- #
    def generate_response(
        self,
        user_id: str,
        analysis: Any,
        risk_profile: Any = None,
        text: Optional[str] = None,
    ) -> EngineResponse:
        """
        Build the reply for one analysed message.

        Args:
            user_id: Owner of the conversation (ValueError when empty)
            analysis: Analysis or its dict form; malformed input is answered as neutral
            risk_profile: RiskProfile or dict; missing means low risk
            text: Original message, used for progress wording and advice topics

        Returns:
            EngineResponse with ordered segments, at most `max_suggestions`
            suggestions and a crisis plan for high/critical urgency.
        """
        a = coerce_analysis(analysis)
        risk = RiskProfile.coerce(risk_profile)
        persona = self.memory.persona(user_id)

        segments = [self._primary(user_id, a, text)]
        if a.needs_support:
            segments.append(ResponseSegment(text=self._pick(T.SUPPORTIVE)))
        if a.triggers:
            segments.append(self._trigger_segment(a))

        limit = self.cfg.max_suggestions
        if a.urgency == "critical":
            limit = max(limit, 1)
        suggestions = rank_suggestions(a, risk, limit)
        if suggestions:
            segments.append(self._suggestion_segment(suggestions))

        response = EngineResponse(
            segments=self._decorate(segments, persona),
            suggestions=suggestions,
            crisis_plan=build_crisis_plan(a.urgency) if a.urgency in ("high", "critical") else None,
        )
        dlog({"resolver": {"urgency": a.urgency, "intent": a.intent,
                           "segments": [s.category for s in response.segments],
                           "suggestions": [s.id for s in suggestions]}})
        return response
