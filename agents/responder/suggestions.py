#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Suggestion catalog and ranking rules.

Ranking = rule evaluation order: path-mandated ids, emotion rules, trigger
rules, intent rules, risk rule, urgency rule, then the generic fallback.
Duplicates keep their first (highest) position.
"""
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from agents.responder.crisis import hotline_summary
from schemas.analysis import Analysis
from schemas.risk_profile import RiskProfile
from schemas.turn import Suggestion

SUGGESTIONS: Dict[str, Suggestion] = {s.id: s for s in [
    # crisis
    Suggestion(id="crisis_hotline", category="emergency", title="Телефон доверия",
               description="Круглосуточная бесплатная помощь. " + hotline_summary(),
               action="open_emergency_contacts"),
    Suggestion(id="emergency_grounding", category="technique", title="Техника заземления 5-4-3-2-1",
               description="Быстрая техника для снижения острого стресса",
               action="start_grounding_technique"),
    Suggestion(id="crisis_breathing", category="technique", title="Кризисное дыхание",
               description="Дыхательная техника для экстренных ситуаций",
               action="start_crisis_breathing"),
    Suggestion(id="support_contact", category="contact", title="Связаться с поддержкой",
               description="Позвонить другу, наставнику или группе поддержки",
               action="open_support_contacts"),
    # craving
    Suggestion(id="urge_surfing", category="technique", title="Серфинг по тяге",
               description="Наблюдайте за тягой как за волной: она поднимается и спадает",
               action="start_urge_surfing"),
    Suggestion(id="delay_15", category="distraction", title="Правило 15 минут",
               description="Отложите решение на 15 минут и займитесь чем-то другим",
               action="start_delay_timer"),
    # emotions
    Suggestion(id="breathing_4_7_8", category="technique", title="Дыхание 4-7-8",
               description="Вдох на 4, задержка на 7, выдох на 8 счетов",
               action="start_breathing_478"),
    Suggestion(id="box_breathing", category="technique", title="Квадратное дыхание",
               description="Вдох 4, задержка 4, выдох 4, задержка 4",
               action="start_box_breathing"),
    Suggestion(id="self_compassion", category="exercise", title="Практика самосострадания",
               description="Поговорите с собой так, как говорили бы с близким другом",
               action="open_exercise:self_compassion"),
    Suggestion(id="anger_cooldown", category="technique", title="Техника СТОП",
               description="Остановитесь, вдохните, оцените ситуацию, выберите действие",
               action="start_stop_technique"),
    Suggestion(id="walk_outside", category="distraction", title="Короткая прогулка",
               description="10 минут на свежем воздухе помогают сбросить напряжение",
               action="open_activity:walk"),
    Suggestion(id="gratitude_journal", category="exercise", title="Дневник благодарности",
               description="Запишите три вещи, за которые вы благодарны сегодня",
               action="open_journal:gratitude"),
    # triggers
    Suggestion(id="stress_body_scan", category="exercise", title="Сканирование тела",
               description="Пройдитесь вниманием по телу и отпустите напряжение",
               action="open_exercise:body_scan"),
    Suggestion(id="social_exit_plan", category="technique", title="План выхода из компании",
               description="Заранее решите, что скажете и как уйдете, если предложат выпить",
               action="open_technique:exit_plan"),
    Suggestion(id="emotion_diary", category="exercise", title="Дневник эмоций",
               description="Запишите, что вы чувствуете и что это вызвало",
               action="open_journal:emotions"),
    Suggestion(id="work_break", category="distraction", title="Перерыв от работы",
               description="Пять минут паузы без экрана и задач",
               action="open_activity:break"),
    Suggestion(id="family_boundaries", category="exercise", title="Здоровые границы в семье",
               description="Сформулируйте одну границу и как вы ее обозначите",
               action="open_exercise:boundaries"),
    # intents
    Suggestion(id="progress_journal", category="exercise", title="Дневник успехов",
               description="Запишите этот момент, чтобы вернуться к нему в трудный день",
               action="open_journal:progress"),
    Suggestion(id="cbt_thought_record", category="exercise", title="Дневник мыслей КПТ",
               description="Ситуация, мысли, эмоции и альтернативный взгляд",
               action="open_exercise:thought_record"),
    # fallback
    Suggestion(id="motivation_reminder", category="exercise", title="Напоминание о причинах",
               description="Вспомните, почему вы начали этот путь",
               action="open_motivation"),
    Suggestion(id="daily_affirmation", category="exercise", title="Аффирмация дня",
               description="Короткая фраза поддержки на сегодня",
               action="open_affirmation"),
]}

# (emotion, min intensity exclusive, suggestion ids)
EMOTION_RULES: List[Tuple[str, float, List[str]]] = [
    ("anxious", 0.6, ["breathing_4_7_8"]),
    ("anxious", 0.0, ["box_breathing"]),
    ("sad", 0.0, ["self_compassion"]),
    ("angry", 0.0, ["anger_cooldown"]),
    ("frustrated", 0.0, ["walk_outside"]),
    ("happy", 0.0, ["gratitude_journal"]),
    ("hopeful", 0.0, ["gratitude_journal"]),
]

TRIGGER_RULES: Dict[str, List[str]] = {
    "alcohol": ["urge_surfing"],
    "drugs": ["urge_surfing"],
    "stress": ["stress_body_scan"],
    "social": ["social_exit_plan"],
    "emotional": ["emotion_diary"],
    "work": ["work_break"],
    "family": ["family_boundaries"],
}

INTENT_RULES: Dict[str, List[str]] = {
    "seeking_support": ["support_contact"],
    "sharing_progress": ["progress_journal"],
    "asking_advice": ["cbt_thought_record"],
    "expressing_struggle": ["urge_surfing", "delay_15"],
    "casual_chat": [],
}

# mandatory ids of the primary path, always ranked first
PATH_SUGGESTIONS: Dict[str, List[str]] = {
    "critical": ["crisis_hotline", "emergency_grounding", "crisis_breathing"],
    "high": ["emergency_grounding", "support_contact"],
}

FALLBACK = ["motivation_reminder", "daily_affirmation"]


def _emotion_ids(a: Analysis) -> List[str]:
    ids: List[str] = []
    for emotion, min_intensity, rule_ids in EMOTION_RULES:
        if a.emotion == emotion and a.intensity > min_intensity:
            ids.extend(rule_ids)
            break
    return ids


def _trigger_ids(a: Analysis) -> List[str]:
    ids: List[str] = []
    for trig in a.triggers:
        ids.extend(TRIGGER_RULES.get(trig, []))
    return ids


def _intent_ids(a: Analysis) -> List[str]:
    return list(INTENT_RULES.get(a.intent, []))


def _risk_ids(risk: RiskProfile) -> List[str]:
    return ["support_contact"] if risk.level == "high" else []


def _urgency_ids(a: Analysis) -> List[str]:
    return ["crisis_hotline"] if a.urgency in ("high", "critical") else []


RULE_CHAIN: Sequence[Tuple[str, Callable]] = (
    ("emotion", _emotion_ids),
    ("trigger", _trigger_ids),
    ("intent", _intent_ids),
)


def rank_suggestions(
    analysis: Analysis,
    risk: Optional[RiskProfile] = None,
    limit: int = 3,
) -> List[Suggestion]:
    """Deduplicated suggestions in rule priority order, truncated to `limit`."""
    risk = risk or RiskProfile()
    ordered: List[str] = list(PATH_SUGGESTIONS.get(analysis.urgency, []))
    for _, rule in RULE_CHAIN:
        ordered.extend(rule(analysis))
    ordered.extend(_risk_ids(risk))
    ordered.extend(_urgency_ids(analysis))
    if not ordered:
        ordered.extend(FALLBACK)

    out: List[Suggestion] = []
    seen = set()
    for sid in ordered:
        if sid in seen or sid not in SUGGESTIONS:
            continue
        seen.add(sid)
        out.append(SUGGESTIONS[sid])
    return out[:max(0, limit)]
