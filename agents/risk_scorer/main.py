#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
RiskScorerAgent - near-term relapse risk from self-reported context + mood trend.
Additive weights (backend.config.RiskWeights, RISK_W_* env overrides).

Input (stdin or --payload):
{
  "meta": {"weights": {"high_craving": 3}},
  "data": {
    "context": {"mood": 2, "craving_level": 4, "sober_days": 5,
                "completed_techniques": 1, "read_articles": 0},
    "pattern": {"average_mood": 2.4, "trend": "declining", "dominant_emotions": ["sad"]}
  }
}

Output:
{
  "ok": true,
  "version": "risk_scorer@1.0.0",
  "emits": {"risk": {"level": "high", "score": 9, "risk_factors": [...], "protective_factors": [...]}},
  "checks": {"CHK-RISK-01": {"pass": true, "reason": "…"}}
}
"""
import sys, json, time, argparse
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.config import RiskWeights, config
from backend.logging_config import setup_logging
from schemas.emotional_pattern import EmotionalPattern
from schemas.risk_profile import RiskContext, RiskProfile

AGENT_VERSION = "1.0.0"
AGENT_ID = "risk_scorer"


def level_for(score: int, w: RiskWeights) -> str:
    if score >= w.high_min:
        return "high"
    if score >= w.medium_min:
        return "medium"
    return "low"


def score_risk(
    context: Any,
    pattern: Optional[EmotionalPattern] = None,
    weights: Optional[RiskWeights] = None,
) -> RiskProfile:
    """
    Score relapse risk.

    Every condition that holds is recorded as a factor string, whatever its
    weight; the strings explain the level and are never re-scored. Counters
    missing from the context add nothing either way.
    """
    w = weights or config.risk
    ctx = RiskContext.coerce(context)

    score = 0
    risk_factors: List[str] = []
    protective: List[str] = []
    advice: List[str] = []

    # Risk factors
    if ctx.mood <= w.low_mood_max:
        score += w.low_mood
        risk_factors.append("Низкое настроение")
        advice.append("Практиковать техники улучшения настроения ежедневно")

    if ctx.craving_level >= w.high_craving_min:
        score += w.high_craving
        risk_factors.append("Повышенная тяга")
        advice.append("Составить детальный план действий при тяге")

    if ctx.sober_days is not None and ctx.sober_days <= w.early_recovery_days:
        score += w.early_recovery
        risk_factors.append("Ранний период восстановления")
        advice.append("Избегать триггерных ситуаций")

    if ctx.completed_techniques is not None and ctx.completed_techniques < w.low_engagement_below:
        score += w.low_engagement
        risk_factors.append("Низкое использование техник самопомощи")
        advice.append("Попробовать минимум одну технику в день")

    if pattern is not None and pattern.trend == "declining":
        score += w.declining_trend
        risk_factors.append("Настроение снижается в последних разговорах")
        advice.append("Отмечать настроение и обсуждать изменения")

    # Protective factors
    if ctx.sober_days is not None and ctx.sober_days >= w.long_streak_days:
        score += w.long_streak
        protective.append("Месяц+ стабильной трезвости")

    if ctx.mood >= w.good_mood_min:
        score += w.good_mood
        protective.append("Хорошее настроение")

    if ctx.completed_techniques is not None and ctx.completed_techniques >= w.high_engagement_min:
        score += w.high_engagement
        protective.append("Активное использование техник")

    if ctx.read_articles is not None and ctx.read_articles >= w.education_min:
        score += w.education
        protective.append("Образование о восстановлении")

    if pattern is not None and pattern.trend == "improving":
        score += w.improving_trend
        protective.append("Настроение улучшается")

    return RiskProfile(
        level=level_for(score, w),
        score=score,
        risk_factors=risk_factors,
        protective_factors=protective,
        advice=advice,
    )


# -------------------- CLI -------------------- #
def parse_args(argv: List[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="RiskScorerAgent – relapse risk level with explanations.")
    p.add_argument("--payload", type=str, default=None, help="Path to payload.json (else stdin).")
    return p.parse_args(argv)


def nb_stdin(default: Dict[str, Any]) -> Dict[str, Any]:
    try:
        if sys.stdin and not sys.stdin.isatty():
            raw = sys.stdin.read()
            if raw.strip():
                return json.loads(raw)
    except (OSError, ValueError):
        pass
    return default


def load_payload(args: argparse.Namespace) -> Dict[str, Any]:
    default_payload = {"meta": {}, "data": {}}
    if args.payload:
        with open(args.payload, "r", encoding="utf-8") as f:
            return json.load(f)
    return nb_stdin(default_payload)


def weights_from(meta: Dict[str, Any]) -> RiskWeights:
    overrides = meta.get("weights") or {}
    known = {k: int(v) for k, v in overrides.items() if k in RiskWeights.__dataclass_fields__}
    return replace(config.risk, **known)


def run(payload: Dict[str, Any]) -> Dict[str, Any]:
    meta = payload.get("meta") or {}
    data = payload.get("data") or {}

    pattern = None
    if isinstance(data.get("pattern"), dict):
        try:
            pattern = EmotionalPattern.model_validate(data["pattern"])
        except ValueError:
            pattern = None

    profile = score_risk(data.get("context"), pattern, weights_from(meta))
    checks = {
        "CHK-RISK-01": {
            "pass": True,
            "reason": f"score={profile.score} level={profile.level} factors={len(profile.risk_factors)}",
        },
        "CHK-RISK-HIGH": {"pass": profile.level != "high", "level": profile.level},
    }
    return {"ok": True, "emits": {"risk": profile.model_dump(mode="json")}, "checks": checks}


def main() -> None:
    setup_logging()
    t0 = time.time()
    try:
        args = parse_args(sys.argv[1:])
        payload = load_payload(args)
        res = run(payload)
        res["version"] = f"{AGENT_ID}@{AGENT_VERSION}"
        res["latency_ms"] = int((time.time() - t0) * 1000)
        sys.stdout.write(json.dumps(res, ensure_ascii=False))
        sys.stdout.flush()
    except Exception as e:
        sys.stderr.write(f"{AGENT_ID} error: {e}\n")
        sys.stdout.write(json.dumps({"ok": False, "error": str(e)}))
        sys.stdout.flush()
        sys.exit(1)


if __name__ == "__main__":
    main()
