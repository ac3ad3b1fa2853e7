#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
RecommendAgent - catalog-based content recommendations for a recovery context.
Rules only; catalog content itself stays with the caller.

Input (stdin or --payload):
{
  "meta": {},
  "data": {
    "context": {"mood": 2, "craving_level": 3, "sober_days": 5,
                "completed_techniques": ["box_breathing"], "read_articles": ["1"]},
    "catalog": [{"id": "1", "category": "basics", "difficulty": "beginner", "tags": []}]
  }
}

Output:
{
  "ok": true,
  "version": "recommend@1.0.0",
  "emits": {"recommendations": [...], "patterns": {"risk_level": "...", "trends": [], ...}},
  "checks": {"CHK-REC-01": {"pass": true, "reason": "…"}}
}
"""
import sys, json, time, argparse
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from agents.risk_scorer.main import score_risk
from backend.logging_config import get_logger, setup_logging
from schemas.recommendation import PRIORITY_ORDER, CatalogItem, PatternSummary, Recommendation
from schemas.risk_profile import RiskContext, RiskProfile

AGENT_VERSION = "1.0.0"
AGENT_ID = "recommend"

MAX_RECOMMENDATIONS = 8
BEGINNER_ARTICLES = 3
BEGINNER_DAYS = 7

MILESTONES = {
    7: ("week_milestone", "Важная веха - ваш мозг уже начал восстанавливаться"),
    30: ("month_milestone", "Невероятное достижение - вы доказали свою силу"),
    90: ("quarter_milestone", "Три месяца - новые привычки уже стали частью жизни"),
    365: ("year_milestone", "Год трезвости - вы построили новую жизнь"),
}

logger = get_logger(__name__)


def coerce_catalog(raw: Optional[Iterable[Any]]) -> List[CatalogItem]:
    items: List[CatalogItem] = []
    for entry in raw or []:
        if isinstance(entry, CatalogItem):
            items.append(entry)
            continue
        try:
            items.append(CatalogItem.model_validate(entry))
        except ValueError as e:
            logger.warning("Skipping malformed catalog entry %r: %s", entry, e)
    return items


def _first_tagged(catalog: List[CatalogItem], tag: str) -> Optional[CatalogItem]:
    for item in catalog:
        if tag in item.tags:
            return item
    return None


def generate_recommendations(
    context: Any,
    catalog: Optional[Iterable[Any]] = None,
    risk: Optional[RiskProfile] = None,
) -> List[Recommendation]:
    """
    Rule-based recommendations, at most 8, sorted by priority.

    Args:
        context: RiskContext or dict (mood, craving_level, sober_days, read_articles ...)
        catalog: Available articles (CatalogItem or dicts)
        risk: Precomputed RiskProfile; scored from the context when omitted

    Returns:
        list[Recommendation]: urgent first; equal priorities keep rule order
    """
    ctx = RiskContext.coerce(context)
    items = coerce_catalog(catalog)
    risk = risk or score_risk(ctx)
    recs: List[Recommendation] = []

    if risk.level == "high":
        recs.append(Recommendation(kind="technique", ref_id="emergency_breathing",
                                   reason="Высокий уровень стресса и тяги - немедленное вмешательство",
                                   priority="urgent", category="Кризисная помощь"))
        recs.append(Recommendation(kind="game", ref_id="breath_bubble_pop",
                                   reason="Отвлечение + регуляция дыхания",
                                   priority="urgent", category="Отвлечение"))

    if ctx.sober_days is not None and ctx.sober_days <= BEGINNER_DAYS:
        read = set(ctx.read_article_ids)
        beginner = [a for a in items if a.difficulty == "beginner" and a.id not in read]
        for article in beginner[:BEGINNER_ARTICLES]:
            recs.append(Recommendation(kind="article", ref_id=article.id,
                                       reason="Важная информация для раннего периода восстановления",
                                       priority="high", category=article.category))

    if ctx.mood <= 2:
        article = _first_tagged(items, "self_compassion")
        if article is not None:
            recs.append(Recommendation(kind="article", ref_id=article.id,
                                       reason="Низкое настроение - важность доброты к себе",
                                       priority="high", category=article.category))
        recs.append(Recommendation(kind="technique", ref_id="loving_kindness",
                                   reason="Повышение настроения и самопринятия",
                                   priority="medium", category="Медитация"))

    if ctx.craving_level >= 3:
        article = _first_tagged(items, "triggers")
        if article is not None:
            recs.append(Recommendation(kind="article", ref_id=article.id,
                                       reason="Повышенная тяга - техники совладания",
                                       priority="high", category=article.category))
        recs.append(Recommendation(kind="game", ref_id="rapid_decision_challenge",
                                   reason="Тренировка принятия здоровых решений",
                                   priority="medium", category="Когнитивные игры"))

    if ctx.sober_days in MILESTONES:
        ref_id, reason = MILESTONES[ctx.sober_days]
        recs.append(Recommendation(kind="insight", ref_id=ref_id, reason=reason,
                                   priority="high", category="Достижения"))

    # sorted() is stable, so equal priorities keep rule order
    recs = sorted(recs, key=lambda r: -PRIORITY_ORDER[r.priority])
    return recs[:MAX_RECOMMENDATIONS]


def summarize_patterns(context: Any, risk: Optional[RiskProfile] = None) -> PatternSummary:
    ctx = RiskContext.coerce(context)
    risk = risk or score_risk(ctx)

    trends: List[str] = []
    sober = ctx.sober_days
    if sober is not None and sober > 30 and ctx.mood >= 4:
        trends.append("Стабильный прогресс в восстановлении")
    if (ctx.completed_techniques or 0) > 10:
        trends.append("Высокая вовлеченность в практики самопомощи")
    if (ctx.read_articles or 0) > 5:
        trends.append("Активное изучение материалов о восстановлении")

    strengths: List[str] = []
    if sober is not None and sober >= 7:
        strengths.append(f"{sober} дней последовательной трезвости")
    if ctx.craving_level <= 2:
        strengths.append("Низкий уровень тяги - отличный контроль")
    if ctx.mood >= 4:
        strengths.append("Стабильное позитивное настроение")

    concerns: List[str] = []
    if ctx.craving_level >= 4:
        concerns.append("Высокий уровень тяги требует внимания")
    if ctx.mood <= 2:
        concerns.append("Низкое настроение может увеличить риск срыва")
    if sober is not None and sober <= 3:
        concerns.append("Ранний период восстановления - критическое время")

    return PatternSummary(risk_level=risk.level, trends=trends, strengths=strengths, concerns=concerns)


# -------------------- CLI -------------------- #
def parse_args(argv: List[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="RecommendAgent – content recommendations for a recovery context.")
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


def run(payload: Dict[str, Any]) -> Dict[str, Any]:
    data = payload.get("data") or {}
    ctx = RiskContext.coerce(data.get("context"))
    risk = score_risk(ctx)
    recs = generate_recommendations(ctx, data.get("catalog"), risk)
    summary = summarize_patterns(ctx, risk)

    checks = {
        "CHK-REC-01": {"pass": len(recs) <= MAX_RECOMMENDATIONS, "reason": f"count={len(recs)}"},
        "CHK-REC-URGENT": {"pass": any(r.priority == "urgent" for r in recs) == (risk.level == "high"), "risk": risk.level},
    }
    return {
        "ok": True,
        "emits": {
            "recommendations": [r.model_dump(mode="json") for r in recs],
            "patterns": summary.model_dump(mode="json"),
        },
        "checks": checks,
    }


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
