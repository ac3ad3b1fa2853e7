"""
Recommendation tests
Priority order, catalog filtering, milestones and pattern summaries.
"""
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from agents.recommend.main import generate_recommendations, summarize_patterns
from schemas.risk_profile import RiskProfile

CATALOG = [
    {"id": "a1", "category": "Основы", "difficulty": "beginner"},
    {"id": "a2", "category": "Основы", "difficulty": "beginner"},
    {"id": "a3", "category": "Основы", "difficulty": "beginner"},
    {"id": "a4", "category": "Основы", "difficulty": "beginner"},
    {"id": "sc", "category": "Психология восстановления", "difficulty": "intermediate",
     "tags": ["self_compassion"]},
    {"id": "tr", "category": "Психология восстановления", "difficulty": "advanced", "tags": ["triggers"]},
]


def test_high_risk_early_recovery():
    ctx = {"mood": 1, "craving_level": 5, "sober_days": 3, "read_articles": ["a1"]}
    recs = generate_recommendations(ctx, CATALOG)

    assert len(recs) == 8
    assert [r.ref_id for r in recs] == [
        "emergency_breathing", "breath_bubble_pop",
        "a2", "a3", "a4", "sc", "tr",
        "loving_kindness",
    ]
    assert [r.priority for r in recs[:2]] == ["urgent", "urgent"]
    assert recs[0].kind == "technique"
    assert recs[1].kind == "game"


def test_milestone_insight():
    recs = generate_recommendations({"mood": 4, "craving_level": 1, "sober_days": 30}, CATALOG)
    assert [(r.kind, r.ref_id) for r in recs] == [("insight", "month_milestone")]


def test_year_milestone():
    recs = generate_recommendations({"mood": 4, "craving_level": 1, "sober_days": 365,
                                     "completed_techniques": 20}, [])
    assert [r.ref_id for r in recs] == ["year_milestone"]


def test_tagged_articles_skipped_when_catalog_lacks_them():
    recs = generate_recommendations({"mood": 2, "craving_level": 3, "sober_days": 40,
                                     "completed_techniques": 12}, [])
    assert [r.ref_id for r in recs] == ["loving_kindness", "rapid_decision_challenge"]


def test_given_risk_profile_is_used():
    recs = generate_recommendations({"mood": 3, "craving_level": 1, "sober_days": 40}, [],
                                    risk=RiskProfile(level="high"))
    assert [r.ref_id for r in recs] == ["emergency_breathing", "breath_bubble_pop"]


def test_malformed_catalog_entries_are_skipped():
    recs = generate_recommendations({"sober_days": 1}, [{"category": "no id"}, "junk", {"id": "ok"}])
    assert "ok" in [r.ref_id for r in recs]


def test_summarize_patterns():
    summary = summarize_patterns({"mood": 4, "craving_level": 1, "sober_days": 45,
                                  "completed_techniques": 12, "read_articles": 6})
    assert summary.risk_level == "low"
    assert "Стабильный прогресс в восстановлении" in summary.trends
    assert "45 дней последовательной трезвости" in summary.strengths
    assert summary.concerns == []


def test_summarize_patterns_concerns():
    summary = summarize_patterns({"mood": 1, "craving_level": 5, "sober_days": 2})
    assert summary.risk_level == "high"
    assert len(summary.concerns) == 3
