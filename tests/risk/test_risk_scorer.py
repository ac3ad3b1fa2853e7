"""
Risk scorer tests
Additive weights, level bands, trend factors and configuration overrides.
"""
import math
import sys
from dataclasses import replace
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from agents.risk_scorer.main import level_for, score_risk, weights_from
from backend.config import RiskWeights, load_config
from schemas.emotional_pattern import EmotionalPattern


def test_stable_recovery_is_low():
    profile = score_risk({"mood": 5, "craving_level": 1, "sober_days": 45,
                          "completed_techniques": 12, "read_articles": 6})
    assert profile.level == "low"
    assert profile.score == -5
    assert profile.risk_factors == []
    assert len(profile.protective_factors) == 4


def test_early_recovery_with_craving_is_high():
    profile = score_risk({"mood": 2, "craving_level": 4, "sober_days": 5, "completed_techniques": 0})
    assert profile.level == "high"
    assert profile.score == 8
    assert len(profile.risk_factors) == 4
    assert len(profile.advice) == 4


def test_medium_band():
    profile = score_risk({"mood": 3, "craving_level": 3, "sober_days": 20, "completed_techniques": 5})
    assert profile.score == 3
    assert profile.level == "medium"


def test_trend_factors():
    ctx = {"mood": 3, "craving_level": 1, "sober_days": 20, "completed_techniques": 1}
    assert score_risk(ctx).level == "low"

    declining = score_risk(ctx, EmotionalPattern(average_mood=2.5, trend="declining"))
    assert declining.score == 2
    assert declining.level == "medium"

    improving = score_risk(ctx, EmotionalPattern(average_mood=3.5, trend="improving"))
    assert improving.score == 0
    assert "Настроение улучшается" in improving.protective_factors


def test_missing_context_uses_defaults():
    # mood 3, craving 2; unknown counters add nothing
    profile = score_risk(None)
    assert profile.score == 0
    assert profile.level == "low"
    assert profile.risk_factors == []


def test_progress_scenario_without_counters():
    profile = score_risk({"mood": 5, "craving_level": 1})
    assert profile.level == "low"
    assert profile.score == -1
    assert profile.risk_factors == []
    assert profile.protective_factors == ["Хорошее настроение"]


def test_zero_counters_still_count():
    profile = score_risk({"mood": 3, "craving_level": 1, "sober_days": 0, "completed_techniques": 0})
    assert profile.score == 3
    assert "Ранний период восстановления" in profile.risk_factors


@pytest.mark.parametrize("ctx", [
    {"sober_days": math.inf},
    {"completed_techniques": -math.inf, "read_articles": math.nan},
    {"mood": math.inf, "craving_level": math.nan},
    {"read_article_ids": 5},
    {"sober_days": "много", "read_article_ids": "a1"},
])
def test_malformed_counters_never_raise(ctx):
    profile = score_risk(ctx)
    assert profile.level == "low"
    assert profile.score == 0


def test_camel_case_context_keys():
    profile = score_risk({"mood": 3, "cravingLevel": 4, "soberDays": 5, "completedTechniques": 0})
    assert profile.score == 6
    assert profile.level == "high"


def test_engagement_lists_are_counted():
    profile = score_risk({"mood": 3, "craving_level": 1, "sober_days": 20,
                          "completed_techniques": ["a", "b", "c"], "read_articles": ["1", "2", "3", "4", "5"]})
    assert profile.score == -1
    assert "Образование о восстановлении" in profile.protective_factors


def test_level_bands():
    w = RiskWeights()
    assert level_for(-3, w) == "low"
    assert level_for(1, w) == "low"
    assert level_for(2, w) == "medium"
    assert level_for(3, w) == "medium"
    assert level_for(4, w) == "high"


def test_weight_override():
    ctx = {"mood": 3, "craving_level": 5, "sober_days": 20, "completed_techniques": 5}
    assert score_risk(ctx).level == "medium"
    assert score_risk(ctx, weights=replace(RiskWeights(), high_craving=0)).level == "low"
    assert weights_from({"weights": {"high_craving": 6, "bogus": 1}}).high_craving == 6


def test_env_weight_override(monkeypatch):
    monkeypatch.setenv("RISK_W_HIGH_CRAVING", "5")
    monkeypatch.setenv("RISK_W_HIGH_MIN", "6")
    cfg = load_config()
    assert cfg.risk.high_craving == 5
    assert cfg.risk.high_min == 6
    assert cfg.risk.low_mood == 2
