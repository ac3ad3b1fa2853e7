"""
Message analyzer tests
Scenarios, urgency ordering, context escalation and neutral fallbacks.
"""
import json
import math
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from agents.analyzer.main import analyze_message
from agents.lexicon.lexicon_loader import load_lexicon
from agents.lexicon.text_utils import match_keywords, normalize_text
from schemas.analysis import urgency_rank


def test_suicidal_text_is_critical():
    a = analyze_message("я хочу покончить с собой")
    assert a.urgency == "critical"


def test_progress_scenario():
    a = analyze_message("сегодня был отличный день, все получилось", {"mood": 5, "craving_level": 1})
    assert a.intent == "sharing_progress"
    assert a.emotion == "happy"
    assert a.urgency == "low"
    assert a.context.mood == 5


def test_craving_scenario():
    a = analyze_message("хочется выпить, не могу сдержаться")
    assert "alcohol" in a.triggers
    assert urgency_rank(a.urgency) >= urgency_rank("high")
    assert a.intent == "expressing_struggle"


@pytest.mark.parametrize("text", ["", "   ", None, 42, ["list"]])
def test_blank_or_non_string_is_neutral(text):
    a = analyze_message(text)
    assert a.emotion == "neutral"
    assert a.intensity == 0.0
    assert a.intent == "casual_chat"
    assert a.urgency == "low"
    assert a.triggers == []
    assert a.needs_support is False


def test_critical_dominates_lower_tiers():
    a = analyze_message("мне тяжело, стресс, сорвался и не хочу жить")
    assert a.urgency == "critical"


def test_deterministic():
    text = "Мне грустно, тяга сильная, начальник достал"
    ctx = {"mood": 2, "craving_level": 3, "stress_level": 4, "time_of_day": 22}
    assert analyze_message(text, ctx) == analyze_message(text, ctx)


def test_missing_hour_stays_unset():
    # no wall-clock default, so equal inputs give equal analyses at any time
    a = analyze_message("привет", {"mood": 2})
    assert a.context.time_of_day is None
    assert a.context.supplied("mood")
    assert not a.context.supplied("craving_level")


def test_overlapping_keywords_count_once():
    a = analyze_message("хочу покончить с собой")
    assert a.matched["urgency"] == ["покончить с собой"]
    assert match_keywords("покончить с собой", ["покончить", "покончить с собой"]) == ["покончить с собой"]


def test_intensity_and_support():
    a = analyze_message("мне грустно и тоскливо")
    assert a.emotion == "sad"
    assert a.intensity == 1.0
    assert a.needs_support is True


def test_single_keyword_intensity_half():
    a = analyze_message("немного грустно сегодня")
    assert a.emotion == "sad"
    assert a.intensity == 0.5
    assert a.needs_support is False


def test_distress_phrase_needs_support():
    a = analyze_message("помогите, я не справляюсь")
    assert a.needs_support is True
    assert a.intent == "seeking_support"


def test_confidence_scales_with_hits():
    a = analyze_message("что делать и как быть, подскажите")
    assert a.intent == "asking_advice"
    assert a.confidence == 1.0


def test_yo_folded():
    assert normalize_text("Всё  ПЛОХО") == "все плохо"
    assert analyze_message("Всё плохо").urgency == "medium"


class TestContextEscalation:
    def test_high_craving_raises_to_high(self):
        assert analyze_message("привет", {"craving_level": 5}).urgency == "high"

    def test_craving_four_raises_to_medium(self):
        assert analyze_message("привет", {"craving_level": 4}).urgency == "medium"

    def test_context_never_lowers(self):
        assert analyze_message("не хочу жить", {"craving_level": 1}).urgency == "critical"

    def test_malformed_context_values_fall_back(self):
        a = analyze_message("привет", {"mood": "плохо", "craving_level": 99})
        assert a.context.mood == 3
        assert a.context.craving_level == 5

    def test_non_finite_context_values_fall_back(self):
        a = analyze_message("привет", {"mood": math.inf, "craving_level": -math.inf, "stress_level": math.nan})
        assert a.context.mood == 3
        assert a.context.craving_level == 2
        assert a.context.stress_level == 3
        assert a.urgency == "low"

    def test_infinity_from_json_payload(self):
        ctx = json.loads('{"mood": Infinity, "craving_level": 5}')
        a = analyze_message("привет", ctx)
        assert a.context.mood == 3
        assert a.urgency == "high"

    def test_camel_case_keys(self):
        a = analyze_message("привет", {"cravingLevel": 5, "timeOfDay": 23})
        assert a.context.craving_level == 5
        assert a.context.time_of_day == 23
        assert a.urgency == "high"


def test_multi_label_triggers_and_themes():
    a = analyze_message("на работе стресс, а дома ссора с мужем")
    assert a.triggers == ["stress", "work", "family"]
    assert "work" in a.themes
    assert "relationships" in a.themes


def test_lexicon_override(tmp_path):
    path = tmp_path / "lexicon.json"
    path.write_text(json.dumps({"TRIGGERS": {"gambling": ["казино"]}}, ensure_ascii=False), encoding="utf-8")
    lexicon = load_lexicon(str(path))

    a = analyze_message("опять тянет в казино", lexicon=lexicon)
    assert "gambling" in a.triggers
    # defaults survive the merge
    assert "alcohol" in lexicon["TRIGGERS"]


def test_missing_lexicon_file_keeps_defaults(tmp_path):
    lexicon = load_lexicon(str(tmp_path / "absent.json"))
    assert set(lexicon["EMOTIONS"]) == {"sad", "angry", "anxious", "happy", "frustrated", "hopeful"}
