"""
Coach engine tests
Full exchanges through the facade, persistence and telemetry.
"""
import json
import random
import sys
import threading
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from agents.memory.json_store import JsonFileStore
from backend.coach_engine import CoachEngine
from backend.metrics.engine_telemetry import EngineTelemetry, hash_user


def make_engine(**kwargs):
    kwargs.setdefault("rng", random.Random(3))
    return CoachEngine(**kwargs)


def test_crisis_exchange():
    engine = make_engine()
    result = engine.process_message("u1", "я хочу покончить с собой")

    assert result.analysis.urgency == "critical"
    assert any(s.category == "emergency" for s in result.response.suggestions)
    assert result.response.crisis_plan["status"] == "CRISIS"
    # user turn plus one engine turn per segment
    assert engine.memory.size("u1") == 1 + len(result.response.segments)


def test_progress_exchange():
    engine = make_engine()
    ctx = {"mood": 5, "craving_level": 1, "sober_days": 45, "completed_techniques": 12, "read_articles": 6}
    result = engine.process_message("u1", "сегодня был отличный день, все получилось", ctx)

    assert result.analysis.intent == "sharing_progress"
    assert result.risk.level == "low"
    assert result.response.has_category("celebration")
    assert engine.memory.history("u1")[0].mood == 5


def test_progress_scenario_with_mood_and_craving_only():
    engine = make_engine()
    result = engine.process_message("u1", "сегодня был отличный день, все получилось", {"mood": 5, "craving_level": 1})

    assert result.analysis.intent == "sharing_progress"
    assert result.risk.level == "low"
    assert result.response.has_category("celebration")


def test_context_without_mood_uses_emotion_estimate():
    engine = make_engine()
    for _ in range(4):
        engine.process_message("u1", "мне грустно и тоскливо", {"craving_level": 4})
    pattern = engine.get_emotional_pattern("u1")
    assert pattern.average_mood == 1.5
    assert pattern.dominant_emotions == ["sad"]
    assert engine.memory.history("u1")[0].mood is None


def test_malformed_context_never_raises():
    engine = make_engine()
    result = engine.process_message("u1", "привет", {"mood": float("inf"), "sober_days": float("inf"),
                                                   "read_article_ids": 5})
    assert result.analysis.context.mood == 3
    assert result.risk.level == "low"


def test_craving_exchange():
    engine = make_engine()
    result = engine.process_message("u1", "хочется выпить, не могу сдержаться")

    assert "alcohol" in result.analysis.triggers
    assert result.analysis.urgency in ("high", "critical")
    assert "urge_surfing" in [s.id for s in result.response.suggestions]
    assert len(result.response.suggestions) <= 3


def test_engine_turns_are_not_in_mood_window():
    engine = make_engine()
    for m in [2, 2, 2, 2, 2, 4, 4, 5, 5, 5]:
        engine.process_message("u1", "привет", {"mood": m})
    pattern = engine.get_emotional_pattern("u1")
    assert pattern.trend == "improving"
    assert pattern.window_size == 10


def test_suggestion_turn_carries_suggestions():
    engine = make_engine()
    result = engine.process_message("u1", "мне грустно и тоскливо")
    last = engine.memory.history("u1")[-1]
    assert last.category == "suggestion"
    assert [s.id for s in last.suggestions] == [s.id for s in result.response.suggestions]


def test_memory_persists_between_engines(tmp_path):
    path = tmp_path / "coach.json"
    first = make_engine(store=JsonFileStore(path))
    first.memory.set_tone("u1", "practical")
    first.process_message("u1", "привет", {"mood": 2})
    size = first.memory.size("u1")

    second = make_engine(store=JsonFileStore(path))
    assert second.memory.size("u1") == size
    assert second.memory.persona("u1").tone == "practical"


def test_telemetry_never_stores_text(tmp_path):
    telemetry = EngineTelemetry(tmp_path / "telemetry")
    engine = make_engine(telemetry=telemetry)
    engine.process_message("secret-user", "мне грустно, начальник достал")

    lines = telemetry.log_file.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1
    entry = json.loads(lines[0])
    assert entry["operation"] == "exchange"
    assert entry["user"] == hash_user("secret-user")
    assert "secret-user" not in lines[0]
    assert "начальник" not in lines[0]


def test_recommendations_through_engine(tmp_path):
    telemetry = EngineTelemetry(tmp_path)
    engine = make_engine(telemetry=telemetry)
    recs = engine.generate_recommendations({"mood": 4, "craving_level": 1, "sober_days": 7}, [], user_id="u1")
    assert [r.ref_id for r in recs] == ["week_milestone"]
    entry = json.loads(telemetry.log_file.read_text(encoding="utf-8").splitlines()[-1])
    assert entry["operation"] == "recommend"


def test_users_do_not_share_state():
    engine = make_engine()

    def chat(user_id, mood):
        for _ in range(10):
            engine.process_message(user_id, "привет", {"mood": mood})

    threads = [threading.Thread(target=chat, args=("low", 1)), threading.Thread(target=chat, args=("high", 5))]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert engine.get_emotional_pattern("low").average_mood == 1.0
    assert engine.get_emotional_pattern("high").average_mood == 5.0
