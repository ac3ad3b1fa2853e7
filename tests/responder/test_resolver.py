"""
Response resolver tests
Primary paths, orthogonal segments, suggestion ranking and personalization.
"""
import random
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from agents.analyzer.main import analyze_message
from agents.memory.conversation_memory import ConversationMemory
from agents.responder import templates as T
from agents.responder.personalize import DIRECT_SUFFIX, apply_name, apply_tone
from agents.responder.resolver import ResponseResolver
from agents.responder.suggestions import rank_suggestions
from schemas.analysis import Analysis
from schemas.risk_profile import RiskProfile
from schemas.turn import Turn


def make_resolver(seed=1, memory=None):
    memory = memory or ConversationMemory()
    return ResponseResolver(memory, rng=random.Random(seed)), memory


def ids(response):
    return [s.id for s in response.suggestions]


class TestPrimaryPath:
    def test_critical_gets_emergency_segment_and_suggestions(self):
        resolver, _ = make_resolver()
        resp = resolver.generate_response("u1", analyze_message("я хочу покончить с собой"), RiskProfile())

        assert resp.segments[0].category == "emergency"
        assert resp.segments[0].text in T.EMERGENCY
        assert ids(resp) == ["crisis_hotline", "emergency_grounding", "crisis_breathing"]
        assert any(s.category == "emergency" for s in resp.suggestions)
        assert resp.crisis_plan["status"] == "CRISIS"
        assert "112" in resp.suggestions[0].description

    def test_high_gets_urgent_support(self):
        resolver, _ = make_resolver()
        resp = resolver.generate_response("u1", analyze_message("хочется выпить, не могу сдержаться"))

        assert resp.segments[0].text in [t.replace("!", ".") for t in T.URGENT_SUPPORT]
        assert ids(resp)[:2] == ["emergency_grounding", "support_contact"]
        assert "urge_surfing" in ids(resp)
        assert resp.crisis_plan["status"] == "WARNING"
        # trigger segment for alcohol, then the suggestion intro
        assert resp.segments[1].text == T.TRIGGER_MANAGEMENT["alcohol"]
        assert resp.segments[-1].category == "suggestion"

    def test_progress_with_positive_wording_celebrates(self):
        resolver, _ = make_resolver()
        text = "сегодня был отличный день, все получилось"
        resp = resolver.generate_response("u1", analyze_message(text, {"mood": 5, "craving_level": 1}), text=text)
        assert resp.has_category("celebration")
        assert resp.crisis_plan is None

    def test_progress_without_positive_wording_encourages(self):
        resolver, _ = make_resolver()
        a = Analysis(intent="sharing_progress", matched={"intent": ["горжусь"]})
        resp = resolver.generate_response("u1", a)
        assert not resp.has_category("celebration")
        assert resp.segments[0].text in T.ENCOURAGEMENT

    def test_advice_topic_from_text(self):
        resolver, _ = make_resolver()
        text = "что делать с работой, подскажите"
        resp = resolver.generate_response("u1", analyze_message(text), text=text)
        assert resp.segments[0].text.startswith(T.ADVICE_BY_TOPIC["work"])

    def test_advice_without_topic(self):
        resolver, _ = make_resolver()
        resp = resolver.generate_response("u1", Analysis(intent="asking_advice"))
        assert resp.segments[0].text == T.ADVICE_DEFAULT


class TestOrthogonalSegments:
    def test_needs_support_adds_supportive_segment(self):
        resolver, _ = make_resolver()
        a = Analysis(emotion="sad", intensity=1.0, intent="seeking_support", needs_support=True)
        resp = resolver.generate_response("u1", a)
        assert resp.segments[0].text in T.SUPPORT_BY_EMOTION["sad"]
        assert resp.segments[1].text in T.SUPPORTIVE

    def test_supportive_segment_survives_critical_path(self):
        resolver, _ = make_resolver()
        a = Analysis(urgency="critical", needs_support=True)
        resp = resolver.generate_response("u1", a)
        assert resp.segments[0].category == "emergency"
        assert resp.segments[1].text in T.SUPPORTIVE

    def test_unknown_trigger_gets_generic_segment(self):
        resolver, _ = make_resolver()
        resp = resolver.generate_response("u1", Analysis(triggers=["gambling"]))
        assert resp.segments[1].text == T.TRIGGER_GENERIC


class TestSuggestions:
    def test_cap_is_three(self):
        a = Analysis(emotion="anxious", intensity=1.0, intent="seeking_support", urgency="high",
                     triggers=["alcohol", "stress", "social", "work", "family"])
        assert len(rank_suggestions(a, RiskProfile(level="high"))) == 3

    def test_order_follows_rule_chain(self):
        a = Analysis(emotion="anxious", intensity=1.0, intent="asking_advice", triggers=["stress"])
        assert [s.id for s in rank_suggestions(a, limit=10)] == [
            "breathing_4_7_8", "stress_body_scan", "cbt_thought_record",
        ]

    def test_mild_anxiety_gets_box_breathing(self):
        a = Analysis(emotion="anxious", intensity=0.5)
        assert [s.id for s in rank_suggestions(a)] == ["box_breathing"]

    def test_risk_rule(self):
        assert [s.id for s in rank_suggestions(Analysis(), RiskProfile(level="high"))] == ["support_contact"]

    def test_fallback_when_nothing_matches(self):
        assert [s.id for s in rank_suggestions(Analysis())] == ["motivation_reminder", "daily_affirmation"]

    def test_no_duplicates(self):
        a = Analysis(intent="expressing_struggle", triggers=["alcohol", "drugs"], urgency="high")
        found = [s.id for s in rank_suggestions(a, RiskProfile(level="high"), limit=10)]
        assert len(found) == len(set(found))


class TestRobustness:
    def test_malformed_analysis_dict_is_neutral(self):
        resolver, _ = make_resolver()
        resp = resolver.generate_response("u1", {"emotion": "furious", "intensity": 7})
        assert ids(resp) == ["motivation_reminder", "daily_affirmation"]
        assert resp.crisis_plan is None

    def test_analysis_dict_is_accepted(self):
        resolver, _ = make_resolver()
        resp = resolver.generate_response("u1", {"urgency": "critical"}, {"level": "high"})
        assert resp.segments[0].category == "emergency"

    def test_seeded_rng_is_deterministic(self):
        a = analyze_message("мне грустно и тоскливо")
        first, _ = make_resolver(seed=5)
        second, _ = make_resolver(seed=5)
        assert first.generate_response("u1", a).texts() == second.generate_response("u1", a).texts()


class TestPersonalization:
    def test_tone_transforms(self):
        assert apply_tone("Вы должны попробовать!", "gentle") == "Вы можете попробовать."
        assert apply_tone("Нужно отдохнуть", "gentle") == "можете отдохнуть"
        assert apply_tone("Подышите.", "direct") == "Подышите. Сделайте это прямо сейчас."
        assert apply_tone("Подышите.", "inspirational") == "✨ Подышите. Вы способны на великие дела!"
        assert apply_tone("Подышите.", "practical") == "Подышите. Это займет всего несколько минут."

    def test_name_replaces_generic_address_only(self):
        assert apply_name("Привет, друг!", "Аня") == "Привет, Аня!"
        assert apply_name("Другой вариант, друг", "Аня") == "Другой вариант, Аня"
        assert apply_name("Привет, друг!", None) == "Привет, друг!"

    def test_persona_applied_but_not_to_emergency(self):
        memory = ConversationMemory()
        memory.set_tone("u1", "direct")
        memory.set_display_name("u1", "Аня")
        resolver, _ = make_resolver(memory=memory)

        casual = resolver.generate_response("u1", Analysis(intent="casual_chat"))
        assert casual.segments[0].text.endswith(DIRECT_SUFFIX)
        assert "друг" not in casual.segments[0].text

        crisis = resolver.generate_response("u1", Analysis(urgency="critical"))
        assert crisis.segments[0].text in T.EMERGENCY


class TestMemoryNotes:
    def test_improving_trend_note(self):
        memory = ConversationMemory()
        for m in [1, 1, 5, 5]:
            memory.record("u1", Turn(originator="user", text="...", mood=m))
        resolver, _ = make_resolver(memory=memory)
        resp = resolver.generate_response("u1", Analysis(intent="casual_chat"))
        assert "позитивную динамику" in resp.segments[0].text

    def test_recurring_theme_note(self):
        memory = ConversationMemory()
        for _ in range(2):
            memory.record("u1", Turn(originator="user", text="...", analysis=Analysis(themes=["work"])))
        resolver, _ = make_resolver(memory=memory)
        resp = resolver.generate_response("u1", Analysis(intent="casual_chat", themes=["work"]))
        assert 'тема "работа"' in resp.segments[0].text

    def test_no_notes_on_emergency(self):
        memory = ConversationMemory()
        for m in [1, 1, 5, 5]:
            memory.record("u1", Turn(originator="user", text="...", mood=m))
        resolver, _ = make_resolver(memory=memory)
        resp = resolver.generate_response("u1", Analysis(urgency="critical"))
        assert "динамику" not in resp.segments[0].text
