"""
Emotional pattern over the most recent turns of one user.
"""
from collections import Counter
from typing import Iterable, List, Optional, Tuple

from agents.lexicon.tables import EMOTION_MOOD
from backend.config import MemoryConfig
from schemas.emotional_pattern import EmotionalPattern
from schemas.turn import Turn


def turn_mood(turn: Turn) -> Optional[float]:
    """Self-reported mood if present, else an estimate from the analysed emotion."""
    mood = turn.effective_mood()
    if mood is not None:
        return mood
    if turn.analysis is not None:
        return EMOTION_MOOD.get(turn.analysis.emotion)
    return None


def _mean(xs: List[float]) -> float:
    return sum(xs) / len(xs)


def mood_trend(moods: List[float], delta: float = 0.5) -> str:
    """Compare later half against earlier half (split at n // 2)."""
    if len(moods) < 2:
        return "stable"
    mid = len(moods) // 2
    first, second = _mean(moods[:mid]), _mean(moods[mid:])
    if second > first + delta:
        return "improving"
    if second < first - delta:
        return "declining"
    return "stable"


def dominant_emotions(emotions: Iterable[str], k: int = 3) -> List[str]:
    """Top-k non-neutral emotions by count; ties keep first-seen order."""
    counts: Counter = Counter()
    first_seen = {}
    for i, e in enumerate(emotions):
        if not e or e == "neutral":
            continue
        counts[e] += 1
        first_seen.setdefault(e, i)
    ranked = sorted(counts, key=lambda e: (-counts[e], first_seen[e]))
    return ranked[:k]


def window(turns: Iterable[Turn], size: int) -> List[Tuple[Turn, float]]:
    """Last `size` user turns that have a usable mood."""
    rows = [(t, turn_mood(t)) for t in turns if t.originator == "user"]
    rows = [(t, m) for t, m in rows if m is not None]
    return rows[-size:] if size > 0 else []


def compute_pattern(turns: Iterable[Turn], cfg: MemoryConfig) -> EmotionalPattern:
    rows = window(turns, cfg.trend_window)
    if not rows:
        return EmotionalPattern()

    moods = [m for _, m in rows]
    emotions = [t.analysis.emotion for t, _ in rows if t.analysis is not None]
    average = min(5.0, max(1.0, _mean(moods)))

    return EmotionalPattern(
        average_mood=round(average, 3),
        trend=mood_trend(moods, cfg.trend_delta),
        dominant_emotions=dominant_emotions(emotions, cfg.dominant_k),
        window_size=len(rows),
    )
