"""
Conversation Memory

Per-user bounded turn log with a derived emotional pattern.
Users never share state; each user's log has a single writer at a time.
"""
import threading
from collections import Counter, OrderedDict, deque
from contextlib import contextmanager
from typing import Any, Deque, Dict, Iterator, List, Optional

from agents.memory.json_store import MemoryStore
from agents.memory.pattern import compute_pattern
from backend.config import MemoryConfig, config
from backend.logging_config import get_logger
from schemas.emotional_pattern import EmotionalPattern
from schemas.persona_profile import TONES, PersonaProfile
from schemas.turn import Turn

logger = get_logger(__name__)


def _require_user_id(user_id: Any) -> str:
    if not isinstance(user_id, str) or not user_id.strip():
        raise ValueError(f"user_id must be a non-empty string, got {user_id!r}")
    return user_id


class UserMemory:
    """Turns, persona and the current pattern of one user."""

    def __init__(self, user_id: str, cap: int, turns=(), persona: Optional[PersonaProfile] = None):
        self.user_id = user_id
        # fixed capacity: append past the cap drops the oldest turn in the same step
        self.turns: Deque[Turn] = deque(turns, maxlen=cap)
        self.persona = persona or PersonaProfile()
        self.pattern = EmotionalPattern()

    def to_storage(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "persona": self.persona.model_dump(mode="json"),
            "turns": [t.model_dump_for_storage() for t in self.turns],
        }

    @classmethod
    def from_storage(cls, data: Dict[str, Any], cap: int) -> "UserMemory":
        turns = []
        for raw in data.get("turns", []):
            try:
                turns.append(Turn.from_storage(raw))
            except ValueError as e:
                logger.warning("Skipping unreadable stored turn for %s: %s", data.get("user_id"), e)
        persona = PersonaProfile.model_validate(data.get("persona") or {})
        return cls(data["user_id"], cap, turns, persona)


class ConversationMemory:
    """
    Conversation memory - main API.

    Args:
        store: Optional load/save hooks. Without one, memory lives in-process only.
        cfg: MemoryConfig (history cap, trend window)
        default_tone: Tone for users without a stored persona
    """

    def __init__(
        self,
        store: Optional[MemoryStore] = None,
        cfg: Optional[MemoryConfig] = None,
        default_tone: Optional[str] = None,
    ):
        self.store = store
        self.cfg = cfg or config.memory
        tone = default_tone or config.responder.default_tone
        if tone not in TONES:
            logger.warning("Unknown default tone %r, using gentle", tone)
            tone = "gentle"
        self.default_tone = tone
        self._users: "OrderedDict[str, UserMemory]" = OrderedDict()
        self._locks: Dict[str, threading.RLock] = {}
        self._guard = threading.Lock()

    # ---------------- locking ---------------- #
    def _lock_for(self, user_id: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(user_id)
            if lock is None:
                lock = self._locks[user_id] = threading.RLock()
            return lock

    @contextmanager
    def lock(self, user_id: str) -> Iterator[None]:
        """Hold the user's writer lock across several calls (re-entrant)."""
        with self._lock_for(_require_user_id(user_id)):
            yield

    # ---------------- access ---------------- #
    def _get(self, user_id: str) -> UserMemory:
        with self._guard:
            mem = self._users.get(user_id)
            if mem is not None:
                self._users.move_to_end(user_id)
                return mem
        data = self.store.load(user_id) if self.store is not None else None
        if data:
            mem = UserMemory.from_storage(data, self.cfg.history_cap)
            mem.pattern = compute_pattern(mem.turns, self.cfg)
        else:
            mem = UserMemory(user_id, self.cfg.history_cap, persona=PersonaProfile(tone=self.default_tone))
        with self._guard:
            self._users[user_id] = mem
            # only a store-backed memory can reload a dropped user
            while self.store is not None and len(self._users) > max(1, self.cfg.cache_size):
                self._users.popitem(last=False)
        return mem

    def _persist(self, mem: UserMemory) -> None:
        if self.store is not None:
            self.store.save(mem.user_id, mem.to_storage())

    def record(self, user_id: str, turn: Turn | Dict[str, Any]) -> EmotionalPattern:
        """Append a turn (evicting the oldest past the cap) and refresh the pattern."""
        _require_user_id(user_id)
        if not isinstance(turn, Turn):
            turn = Turn.model_validate(turn)
        with self._lock_for(user_id):
            mem = self._get(user_id)
            mem.turns.append(turn)
            mem.pattern = compute_pattern(mem.turns, self.cfg)
            self._persist(mem)
            return mem.pattern

    def get_pattern(self, user_id: str) -> EmotionalPattern:
        _require_user_id(user_id)
        with self._lock_for(user_id):
            return self._get(user_id).pattern.model_copy()

    def history(self, user_id: str, n: Optional[int] = None) -> List[Turn]:
        """Turns oldest-first; the last `n` when given."""
        _require_user_id(user_id)
        with self._lock_for(user_id):
            turns = list(self._get(user_id).turns)
        return turns[-n:] if n else turns

    def size(self, user_id: str) -> int:
        _require_user_id(user_id)
        with self._lock_for(user_id):
            return len(self._get(user_id).turns)

    # ---------------- persona ---------------- #
    def persona(self, user_id: str) -> PersonaProfile:
        _require_user_id(user_id)
        with self._lock_for(user_id):
            return self._get(user_id).persona.model_copy()

    def set_tone(self, user_id: str, tone: str) -> None:
        _require_user_id(user_id)
        if tone not in TONES:
            raise ValueError(f"unknown tone {tone!r}, expected one of {TONES}")
        with self._lock_for(user_id):
            mem = self._get(user_id)
            mem.persona = mem.persona.model_copy(update={"tone": tone})
            self._persist(mem)

    def set_display_name(self, user_id: str, name: Optional[str]) -> None:
        _require_user_id(user_id)
        with self._lock_for(user_id):
            mem = self._get(user_id)
            mem.persona = PersonaProfile(tone=mem.persona.tone, display_name=(name or None))
            self._persist(mem)

    def reset(self, user_id: str) -> None:
        """Forget a user entirely."""
        _require_user_id(user_id)
        with self._lock_for(user_id):
            if self.store is not None:
                self.store.delete(user_id)
            with self._guard:
                self._users.pop(user_id, None)
                self._locks.pop(user_id, None)

    # ---------------- insights ---------------- #
    def insights(self, user_id: str) -> Dict[str, Any]:
        """Conversation count, mood summary and the most discussed themes."""
        _require_user_id(user_id)
        with self._lock_for(user_id):
            mem = self._get(user_id)
            turns = list(mem.turns)
            pattern = mem.pattern

        themes: Counter = Counter()
        for t in turns:
            if t.originator == "user" and t.analysis is not None:
                themes.update(t.analysis.themes)

        if pattern.trend == "improving":
            summary = "Ваше эмоциональное состояние улучшается. Продолжайте текущую стратегию!"
        elif pattern.trend == "declining":
            summary = "Эмоциональное состояние требует внимания. Рекомендую усилить практики самопомощи."
        else:
            summary = "Эмоциональное состояние стабильно. Поддерживайте текущий баланс."

        return {
            "conversation_count": sum(1 for t in turns if t.originator == "user"),
            "average_mood": pattern.average_mood,
            "mood_trend": pattern.trend,
            "dominant_emotions": list(pattern.dominant_emotions),
            "common_themes": [name for name, _ in themes.most_common(3)],
            "progress_summary": summary,
        }
