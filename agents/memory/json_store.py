"""
Memory stores for conversation memory.

InMemoryStore keeps everything in-process (default). JsonFileStore persists
all users to one JSON file with atomic writes; it is the simplest load/save
hook and can be swapped for a database-backed store with the same methods.
"""
import json
import os
import threading
from pathlib import Path
from typing import Any, Dict, Optional

from backend.logging_config import get_logger

logger = get_logger(__name__)


class MemoryStore:
    """Load/save hooks keyed by user id. Values are JSON-safe dicts."""

    def load(self, user_id: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def save(self, user_id: str, data: Dict[str, Any]) -> None:
        raise NotImplementedError

    def delete(self, user_id: str) -> bool:
        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError


class InMemoryStore(MemoryStore):
    def __init__(self):
        self._data: Dict[str, Dict[str, Any]] = {}

    def load(self, user_id: str) -> Optional[Dict[str, Any]]:
        return self._data.get(user_id)

    def save(self, user_id: str, data: Dict[str, Any]) -> None:
        self._data[user_id] = data

    def delete(self, user_id: str) -> bool:
        return self._data.pop(user_id, None) is not None

    def count(self) -> int:
        return len(self._data)


class JsonFileStore(MemoryStore):
    """
    All users in one JSON document: {"users": {user_id: {...}}}.

    For production, replace with a proper database.
    """

    def __init__(self, storage_path: Optional[Path] = None):
        self.storage_path = Path(storage_path or "runtime/coach_memory.json")
        self.users: Dict[str, Dict[str, Any]] = {}
        self._io_lock = threading.Lock()
        self._load()

    def _load(self) -> None:
        """Load users from disk if the file exists."""
        if not self.storage_path.exists():
            return
        try:
            with open(self.storage_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            self.users = dict(data.get("users", {}))
        except (OSError, ValueError) as e:
            logger.warning("Could not load memory store %s: %s", self.storage_path, e)
            self.users = {}

    def _save(self) -> None:
        """Save users to disk (atomic write)."""
        self.storage_path.parent.mkdir(parents=True, exist_ok=True)

        # Atomic write: write to temp file, then replace
        temp_path = self.storage_path.with_suffix(self.storage_path.suffix + '.tmp')
        with open(temp_path, 'w', encoding='utf-8') as f:
            json.dump({"users": self.users}, f, indent=2, ensure_ascii=False)
        os.replace(temp_path, self.storage_path)

    def load(self, user_id: str) -> Optional[Dict[str, Any]]:
        return self.users.get(user_id)

    def save(self, user_id: str, data: Dict[str, Any]) -> None:
        with self._io_lock:
            self.users[user_id] = data
            self._save()

    def delete(self, user_id: str) -> bool:
        with self._io_lock:
            if user_id not in self.users:
                return False
            del self.users[user_id]
            self._save()
            return True

    def count(self) -> int:
        return len(self.users)
