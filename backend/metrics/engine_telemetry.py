#!/usr/bin/env python3
"""
Engine Telemetry
Logs per-exchange coach metrics to JSON-lines files (one file per day).

Never writes message text; user ids are stored as a short salted hash.
"""

import hashlib
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from backend.config import config
from backend.logging_config import get_logger

logger = get_logger(__name__)

_SALT = "coach-telemetry"


def hash_user(user_id: str) -> str:
    return hashlib.sha256(f"{_SALT}:{user_id}".encode("utf-8")).hexdigest()[:16]


class EngineTelemetry:
    """Telemetry logger for the coach engine."""

    def __init__(self, log_dir: Path):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

    @property
    def log_file(self) -> Path:
        return self.log_dir / f"engine_{datetime.now().strftime('%Y%m%d')}.jsonl"

    def log_exchange(
        self,
        user_id: str,
        urgency: str,
        intent: str,
        emotion: str,
        risk_level: str,
        suggestion_ids: List[str],
        segment_categories: List[str],
        history_size: int,
        latency_ms: float,
        errors: Optional[List[str]] = None,
    ) -> None:
        """Log one process_message exchange."""
        entry = {
            'ts': datetime.now().isoformat(),
            'operation': 'exchange',
            'user': hash_user(user_id),
            'analysis': {
                'urgency': urgency,
                'intent': intent,
                'emotion': emotion,
            },
            'risk_level': risk_level,
            'response': {
                'segments': segment_categories,
                'suggestions': suggestion_ids,
            },
            'memory': {
                'history_size': history_size,
            },
            'latency_ms': round(latency_ms, 2),
            'errors': errors or [],
        }
        self._write_entry(entry)

    def log_recommendations(self, user_id: str, risk_level: str, ref_ids: List[str], latency_ms: float) -> None:
        entry = {
            'ts': datetime.now().isoformat(),
            'operation': 'recommend',
            'user': hash_user(user_id),
            'risk_level': risk_level,
            'recommendations': ref_ids,
            'latency_ms': round(latency_ms, 2),
        }
        self._write_entry(entry)

    def _write_entry(self, entry: Dict[str, Any]) -> None:
        # telemetry must never break an exchange
        try:
            with open(self.log_file, 'a', encoding='utf-8') as f:
                f.write(json.dumps(entry, ensure_ascii=False) + '\n')
        except OSError as e:
            logger.warning("Failed to write telemetry entry: %s", e)


# Global instance
_telemetry_instance: Optional[EngineTelemetry] = None


def get_telemetry() -> Optional[EngineTelemetry]:
    """Global telemetry instance, or None when TELEMETRY_DIR is unset."""
    global _telemetry_instance
    if _telemetry_instance is None and config.telemetry.log_dir:
        _telemetry_instance = EngineTelemetry(Path(config.telemetry.log_dir))
    return _telemetry_instance
