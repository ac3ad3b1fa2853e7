#!/usr/bin/env python3
"""Load coach lexicon tables with optional JSON override + caching."""
import copy
import functools
import json
from pathlib import Path
from typing import Any, Dict

from agents.lexicon.tables import default_tables

_LIST_TABLES = ("DISTRESS_PHRASES", "POSITIVE_PROGRESS")
_DICT_TABLES = ("EMOTIONS", "INTENTS", "TRIGGERS", "THEMES")
_PAIR_TABLES = ("URGENCY_TIERS", "ADVICE_TOPICS")


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(base)
    for key in _DICT_TABLES:
        if isinstance(override.get(key), dict):
            # category-level replace; categories keep the default order first
            merged = dict(out[key])
            for cat, words in override[key].items():
                merged[cat] = [str(w).lower() for w in words]
            out[key] = merged
    for key in _LIST_TABLES:
        if isinstance(override.get(key), list):
            out[key] = [str(w).lower() for w in override[key]]
    for key in _PAIR_TABLES:
        if isinstance(override.get(key), (list, dict)):
            pairs = override[key].items() if isinstance(override[key], dict) else override[key]
            out[key] = [(str(name), [str(w).lower() for w in words]) for name, words in pairs]
    return out


@functools.lru_cache(maxsize=4)
def load_lexicon(path: str | Path | None = None) -> Dict[str, Any]:
    """
    Load lexicon tables, merging a JSON override over the built-in defaults.

    Args:
        path: Optional path to an override file. Missing or unreadable files
              leave the defaults untouched.

    Returns:
        dict: EMOTIONS, INTENTS, URGENCY_TIERS, TRIGGERS, THEMES, ...
    """
    base = default_tables()
    if path is None:
        return base

    p = Path(path)
    if not p.exists():
        return base

    try:
        override = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return base
    if not isinstance(override, dict):
        return base
    return _merge(base, override)
