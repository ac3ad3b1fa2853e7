"""
Text utilities for lexical matching.
"""
import re
import unicodedata
from typing import Dict, Iterable, List, Tuple


def normalize_text(s: str) -> str:
    """Normalize text for consistent matching."""
    if not s:
        return ""

    s = unicodedata.normalize("NFC", s)
    s = s.lower().replace("ё", "е")

    # Normalize whitespace (multiple spaces -> single space)
    s = " ".join(s.split())

    s = re.sub(r'[!]{2,}', '!', s)
    s = re.sub(r'[?]{2,}', '?', s)
    return s


def _occurrences(text: str, needle: str) -> Iterable[Tuple[int, int]]:
    start = text.find(needle)
    while start != -1:
        yield start, start + len(needle)
        start = text.find(needle, start + 1)


def match_keywords(text: str, keywords: Iterable[str]) -> List[str]:
    """
    Keywords found in `text`, longest first.

    A hit that lies wholly inside a span already claimed by a longer keyword
    of the same list does not count, so "покончить с собой" and "покончить"
    score once.
    """
    ordered = sorted({k for k in keywords if k}, key=lambda k: (-len(k), k))
    claimed: List[Tuple[int, int]] = []
    hits: List[str] = []
    for kw in ordered:
        fresh = False
        for s, e in _occurrences(text, kw):
            if any(cs <= s and e <= ce for cs, ce in claimed):
                continue
            claimed.append((s, e))
            fresh = True
        if fresh:
            hits.append(kw)
    return hits


def score_categories(text: str, table: Dict[str, List[str]]) -> Dict[str, List[str]]:
    """category -> matched keywords, for categories with at least one hit (table order)."""
    out: Dict[str, List[str]] = {}
    for category, keywords in table.items():
        hits = match_keywords(text, keywords)
        if hits:
            out[category] = hits
    return out


def clamp(x: float, lo: float = 0.0, hi: float = 1.0) -> float:
    return max(lo, min(hi, x))
