#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Tone transforms and name substitution for engine text.
"""
import re
from typing import Optional

from schemas.persona_profile import PersonaProfile

_GENERIC_ADDRESS = re.compile(r"(?<!\w)друг(?!\w)", re.IGNORECASE)
_SHOULD = re.compile(r"(?<!\w)(должны|нужно)(?!\w)", re.IGNORECASE)

DIRECT_SUFFIX = " Сделайте это прямо сейчас."
INSPIRATIONAL_PREFIX = "✨ "
INSPIRATIONAL_SUFFIX = " Вы способны на великие дела!"
PRACTICAL_SUFFIX = " Это займет всего несколько минут."


def apply_tone(text: str, tone: str) -> str:
    if tone == "gentle":
        return _SHOULD.sub("можете", text.replace("!", "."))
    if tone == "direct":
        return text + DIRECT_SUFFIX
    if tone == "inspirational":
        return INSPIRATIONAL_PREFIX + text + INSPIRATIONAL_SUFFIX
    if tone == "practical":
        return text + PRACTICAL_SUFFIX
    return text


def apply_name(text: str, display_name: Optional[str]) -> str:
    if not display_name:
        return text
    return _GENERIC_ADDRESS.sub(display_name, text)


def personalize(text: str, persona: PersonaProfile) -> str:
    """Name substitution, then the tone transform."""
    return apply_tone(apply_name(text, persona.display_name), persona.tone)
