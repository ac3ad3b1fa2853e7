#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Lexicon tables for the recovery coach (ru).

Keywords are lower-case stems matched as substrings of the normalized text
(ё already folded to е). Dict order is the tie-break priority for
single-label channels.
"""
from typing import Dict, List, Tuple

# -------------------- Emotions (single-label) -------------------- #
EMOTIONS: Dict[str, List[str]] = {
    "sad": ["грустно", "грусть", "печально", "депресси", "уныло", "тоскливо", "тоска", "одиноко"],
    "angry": ["злой", "злюсь", "бесит", "раздражает", "ярость", "злость", "в бешенстве"],
    "anxious": ["тревог", "беспокойств", "страшно", "страх", "нервничаю", "переживаю", "паник", "волнуюсь"],
    "happy": ["хорошо", "радост", "счастлив", "отличн", "весело", "здорово"],
    "frustrated": ["достал", "надоело", "бесит", "фрустрац", "ничего не получается", "опять не вышло"],
    "hopeful": ["надеюсь", "верю", "получится", "оптимизм", "надежд"],
}

# -------------------- Intents (single-label) -------------------- #
INTENTS: Dict[str, List[str]] = {
    "seeking_support": ["помогите", "трудно", "не могу", "плохо", "грустно", "тяжело", "поддержк"],
    "sharing_progress": ["удалось", "получилось", "лучше", "прогресс", "достижени", "горжусь"],
    "asking_advice": ["что делать", "как быть", "посоветуйте", "посоветуй", "как справиться", "что думаете", "подскажите"],
    "expressing_struggle": ["хочется", "тяга", "срыв", "не выдержу", "соблазн", "сдержаться"],
    "casual_chat": ["привет", "как дела", "что нового", "поговорим", "добрый день", "доброе утро"],
}

# -------------------- Urgency tiers (checked critical -> high -> medium) -------------------- #
URGENCY_TIERS: List[Tuple[str, List[str]]] = [
    ("critical", [
        "покончить с собой",
        "покончить со всем",
        "покончить",
        "суицид",
        "не хочу жить",
        "жить не хочу",
        "убить себя",
        "свести счеты с жизнью",
        "лучше бы меня не было",
        "конец всему",
    ]),
    ("high", [
        "хочется выпить",
        "хочу выпить",
        "сорвался",
        "сорвалась",
        "срыв",
        "не выдержу",
        "купил бутылк",
        "купила бутылк",
        "выпил",
        "употребил",
    ]),
    ("medium", ["тяга", "трудно", "плохо", "стресс", "тревог", "тяжело", "не могу"]),
]

# -------------------- Triggers (multi-label) -------------------- #
TRIGGERS: Dict[str, List[str]] = {
    "alcohol": ["выпить", "выпивк", "алкогол", "пиво", "пива", "водк", "напиться", "бутылк", "рюмк", "бокал"],
    "drugs": ["наркот", "доза", "дозу", "травк", "таблетк", "закладк", "употреб"],
    "stress": ["стресс", "напряж", "давлени", "нервы", "устал", "выгоран"],
    "social": ["друзья", "друзьями", "компани", "вечеринк", "праздник", "тусовк", "предложили", "угощали"],
    "emotional": ["одиноч", "одиноко", "обид", "пустот", "скучно", "скука", "тоска"],
    "work": ["работ", "начальник", "дедлайн", "коллег", "увольн", "смена"],
    "family": ["семь", "мужем", "мужа", "жена", "жены", "женой", "родител", "мама", "мамой", "отец", "отцом", "дети", "ребен"],
}

# -------------------- Themes (multi-label) -------------------- #
THEMES: Dict[str, List[str]] = {
    "recovery": ["трезв", "выздоровлен", "восстановлен", "срыв", "зависимост", "реабилит", "ремисси"],
    "relationships": ["отношени", "партнер", "друг", "любов", "расстал", "ссор"],
    "work": ["работ", "карьер", "начальник", "коллег"],
    "health": ["здоров", "бессонниц", "спать", "спорт", "врач", "болит", "самочувстви"],
    "emotions": ["чувств", "эмоци", "настроени", "грусть", "тревог", "злость"],
    "goals": ["цель", "цели", "план", "мечт", "хочу достичь"],
    "spirituality": ["смысл", "вера", "молитв", "медитац", "духовн", "душа"],
}

# -------------------- Explicit distress -------------------- #
DISTRESS_PHRASES: List[str] = [
    "помогите",
    "нужна помощь",
    "не справляюсь",
    "мне плохо",
    "мне тяжело",
    "не выдержу",
    "больше не могу",
    "невыносимо",
]

# -------------------- Progress wording (celebration vs encouragement) -------------------- #
POSITIVE_PROGRESS: List[str] = ["лучше", "хорошо", "успех", "достижени", "прогресс", "получилось", "удалось"]

# -------------------- Advice topics (first hit wins) -------------------- #
ADVICE_TOPICS: List[Tuple[str, List[str]]] = [
    ("work", ["работ", "начальник", "коллег"]),
    ("relationships", ["отношени", "партнер"]),
    ("family", ["семь", "родител", "дети"]),
    ("triggers", ["триггер", "соблазн", "тяга"]),
    ("motivation", ["мотиваци", "нет сил", "лень"]),
]

# Emotion -> mood estimate when a turn carries no self-reported mood.
EMOTION_MOOD = {
    "happy": 4.5,
    "hopeful": 4.0,
    "neutral": 3.0,
    "frustrated": 2.5,
    "anxious": 2.0,
    "angry": 2.0,
    "sad": 1.5,
}


def default_tables() -> Dict[str, object]:
    """All tables keyed the way a JSON override file names them."""
    return {
        "EMOTIONS": EMOTIONS,
        "INTENTS": INTENTS,
        "URGENCY_TIERS": URGENCY_TIERS,
        "TRIGGERS": TRIGGERS,
        "THEMES": THEMES,
        "DISTRESS_PHRASES": DISTRESS_PHRASES,
        "POSITIVE_PROGRESS": POSITIVE_PROGRESS,
        "ADVICE_TOPICS": ADVICE_TOPICS,
    }
