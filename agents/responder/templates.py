#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Response template pools (ru). Paraphrases within one pool are interchangeable;
the resolver picks among them with its injected RNG.
"""
from typing import Dict, List

EMERGENCY: List[str] = [
    "Я понимаю, что сейчас очень тяжело. Вы не одни в этом. Давайте вместе найдем способ справиться с этим моментом.",
    "Спасибо, что поделились со мной. Это требует мужества. Сейчас важно сосредоточиться на том, чтобы пройти через этот сложный момент.",
    "Я здесь, чтобы поддержать вас. То, что вы чувствуете сейчас, пройдет. Давайте найдем то, что поможет вам прямо сейчас.",
]

URGENT_SUPPORT: List[str] = [
    "Слышу, что сейчас очень непросто. Тяга похожа на волну: она нарастает, достигает пика и спадает. Давайте переждем ее вместе.",
    "Вы правильно сделали, что написали. Сейчас главное выиграть время: уйдите из ситуации и сделайте технику заземления.",
    "Это трудный момент, но он пройдет. Вы уже проходили через похожее. Давайте сделаем один маленький шаг прямо сейчас.",
]

SUPPORT_BY_EMOTION: Dict[str, List[str]] = {
    "sad": [
        "Понимаю, что сейчас грустно. Эти чувства естественны на пути выздоровления. Что обычно помогает вам справляться с грустью?",
        "Грусть - это часть исцеления. Позвольте себе чувствовать это, но помните: это временно.",
        "Я вижу, что вам тяжело. Хотите поговорить о том, что вызывает эти чувства? Иногда проговорить помогает.",
    ],
    "angry": [
        "Злость может быть признаком того, что что-то важное для вас нарушено. Что вас больше всего расстраивает сейчас?",
        "Понимаю вашу злость. Эта эмоция показывает, что вам не все равно. Давайте найдем здоровый способ выразить эти чувства.",
        "Злость - это нормально. Важно то, как мы с ней обращаемся. Что обычно помогает вам успокоиться?",
    ],
    "anxious": [
        "Тревога может быть сигналом о том, что мозг пытается защитить вас. Давайте разберемся, что можно сделать прямо сейчас.",
        "Понимаю, что тревога мешает. Помните: вы уже справлялись с трудностями раньше. Что помогало вам в прошлый раз?",
        "Тревожные мысли не равны реальности. Давайте сфокусируемся на том, что вы можете контролировать прямо сейчас.",
    ],
}
SUPPORT_DEFAULT: List[str] = [
    "Спасибо, что поделились со мной своими чувствами. Это важный шаг. Как я могу лучше поддержать вас сейчас?",
]

CELEBRATION: List[str] = [
    "🎉 Это замечательно! Каждый шаг вперед - это победа. Я горжусь вашими усилиями!",
    "Отличная работа! Прогресс не всегда линеен, но вы движетесь в правильном направлении. Что помогло вам достичь этого?",
    "Здорово слышать о вашем прогрессе! Эти моменты важно отмечать и помнить. Как вы себя чувствуете?",
]

ENCOURAGEMENT: List[str] = [
    "Выздоровление - это путь с подъемами и спусками. То, что вы продолжаете пытаться, уже показывает вашу силу.",
    "Каждый день, когда вы не сдаетесь, - это прогресс, даже если он не всегда заметен. Что поддерживает вас в движении?",
    "Помните: неудачи не определяют вас. Важно то, что вы продолжаете.",
]

ADVICE_BY_TOPIC: Dict[str, str] = {
    "work": "Работа может быть источником стресса в выздоровлении. Важно найти баланс и четкие границы.",
    "relationships": "Отношения часто меняются в процессе выздоровления. Честное общение и границы - ключ к здоровым отношениям.",
    "family": "Семейные отношения требуют времени и терпения для восстановления. Начните с малых шагов к доверию.",
    "triggers": "Триггеры - нормальная часть выздоровления. Важно их распознавать и иметь план действий.",
    "motivation": "Мотивация приходит и уходит. Важнее создать систему поддержки и рутины, которые работают независимо от настроения.",
}
ADVICE_FOLLOWUP = " Что конкретно вас больше всего беспокоит в этой области?"
ADVICE_DEFAULT = (
    "Это важный вопрос. Чтобы дать вам наилучший совет, расскажите больше о ситуации. "
    "Какие варианты вы уже рассматривали?"
)

STRUGGLE: List[str] = [
    "Тяга - это не приказ. Вы можете заметить ее и не действовать. Что сейчас происходит вокруг вас?",
    "Спасибо за честность. Признать трудность - уже шаг к тому, чтобы с ней справиться. Давайте попробуем переждать этот момент.",
    "Вы нужны себе трезвым. Отложите решение хотя бы на 15 минут и напишите мне, как изменится состояние.",
]

CASUAL: List[str] = [
    "Привет, друг! Рад вас слышать. Как проходит ваш день?",
    "Здравствуйте, друг! О чем хотите поговорить сегодня?",
    "Рад, что вы заглянули. Как вы себя чувствуете?",
]

DEFAULT: List[str] = [
    "Я вас слушаю. Расскажите подробнее, что у вас на душе?",
    "Спасибо, что поделились. Как это на вас влияет?",
]

SUPPORTIVE: List[str] = [
    "Вы не одни. Я рядом и готов поддержать вас.",
    "То, что вы чувствуете, имеет значение. Будьте к себе бережны сейчас.",
    "Обращаться за поддержкой - это проявление силы, а не слабости.",
]

TRIGGER_MANAGEMENT: Dict[str, str] = {
    "alcohol": "Похоже, рядом есть тема алкоголя. Уберите доступ к нему и смените обстановку, если можете.",
    "drugs": "Если рядом есть вещества, самое важное сейчас - увеличить дистанцию и позвать человека поддержки.",
    "stress": "Стресс усиливает тягу. Короткая пауза и медленное дыхание помогут снизить напряжение.",
    "social": "Компания может подталкивать к употреблению. Заранее продумайте, как вежливо отказаться или уйти.",
    "emotional": "Сильные чувства часто маскируются под тягу. Попробуйте назвать, что именно вы сейчас чувствуете.",
    "work": "Рабочее напряжение - частый триггер. Запланируйте восстановление после работы заранее.",
    "family": "Семейные ситуации бывают непростыми. Держитесь своих границ и берегите себя.",
}
TRIGGER_GENERIC = "Я заметил возможный триггер. Давайте продумаем, как снизить его влияние."

TREND_NOTES: Dict[str, str] = {
    "improving": "Я замечаю позитивную динамику в вашем настроении. Это отличный знак!",
    "declining": "Я заметил, что ваше настроение снижается. Давайте уделим этому особое внимание.",
}
THEME_NOTE = 'Я заметил, что тема "{theme}" возникает неоднократно. Возможно, нам стоит глубже исследовать это?'

THEME_LABELS: Dict[str, str] = {
    "recovery": "выздоровление",
    "relationships": "отношения",
    "work": "работа",
    "health": "здоровье",
    "emotions": "эмоции",
    "goals": "цели",
    "spirituality": "смысл и духовность",
}

SUGGESTION_INTRO = "Вот что может помочь прямо сейчас: {titles}."
