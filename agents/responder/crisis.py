#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Crisis resources and escalation plans (RU).

The plan is attached to critical/high responses so the UI can show contacts
without guessing; the engine itself never dials anything.
"""
from typing import Any, Dict

CRISIS_RESOURCES: Dict[str, Dict[str, str]] = {
    "trust_line": {
        "name": "Телефон доверия",
        "phone": "8-800-2000-122",
        "available": "24/7, бесплатно",
    },
    "psych_help": {
        "name": "Бесплатная психологическая помощь",
        "phone": "8-800-200-0-200",
        "available": "24/7, анонимно",
    },
    "mobile_psych": {
        "name": "Экстренная психологическая помощь (с мобильного)",
        "phone": "051",
        "available": "24/7",
    },
    "emergency": {
        "name": "Экстренные службы",
        "phone": "112",
        "available": "24/7",
    },
}


def hotline_summary() -> str:
    """One-line list used in emergency suggestion descriptions."""
    r = CRISIS_RESOURCES
    return (f"{r['trust_line']['name']}: {r['trust_line']['phone']}; "
            f"{r['emergency']['name']}: {r['emergency']['phone']}")


def _resource(key: str, priority: str) -> Dict[str, Any]:
    res = CRISIS_RESOURCES[key]
    return {"type": key, "name": res["name"], "phone": res["phone"], "priority": priority}


def build_crisis_plan(urgency: str) -> Dict[str, Any]:
    """Plan by urgency: CRISIS for critical, WARNING for high, OK otherwise."""
    if urgency == "critical":
        return {
            "status": "CRISIS",
            "actions": [
                "Позвонить 112, если есть непосредственная опасность",
                "Связаться с телефоном доверия",
                "Не оставаться одному, позвать близкого человека",
            ],
            "resources": [
                _resource("emergency", "IMMEDIATE"),
                _resource("trust_line", "HIGH"),
                _resource("psych_help", "HIGH"),
            ],
            "immediate_steps": [
                "Вы не одни. Помощь доступна прямо сейчас.",
                "Позвоните " + CRISIS_RESOURCES["emergency"]["phone"] + ", если вы в опасности.",
                "Позвоните " + CRISIS_RESOURCES["trust_line"]["phone"] + ", чтобы поговорить.",
            ],
        }
    if urgency == "high":
        return {
            "status": "WARNING",
            "actions": [
                "Использовать технику заземления или серфинг по тяге",
                "Написать или позвонить человеку поддержки",
                "Уйти из ситуации, где доступен алкоголь или вещества",
            ],
            "resources": [_resource("psych_help", "HIGH"), _resource("mobile_psych", "MEDIUM")],
            "immediate_steps": [
                "Тяга как волна: она поднимается и обязательно спадет.",
                "Позвоните " + CRISIS_RESOURCES["psych_help"]["phone"] + ", если нужна поддержка.",
            ],
        }
    return {"status": "OK", "actions": [], "resources": [], "immediate_steps": []}
