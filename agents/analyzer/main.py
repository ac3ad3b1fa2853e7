#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
MessageAnalyzerAgent - lexical reading of one recovery-chat message.
Deterministic: same text + context always gives the same analysis.

Input (stdin or --payload):
{
  "meta": {"explain_verbose": false, "lexicon_path": null},
  "data": {
    "text": "…",
    "context": {"mood": 3, "craving_level": 2, "stress_level": 3, "time_of_day": 14}
  }
}

Output:
{
  "ok": true,
  "version": "analyzer@1.0.0",
  "latency_ms": 1,
  "emits": {"analysis": {...}},
  "checks": {"CHK-ANALYZER-01": {"pass": true, "reason": "…"}}
}
"""
import sys, json, time, argparse
from pathlib import Path
from typing import Any, Dict, List, Optional

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from agents.lexicon.lexicon_loader import load_lexicon
from agents.lexicon.text_utils import clamp, match_keywords, normalize_text, score_categories
from backend.config import AnalyzerConfig, config
from backend.logging_config import setup_logging
from schemas.analysis import NEGATIVE_EMOTIONS, Analysis, NumericContext, max_urgency

AGENT_VERSION = "1.0.0"
AGENT_ID = "analyzer"


# -------------------- Channels -------------------- #
def _best_label(scores: Dict[str, List[str]], default: str) -> tuple[str, int]:
    # dicts keep table order, and max() keeps the first of equal scores
    if not scores:
        return default, 0
    label = max(scores, key=lambda k: len(scores[k]))
    return label, len(scores[label])


def detect_emotion(text: str, lexicon: Dict[str, Any], cfg: AnalyzerConfig) -> tuple[str, float, List[str]]:
    scores = score_categories(text, lexicon["EMOTIONS"])
    label, count = _best_label(scores, "neutral")
    intensity = clamp(count / cfg.intensity_divisor) if count else 0.0
    return label, intensity, scores.get(label, [])


def detect_intent(text: str, lexicon: Dict[str, Any], cfg: AnalyzerConfig) -> tuple[str, float, List[str]]:
    scores = score_categories(text, lexicon["INTENTS"])
    label, count = _best_label(scores, "casual_chat")
    confidence = clamp(count / cfg.confidence_divisor) if count else 0.0
    return label, confidence, scores.get(label, [])


def assess_urgency(text: str, lexicon: Dict[str, Any]) -> tuple[str, List[str]]:
    """Tiers in strict order; the first tier with any hit wins."""
    for level, keywords in lexicon["URGENCY_TIERS"]:
        hits = match_keywords(text, keywords)
        if hits:
            return level, hits
    return "low", []


def context_urgency(ctx: Optional[NumericContext], cfg: AnalyzerConfig) -> str:
    if ctx is None:
        return "low"
    if ctx.craving_level >= cfg.craving_high_min:
        return "high"
    if ctx.craving_level >= cfg.craving_medium_min:
        return "medium"
    return "low"


# -------------------- Analysis -------------------- #
def analyze_message(
    text: Any,
    context: Any = None,
    lexicon: Optional[Dict[str, Any]] = None,
    cfg: Optional[AnalyzerConfig] = None,
) -> Analysis:
    """
    Map (text, optional numeric context) to an Analysis.

    Never raises on user input: non-string or blank text gives the neutral
    analysis, a malformed context is treated as absent.
    """
    cfg = cfg or config.analyzer
    lexicon = lexicon or load_lexicon(cfg.lexicon_path)
    try:
        ctx = NumericContext.coerce(context)
    except ValueError:
        ctx = None

    if not isinstance(text, str) or not text.strip():
        return Analysis.neutral(ctx)

    t = normalize_text(text)

    emotion, intensity, emotion_hits = detect_emotion(t, lexicon, cfg)
    intent, confidence, intent_hits = detect_intent(t, lexicon, cfg)
    lexical_urgency, urgency_hits = assess_urgency(t, lexicon)
    # context can raise urgency, never lower it
    urgency = max_urgency(lexical_urgency, context_urgency(ctx, cfg))

    triggers = score_categories(t, lexicon["TRIGGERS"])
    themes = score_categories(t, lexicon["THEMES"])
    distress = match_keywords(t, lexicon["DISTRESS_PHRASES"])

    needs_support = bool(distress) or (
        intensity > cfg.support_intensity_min and emotion in NEGATIVE_EMOTIONS
    )

    matched = {
        "emotion": emotion_hits,
        "intent": intent_hits,
        "urgency": urgency_hits,
        "distress": distress,
    }
    for cat, hits in triggers.items():
        matched[f"trigger:{cat}"] = hits

    return Analysis(
        emotion=emotion,
        intensity=round(intensity, 3),
        intent=intent,
        confidence=round(confidence, 3),
        urgency=urgency,
        triggers=list(triggers),
        themes=list(themes),
        needs_support=needs_support,
        matched={k: v for k, v in matched.items() if v},
        context=ctx,
    )


# -------------------- CLI -------------------- #
def parse_args(argv: List[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="MessageAnalyzerAgent – emotion/intent/urgency/triggers.")
    p.add_argument("--payload", type=str, default=None, help="Path to payload.json (else stdin).")
    p.add_argument("--text", type=str, default=None, help="Analyze this text directly.")
    p.add_argument("--explain-verbose", action="store_true")
    return p.parse_args(argv)


def nb_stdin(default: Dict[str, Any]) -> Dict[str, Any]:
    try:
        if sys.stdin and not sys.stdin.isatty():
            raw = sys.stdin.read()
            if raw.strip():
                return json.loads(raw)
    except (OSError, ValueError):
        pass
    return default


def load_payload(args: argparse.Namespace) -> Dict[str, Any]:
    default_payload = {"meta": {}, "data": {}}
    if args.payload:
        with open(args.payload, "r", encoding="utf-8") as f:
            return json.load(f)
    if args.text is not None:
        return {"meta": {}, "data": {"text": args.text}}
    return nb_stdin(default_payload)


def run(payload: Dict[str, Any], explain_verbose: bool = False) -> Dict[str, Any]:
    meta = payload.get("meta") or {}
    data = payload.get("data") or {}

    lexicon = load_lexicon(meta.get("lexicon_path")) if meta.get("lexicon_path") else None
    analysis = analyze_message(data.get("text"), data.get("context"), lexicon=lexicon)

    emits = analysis.model_dump(mode="json", exclude={"matched"})
    checks = {
        "CHK-ANALYZER-01": {
            "pass": True,
            "reason": f"urgency={analysis.urgency} emotion={analysis.emotion} intent={analysis.intent}",
        },
        "CHK-CRISIS": {"pass": analysis.urgency != "critical", "crisis_required": analysis.urgency == "critical"},
    }
    out = {"ok": True, "emits": {"analysis": emits}, "checks": checks}
    if explain_verbose or bool(meta.get("explain_verbose", False)):
        out["rationales"] = [{"cue": channel, "keywords": hits} for channel, hits in analysis.matched.items()]
    return out


def main() -> None:
    setup_logging()
    t0 = time.time()
    try:
        args = parse_args(sys.argv[1:])
        payload = load_payload(args)
        res = run(payload, explain_verbose=args.explain_verbose)
        res["version"] = f"{AGENT_ID}@{AGENT_VERSION}"
        res["latency_ms"] = int((time.time() - t0) * 1000)
        sys.stdout.write(json.dumps(res, ensure_ascii=False))
        sys.stdout.flush()
    except Exception as e:
        sys.stderr.write(f"{AGENT_ID} error: {e}\n")
        sys.stdout.write(json.dumps({"ok": False, "error": str(e)}))
        sys.stdout.flush()
        sys.exit(1)


if __name__ == "__main__":
    main()
