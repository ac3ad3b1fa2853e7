#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CoachAgent - one full exchange: analysis, memory update, risk, reply.
Memory persists between runs in a JSON file store.

Input (stdin or --payload):
{
  "meta": {"store_path": "runtime/coach_memory.json", "seed": 7},
  "data": {
    "user_id": "u1",
    "text": "хочется выпить, не могу сдержаться",
    "context": {"mood": 2, "craving_level": 4, "sober_days": 12},
    "tone": "direct",
    "display_name": "Аня"
  }
}

Output:
{
  "ok": true,
  "version": "coach@1.0.0",
  "emits": {"analysis": {...}, "pattern": {...}, "risk": {...}, "response": {...}},
  "checks": {"CHK-COACH-01": {"pass": true, "reason": "…"}}
}
"""
import sys, json, time, argparse, random
from pathlib import Path
from typing import Any, Dict, List

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from agents.memory.json_store import JsonFileStore
from backend.coach_engine import CoachEngine
from backend.logging_config import setup_logging

AGENT_VERSION = "1.0.0"
AGENT_ID = "coach"


def parse_args(argv: List[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="CoachAgent – analyze, remember and answer one message.")
    p.add_argument("--payload", type=str, default=None, help="Path to payload.json (else stdin).")
    p.add_argument("--store", type=str, default=None, help="Memory JSON file (overrides meta.store_path).")
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
    return nb_stdin(default_payload)


def run(payload: Dict[str, Any], store_path: str | None = None) -> Dict[str, Any]:
    meta = payload.get("meta") or {}
    data = payload.get("data") or {}

    store = JsonFileStore(Path(store_path or meta.get("store_path") or "runtime/coach_memory.json"))
    seed = meta.get("seed")
    engine = CoachEngine(store=store, rng=random.Random(seed) if seed is not None else None)

    user_id = data.get("user_id")
    if data.get("tone"):
        engine.memory.set_tone(user_id, data["tone"])
    if "display_name" in data:
        engine.memory.set_display_name(user_id, data["display_name"])

    result = engine.process_message(user_id, data.get("text"), data.get("context"))
    urgency = result.analysis.urgency
    has_emergency = any(s.category == "emergency" for s in result.response.suggestions)

    checks = {
        "CHK-COACH-01": {
            "pass": True,
            "reason": f"segments={len(result.response.segments)} suggestions={len(result.response.suggestions)}",
        },
        "CHK-COACH-CRISIS": {
            "pass": urgency != "critical" or has_emergency,
            "urgency": urgency,
        },
    }
    return {"ok": True, "emits": result.model_dump(mode="json"), "checks": checks}


def main() -> None:
    setup_logging()
    t0 = time.time()
    try:
        args = parse_args(sys.argv[1:])
        payload = load_payload(args)
        res = run(payload, args.store)
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
