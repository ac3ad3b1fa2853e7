"""
Configuration for the coach engine.

Values come from environment variables (optionally a .env file) with defaults
matching the production tuning.
"""

import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


@dataclass
class AnalyzerConfig:
    """Lexical analyzer settings."""
    lexicon_path: Optional[str] = None
    intensity_divisor: float = 2.0
    confidence_divisor: float = 3.0
    support_intensity_min: float = 0.7
    craving_high_min: int = 5
    craving_medium_min: int = 4


@dataclass
class MemoryConfig:
    """Conversation memory bounds."""
    history_cap: int = 100
    trend_window: int = 10
    trend_delta: float = 0.5
    dominant_k: int = 3
    cache_size: int = 1000


@dataclass
class RiskWeights:
    """Additive risk weights. Positive values raise risk, negative ones protect."""
    low_mood: int = 2
    high_craving: int = 3
    early_recovery: int = 2
    low_engagement: int = 1
    declining_trend: int = 1
    long_streak: int = -2
    good_mood: int = -1
    high_engagement: int = -1
    education: int = -1
    improving_trend: int = -1

    # thresholds
    low_mood_max: int = 2
    high_craving_min: int = 3
    early_recovery_days: int = 14
    low_engagement_below: int = 3
    long_streak_days: int = 30
    good_mood_min: int = 4
    high_engagement_min: int = 10
    education_min: int = 5

    # level bands
    high_min: int = 4
    medium_min: int = 2


@dataclass
class ResponderConfig:
    """Response resolver settings."""
    max_suggestions: int = 3
    default_tone: str = "gentle"
    seed: Optional[int] = None


@dataclass
class TelemetryConfig:
    """JSON-lines telemetry. Disabled when log_dir is empty."""
    log_dir: Optional[str] = None


@dataclass
class AppConfig:
    """Main application configuration."""
    environment: str = "development"
    log_level: str = "INFO"
    analyzer: AnalyzerConfig = field(default_factory=AnalyzerConfig)
    memory: MemoryConfig = field(default_factory=MemoryConfig)
    risk: RiskWeights = field(default_factory=RiskWeights)
    responder: ResponderConfig = field(default_factory=ResponderConfig)
    telemetry: TelemetryConfig = field(default_factory=TelemetryConfig)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


def _load_risk_weights() -> RiskWeights:
    base = RiskWeights()
    # RISK_W_LOW_MOOD, RISK_W_HIGH_CRAVING, ... override single fields
    values = {name: _env_int(f"RISK_W_{name.upper()}", getattr(base, name))
              for name in base.__dataclass_fields__}
    return RiskWeights(**values)


def load_config() -> AppConfig:
    """Load configuration from environment variables with defaults."""
    seed_raw = os.getenv("RESPONDER_SEED")

    analyzer_config = AnalyzerConfig(lexicon_path=os.getenv("ANALYZER_LEXICON_PATH") or None,
                                     intensity_divisor=float(os.getenv("ANALYZER_INTENSITY_DIVISOR", "2.0")),
                                     confidence_divisor=float(os.getenv("ANALYZER_CONFIDENCE_DIVISOR", "3.0")),
                                     support_intensity_min=float(os.getenv("ANALYZER_SUPPORT_INTENSITY_MIN", "0.7")),
                                     craving_high_min=_env_int("ANALYZER_CRAVING_HIGH_MIN", 5),
                                     craving_medium_min=_env_int("ANALYZER_CRAVING_MEDIUM_MIN", 4))

    memory_config = MemoryConfig(history_cap=_env_int("MEMORY_HISTORY_CAP", 100),
                                 trend_window=_env_int("MEMORY_TREND_WINDOW", 10),
                                 trend_delta=float(os.getenv("MEMORY_TREND_DELTA", "0.5")),
                                 dominant_k=_env_int("MEMORY_DOMINANT_K", 3),
                                 cache_size=_env_int("MEMORY_CACHE_SIZE", 1000))

    responder_config = ResponderConfig(max_suggestions=_env_int("RESPONDER_MAX_SUGGESTIONS", 3),
                                       default_tone=os.getenv("RESPONDER_DEFAULT_TONE", "gentle"),
                                       seed=int(seed_raw) if seed_raw else None)

    telemetry_config = TelemetryConfig(log_dir=os.getenv("TELEMETRY_DIR") or None)

    return AppConfig(environment=os.getenv("ENVIRONMENT", "development"),
                     log_level=os.getenv("LOG_LEVEL", "INFO"),
                     analyzer=analyzer_config,
                     memory=memory_config,
                     risk=_load_risk_weights(),
                     responder=responder_config,
                     telemetry=telemetry_config)


# Global configuration instance
config = load_config()
