from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int | None) -> int | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


@dataclass(frozen=True)
class EngineConfig:
    # Scoring
    base_score: float = 75.0
    score_floor: float = 0.0
    score_ceiling: float = 100.0
    fuzzy_fallback: bool = _env_bool("COCKTAIL_FUZZY_FALLBACK", True)

    # Displayed confidence band for the primary pick
    display_floor: int = 85
    display_ceiling: int = 98

    # Selection
    max_adjacent: int = 8
    primary_top_k: int = _env_int("COCKTAIL_PRIMARY_TOP_K", 1) or 1
    random_seed: int | None = _env_int("COCKTAIL_RANDOM_SEED", None)

    # Diversity pass thresholds (pre-boost score)
    diverse_pass_threshold: float = 65.0
    fill_pass_threshold: float = 70.0
    last_pass_threshold: float = 55.0

    # Recency
    max_recent: int = _env_int("COCKTAIL_MAX_RECENT", 20) or 20
    min_candidates: int = 10
    # Least recently used sessions are dropped beyond this
    max_sessions: int = _env_int("COCKTAIL_MAX_SESSIONS", 1000) or 1000

    # Flavor journey
    journey_limit: int = 12
    journey_max_recent: int = 15
    journey_min_fresh: int = 8

    # Serve the labelled house menu instead of raising when the catalog is down
    fallback_menu: bool = _env_bool("COCKTAIL_FALLBACK_MENU", False)


DEFAULT_ENGINE_CONFIG = EngineConfig()
