from __future__ import annotations

import logging
import random
from typing import Iterable

from ..catalog.models import CatalogEntity
from .config import DEFAULT_ENGINE_CONFIG, EngineConfig
from .models import PreferenceVector, ScoredCandidate
from .scoring import score_candidate

logger = logging.getLogger(__name__)


def rank_key(candidate: ScoredCandidate) -> tuple[float, int, str]:
    """Score desc, then matching factors desc, then id asc."""
    return (-candidate.score, -candidate.matching_factor_count, candidate.entity.id)


def rank(
    catalog: Iterable[CatalogEntity],
    prefs: PreferenceVector,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> list[ScoredCandidate]:
    """Score every entity and return them in a total, input-order independent order."""
    scored = [score_candidate(entity, prefs, config) for entity in catalog]
    scored.sort(key=rank_key)
    if scored:
        logger.debug(
            "Ranked %d candidates; head=%s (%.1f)",
            len(scored), scored[0].entity.id, scored[0].score,
        )
    return scored


def pick_primary(
    ranked: list[ScoredCandidate],
    top_k: int = 1,
    rng: random.Random | None = None,
) -> tuple[ScoredCandidate, list[ScoredCandidate]]:
    """
    Split ``ranked`` into the primary pick and the remainder.

    With ``top_k`` of 1 (or no ``rng``) the head of the ranking is chosen.
    Otherwise the primary is drawn uniformly from the first ``top_k``; the
    remainder keeps its ranked order.
    """
    if not ranked:
        raise ValueError("cannot pick a primary from an empty ranking")

    index = 0
    window = min(top_k, len(ranked))
    if window > 1 and rng is not None:
        index = rng.randrange(window)

    primary = ranked[index]
    remainder = ranked[:index] + ranked[index + 1:]
    return primary, remainder
