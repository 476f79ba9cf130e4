from __future__ import annotations

import itertools
import logging
from typing import Sequence

from pydantic import BaseModel

from ..catalog.models import CatalogEntity
from .models import (
    CitrusVsStone,
    ClassicVsExperimental,
    LightVsBoozy,
    MoodPreference,
    SweetVsBitter,
)
from .scoring import RULES

logger = logging.getLogger(__name__)

DIMENSIONS: tuple[tuple[str, type], ...] = (
    ("sweet_vs_bitter", SweetVsBitter),
    ("citrus_vs_stone", CitrusVsStone),
    ("light_vs_boozy", LightVsBoozy),
    ("classic_vs_experimental", ClassicVsExperimental),
    ("mood_preference", MoodPreference),
)


class CoverageReport(BaseModel):
    total: int
    covered: int
    percentage: float
    min_matches: int
    missing: list[dict[str, str]]


def _exact_hits(entity: CatalogEntity) -> dict[str, set[str]]:
    """Options each dimension matches by exact tag for one entity."""
    hits: dict[str, set[str]] = {}
    for dimension, options in RULES.items():
        hits[dimension] = {
            option for option, rule in options.items() if rule.tags & rule.tag_source(entity)
        }
    return hits


def coverage_report(catalog: Sequence[CatalogEntity], min_matches: int = 3) -> CoverageReport:
    """
    Check every complete quiz combination against the catalog.

    A combination is covered when at least one cocktail matches ``min_matches``
    of its five answers by exact tag (fuzzy fallbacks are not counted).
    """
    hits = [_exact_hits(entity) for entity in catalog]
    names = [name for name, _ in DIMENSIONS]
    domains = [[member.value for member in enum] for _, enum in DIMENSIONS]

    total = 0
    missing: list[dict[str, str]] = []
    for combo in itertools.product(*domains):
        total += 1
        covered = any(
            sum(option in entity_hits[name] for name, option in zip(names, combo)) >= min_matches
            for entity_hits in hits
        )
        if not covered:
            missing.append(dict(zip(names, combo)))

    covered_count = total - len(missing)
    percentage = round(100.0 * covered_count / total, 1) if total else 0.0
    logger.info("Coverage %d/%d (%.1f%%) at min_matches=%d", covered_count, total, percentage, min_matches)
    return CoverageReport(
        total=total,
        covered=covered_count,
        percentage=percentage,
        min_matches=min_matches,
        missing=missing,
    )
