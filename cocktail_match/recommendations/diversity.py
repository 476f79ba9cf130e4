"""
Adjacent-recommendation selection.

Greedy, three-pass selection over the ranked remainder:

* Candidates are re-ordered by ``score + diversity boost`` (id breaks ties).
  The boost favours base spirits not yet shown, uncommon premium spirits and
  accent ingredients (liqueurs, amari, modifiers) the primary doesn't use.
* If a candidate clearing the pass-1 threshold uses a different base spirit
  than the primary, the best of them is taken first so the alternates never
  collapse onto the primary's spirit.
* Pass 1 accepts candidates that differ from every pick so far in spirit,
  style or build method, or that bring a new accent ingredient.
* Passes 2 and 3 top up the list with plain score thresholds.
"""
from __future__ import annotations

import logging
import re

from ..catalog.models import CatalogEntity
from .config import DEFAULT_ENGINE_CONFIG, EngineConfig
from .models import ScoredCandidate

logger = logging.getLogger(__name__)

ACCENT_KEYWORDS = (
    "liqueur", "amaro", "chartreuse", "campari", "aperol", "vermouth",
    "st-germain", "elderflower", "maraschino", "cointreau", "triple sec",
    "curacao", "benedictine", "falernum", "absinthe", "fernet", "cynar",
    "lillet", "creme de", "crème de", "amaretto", "drambuie", "galliano",
)
PREMIUM_SPIRITS = (
    "mezcal", "cognac", "armagnac", "calvados", "pisco", "cachaca", "cachaça",
    "aquavit", "sotol", "rhum agricole", "japanese whisky",
)

NEW_SPIRIT_BOOST = 15
PREMIUM_SPIRIT_BOOST = 10
ACCENT_BOOST = 5

_QUANTITY_RE = re.compile(
    r"^\s*[\d./\s]*(?:(?:oz|ml|cl|dash(?:es)?|drops?|tsp|tbsp|barspoons?|parts?|top)\b)?\s*",
    re.IGNORECASE,
)


def ingredient_name(ingredient: str) -> str:
    """``"0.75 oz Yellow Chartreuse"`` -> ``"yellow chartreuse"``."""
    return _QUANTITY_RE.sub("", ingredient, count=1).strip().lower()


def accent_ingredients(entity: CatalogEntity) -> set[str]:
    names = (ingredient_name(ing) for ing in entity.ingredients)
    return {n for n in names if n and any(k in n for k in ACCENT_KEYWORDS)}


def is_premium_spirit(spirit: str) -> bool:
    spirit = spirit.lower()
    return any(p in spirit for p in PREMIUM_SPIRITS)


def _profile(entity: CatalogEntity) -> tuple[str, str, str]:
    return (entity.base_spirit_category, entity.style, entity.build_method.value)


class _Selection:
    """Used-attribute bookkeeping seeded from the primary."""

    def __init__(self, primary: CatalogEntity) -> None:
        self.spirits = {primary.base_spirit_category}
        self.accents = accent_ingredients(primary)
        self.profiles = {_profile(primary)}
        self.picked: list[CatalogEntity] = []
        self.ids = {primary.id}

    def boost(self, entity: CatalogEntity) -> int:
        value = 0
        if entity.base_spirit_category not in self.spirits:
            value += NEW_SPIRIT_BOOST
        if is_premium_spirit(entity.base_spirit_category):
            value += PREMIUM_SPIRIT_BOOST
        value += ACCENT_BOOST * len(accent_ingredients(entity) - self.accents)
        return value

    def is_diverse(self, entity: CatalogEntity) -> bool:
        return _profile(entity) not in self.profiles or bool(accent_ingredients(entity) - self.accents)

    def accept(self, entity: CatalogEntity) -> None:
        self.picked.append(entity)
        self.ids.add(entity.id)
        self.spirits.add(entity.base_spirit_category)
        self.accents |= accent_ingredients(entity)
        self.profiles.add(_profile(entity))


def select_adjacent(
    remainder: list[ScoredCandidate],
    primary: CatalogEntity,
    max_count: int,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> list[CatalogEntity]:
    """Pick up to ``max_count`` diverse alternates; never the primary, never twice."""
    if max_count <= 0:
        return []

    selection = _Selection(primary)
    boosts = {c.entity.id: selection.boost(c.entity) for c in remainder}
    ordered = sorted(remainder, key=lambda c: (-(c.score + boosts[c.entity.id]), c.entity.id))

    def _full() -> bool:
        return len(selection.picked) >= max_count

    anchor = next(
        (
            c for c in ordered
            if c.entity.id not in selection.ids
            and c.entity.base_spirit_category != primary.base_spirit_category
            and c.score >= config.diverse_pass_threshold
        ),
        None,
    )
    if anchor is not None:
        selection.accept(anchor.entity)

    for c in ordered:
        if _full():
            break
        if c.entity.id in selection.ids or c.score < config.diverse_pass_threshold:
            continue
        if selection.is_diverse(c.entity):
            selection.accept(c.entity)

    for threshold in (config.fill_pass_threshold, config.last_pass_threshold):
        for c in ordered:
            if _full():
                break
            if c.entity.id not in selection.ids and c.score >= threshold:
                selection.accept(c.entity)

    logger.debug("Selected %d adjacent for %s", len(selection.picked), primary.id)
    return selection.picked[:max_count]
