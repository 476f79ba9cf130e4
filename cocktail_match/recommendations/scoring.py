"""
Candidate scoring.

Each answered quiz dimension is scored independently against one cocktail:

1. Exact match: the cocktail's relevant tag set contains one of the option's
   tags. Adds the option's bonus and counts as a matching factor.
2. Fuzzy fallback (only when the exact match misses and the engine has
   fuzzy matching enabled): an ingredient / build / spirit heuristic. Adds a
   slightly smaller bonus, counts as a matching factor and records a label.
3. Contradiction penalty: a few options subtract points when the cocktail is
   tagged with the opposite profile.

Afterwards flat bonuses for premium tags and for holistic matches (3, 4, 5
factors) are added, and the total is clamped to the configured bounds.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from ..catalog.models import BuildMethod, CatalogEntity
from .config import DEFAULT_ENGINE_CONFIG, EngineConfig
from .models import PreferenceVector, ScoredCandidate

TagSource = Callable[[CatalogEntity], frozenset[str]]
Predicate = Callable[[CatalogEntity], bool]


def _flavor(entity: CatalogEntity) -> frozenset[str]:
    return entity.flavor_tags


def _descriptive(entity: CatalogEntity) -> frozenset[str]:
    return entity.descriptive_tags


def _mood(entity: CatalogEntity) -> frozenset[str]:
    return entity.mood_tags


# ---------------------------------------------------------------------------
# Fuzzy predicates
# ---------------------------------------------------------------------------

SWEET_INGREDIENTS = (
    "simple syrup", "honey", "agave", "cream", "chocolate", "vanilla", "caramel",
    "sugar", "grenadine", "amaretto", "orgeat", "liqueur", "cointreau",
    "triple sec", "curacao",
)
BITTER_INGREDIENTS = ("bitters", "campari", "aperol", "amaro", "vermouth", "fernet", "cynar")
BALANCED_INGREDIENTS = ("vermouth", "lillet", "cocchi", "dolin")
CITRUS_INGREDIENTS = ("lemon", "lime", "grapefruit", "orange", "citrus", "yuzu")
STONE_INGREDIENTS = ("peach", "apricot", "plum", "cherry")
TROPICAL_INGREDIENTS = ("pineapple", "coconut", "mango", "passion fruit", "guava")
EXPERIMENTAL_INGREDIENTS = ("smoke", "infused", "chartreuse", "mezcal", "absinthe")

MOOD_OCCASIONS: dict[str, frozenset[str]] = {
    "celebratory": frozenset({"celebration", "party"}),
    "elegant": frozenset({"dinner", "date-night"}),
    "cozy": frozenset({"nightcap", "winter"}),
    "adventurous": frozenset({"tasting"}),
}
MOOD_INGREDIENTS: dict[str, tuple[str, ...]] = {
    "celebratory": ("champagne", "prosecco", "cava", "sparkling"),
    "elegant": ("vermouth", "lillet", "champagne"),
    "cozy": ("cinnamon", "honey", "cream", "coffee", "espresso"),
    "adventurous": ("mezcal", "absinthe", "chartreuse", "chili", "smoke"),
}

GENERAL_MOOD_TAGS = frozenset({"elegant", "sophisticated", "celebratory", "cozy"})
PREMIUM_FLAVOR_TAGS = frozenset({"elegant", "balanced", "sophisticated"})

GENERAL_MOOD_BONUS = 5
PREMIUM_BONUS = 8
# matching-factor count -> extra bonus, cumulative
HOLISTIC_BONUSES = ((3, 10), (4, 5), (5, 5))


def _has_sweet(e: CatalogEntity) -> bool:
    return e.has_ingredient(SWEET_INGREDIENTS)


def _has_bitter(e: CatalogEntity) -> bool:
    return e.has_ingredient(BITTER_INGREDIENTS) or e.spirit_is("whiskey", "whisky")


def _has_balance(e: CatalogEntity) -> bool:
    bp = e.balance_profile
    return e.has_ingredient(BALANCED_INGREDIENTS) or (3 <= bp.sweet <= 7 and 3 <= bp.bitter <= 7)


def _has_citrus(e: CatalogEntity) -> bool:
    return e.has_ingredient(CITRUS_INGREDIENTS)


def _has_stone(e: CatalogEntity) -> bool:
    return e.has_ingredient(STONE_INGREDIENTS) or e.spirit_is("brandy", "cognac")


def _has_tropical(e: CatalogEntity) -> bool:
    return e.has_ingredient(TROPICAL_INGREDIENTS) or e.spirit_is("rum")


def _is_light_build(e: CatalogEntity) -> bool:
    return e.build_method is BuildMethod.built or e.style_has("highball", "collins", "fizz", "spritz")


def _is_boozy_build(e: CatalogEntity) -> bool:
    return e.build_method is BuildMethod.stirred or e.style_has("old fashioned", "manhattan", "martini")


def _is_medium_build(e: CatalogEntity) -> bool:
    return e.build_method is BuildMethod.shaken or e.style_has("sour", "daisy")


def _is_classic_style(e: CatalogEntity) -> bool:
    return e.style_has("old fashioned", "manhattan", "martini", "sour", "negroni", "daiquiri")


def _is_modern_style(e: CatalogEntity) -> bool:
    return e.style_has("collins", "fizz", "mule", "highball")


def _is_experimental_style(e: CatalogEntity) -> bool:
    return (
        e.style_has("smash", "spritz", "daisy")
        or bool(e.flavor_tags & {"seasonal", "herbal"})
        or e.has_ingredient(EXPERIMENTAL_INGREDIENTS)
    )


def _mood_fallback(mood: str) -> Predicate:
    def _check(e: CatalogEntity) -> bool:
        return bool(e.occasion_tags & MOOD_OCCASIONS[mood]) or e.has_ingredient(MOOD_INGREDIENTS[mood])

    return _check


# ---------------------------------------------------------------------------
# Rule table
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class OptionRule:
    tags: frozenset[str]
    tag_source: TagSource
    bonus: int
    fallback: Predicate
    fallback_bonus: int
    fallback_label: str
    contradicts: frozenset[str] = frozenset()
    penalty: int = 0


def _rule(tags, source, bonus, fallback, fallback_bonus, label, contradicts=(), penalty=0) -> OptionRule:
    return OptionRule(
        tags=frozenset(tags),
        tag_source=source,
        bonus=bonus,
        fallback=fallback,
        fallback_bonus=fallback_bonus,
        fallback_label=label,
        contradicts=frozenset(contradicts),
        penalty=penalty,
    )


RULES: dict[str, dict[str, OptionRule]] = {
    "sweet_vs_bitter": {
        "sweet": _rule(("sweet", "fruity"), _flavor, 15, _has_sweet, 12, "sweet-ingredients",
                       contradicts=("bitter", "dry"), penalty=5),
        "bitter": _rule(("bitter", "dry", "herbal"), _flavor, 15, _has_bitter, 12, "bitter-ingredients",
                        contradicts=("sweet", "fruity"), penalty=5),
        "balanced": _rule(("balanced", "harmonious", "elegant"), _flavor, 15, _has_balance, 12,
                          "balanced-ingredients"),
    },
    "citrus_vs_stone": {
        "citrus": _rule(("citrus", "bright"), _flavor, 12, _has_citrus, 10, "citrus-ingredients"),
        "stone": _rule(("stone", "rich", "deep", "fruity"), _flavor, 12, _has_stone, 10, "stone-ingredients"),
        "tropical": _rule(("tropical", "exotic", "fruity"), _flavor, 12, _has_tropical, 10,
                          "tropical-ingredients"),
    },
    "light_vs_boozy": {
        "light": _rule(("light", "refreshing", "bubbly", "long"), _descriptive, 12, _is_light_build, 8,
                       "light-build", contradicts=("boozy", "strong"), penalty=5),
        "boozy": _rule(("boozy", "spirit-forward", "strong", "rich"), _descriptive, 12, _is_boozy_build, 8,
                       "boozy-build", contradicts=("light",), penalty=5),
        "medium": _rule(("medium", "versatile", "balanced"), _descriptive, 12, _is_medium_build, 10,
                        "medium-build"),
    },
    "classic_vs_experimental": {
        "classic": _rule(("classic", "timeless", "traditional"), _descriptive, 10, _is_classic_style, 8,
                         "classic-style"),
        "modern": _rule(("modern", "contemporary", "refined"), _descriptive, 10, _is_modern_style, 8,
                        "modern-style"),
        "experimental": _rule(("experimental", "bold", "innovative"), _descriptive, 10,
                              _is_experimental_style, 8, "experimental-style"),
    },
    "mood_preference": {
        mood: _rule((mood,), _mood, 15, _mood_fallback(mood), 12, f"{mood}-mood")
        for mood in ("celebratory", "elegant", "cozy", "adventurous")
    },
}


def score_candidate(
    entity: CatalogEntity,
    prefs: PreferenceVector,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> ScoredCandidate:
    """Compute the compatibility score of one cocktail for one preference vector."""
    candidate = ScoredCandidate(entity=entity, score=config.base_score)

    for dimension, option in prefs.answered().items():
        rule = RULES[dimension][option]
        if rule.tags & rule.tag_source(entity):
            candidate.score += rule.bonus
            candidate.matching_factor_count += 1
        elif config.fuzzy_fallback and rule.fallback(entity):
            candidate.score += rule.fallback_bonus
            candidate.matching_factor_count += 1
            candidate.fuzzy_match_labels.append(rule.fallback_label)
            candidate.used_fallback = True

        if rule.penalty and rule.contradicts & rule.tag_source(entity):
            candidate.score -= rule.penalty

    if entity.mood_tags & GENERAL_MOOD_TAGS:
        candidate.score += GENERAL_MOOD_BONUS
    if entity.flavor_tags & PREMIUM_FLAVOR_TAGS:
        candidate.score += PREMIUM_BONUS

    for threshold, bonus in HOLISTIC_BONUSES:
        if candidate.matching_factor_count >= threshold:
            candidate.score += bonus

    floor = max(0.0, config.score_floor)
    ceiling = min(100.0, config.score_ceiling)
    candidate.score = min(ceiling, max(floor, candidate.score))
    return candidate
