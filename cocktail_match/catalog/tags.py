"""
Semantic tag derivation.

Turns a raw catalog row (flavor intensities, ingredients, build method, style
label) into the four tag sets the scorer matches against. Every rule only
adds tags; nothing here can fail on a well-typed ``RawCocktail``.
"""
from __future__ import annotations

from dataclasses import dataclass

from .models import BuildMethod, CatalogEntity, RawCocktail

# ---------------------------------------------------------------------------
# Keyword tables
# ---------------------------------------------------------------------------

INGREDIENT_FLAVOR_KEYWORDS: dict[str, tuple[str, ...]] = {
    "citrus": ("lemon", "lime", "grapefruit", "orange", "citrus", "yuzu", "bergamot"),
    "tropical": ("pineapple", "coconut", "mango", "passion fruit", "guava", "papaya", "lychee"),
    "stone": ("peach", "apricot", "plum", "cherry", "maraschino"),
    "sweet": (
        "simple syrup", "honey", "agave", "cream", "chocolate", "vanilla",
        "caramel", "sugar", "grenadine", "amaretto", "orgeat",
    ),
    "bitter": ("bitters", "campari", "aperol", "amaro", "fernet", "cynar", "gentian"),
    "herbal": ("chartreuse", "mint", "basil", "thyme", "rosemary", "sage", "absinthe", "benedictine"),
    "bubbly": ("champagne", "prosecco", "cava", "soda", "tonic", "ginger beer", "sparkling"),
    "spicy": ("ginger", "chili", "jalapeno", "cinnamon", "pepper", "clove"),
}

BUILD_STYLE_TAGS: dict[BuildMethod, tuple[str, ...]] = {
    BuildMethod.built: ("light", "refreshing"),
    BuildMethod.stirred: ("boozy", "spirit-forward", "strong"),
    BuildMethod.shaken: ("medium", "versatile", "balanced"),
    BuildMethod.blended: ("light", "fun"),
}

CLASSIC_KEYWORDS = (
    "old fashioned", "manhattan", "martini", "sour", "negroni", "daiquiri",
    "sazerac", "gimlet", "sidecar", "classic", "margarita",
)
MODERN_KEYWORDS = ("collins", "fizz", "mule", "highball", "modern", "contemporary")
EXPERIMENTAL_KEYWORDS = (
    "smash", "spritz", "smoke", "infused", "experimental", "clarified",
    "fat-washed", "seasonal", "twist",
)

WARMING_SPIRITS = ("whiskey", "whisky", "bourbon", "rye", "scotch", "brandy", "cognac")
ADVENTUROUS_SPIRITS = ("mezcal", "absinthe", "aquavit", "pisco", "cachaca", "cachaça")

DEFAULT_MOOD_TAGS = ("elegant", "sophisticated")
DEFAULT_OCCASION_TAGS = ("evening",)

SWEET_THRESHOLD = 7
BITTER_THRESHOLD = 7
BALANCED_BAND = (3, 6)
SOUR_THRESHOLD = 6
AROMATIC_THRESHOLD = 7
SPICY_THRESHOLD = 6
STRONG_THRESHOLD = 8
LIGHT_THRESHOLD = 4


@dataclass(frozen=True)
class DerivedTags:
    flavor_tags: frozenset[str]
    style_tags: frozenset[str]
    mood_tags: frozenset[str]
    occasion_tags: frozenset[str]


def _has_any(haystack: list[str], keywords: tuple[str, ...]) -> bool:
    return any(k in text for text in haystack for k in keywords)


def _flavor_tags(raw: RawCocktail, ingredients: list[str]) -> set[str]:
    bp = raw.balance_profile
    tags = {t.strip().lower() for t in raw.flavor_tags if t.strip()}

    if bp.sweet >= SWEET_THRESHOLD:
        tags.update(("sweet", "luxurious"))
    if bp.bitter >= BITTER_THRESHOLD:
        tags.update(("bitter", "sophisticated"))
    low, high = BALANCED_BAND
    if low <= bp.sweet <= high and low <= bp.bitter <= high:
        tags.update(("balanced", "harmonious"))
    if bp.sour >= SOUR_THRESHOLD:
        tags.update(("citrus", "bright"))
    if bp.aromatic >= AROMATIC_THRESHOLD:
        tags.add("aromatic")
    if bp.spicy >= SPICY_THRESHOLD:
        tags.update(("spicy", "warming"))

    for tag, keywords in INGREDIENT_FLAVOR_KEYWORDS.items():
        if _has_any(ingredients, keywords):
            tags.add(tag)
    return tags


def _style_tags(raw: RawCocktail, flavor: set[str]) -> set[str]:
    bp = raw.balance_profile
    tags = set(BUILD_STYLE_TAGS.get(raw.build_method, ()))

    if bp.alcoholic >= STRONG_THRESHOLD:
        tags.update(("boozy", "strong"))
    elif bp.alcoholic <= LIGHT_THRESHOLD:
        tags.update(("light", "approachable"))

    if "bubbly" in flavor:
        tags.add("long")

    described = [raw.name.lower(), raw.style.lower(), raw.notes.lower()]
    if _has_any(described, CLASSIC_KEYWORDS):
        tags.update(("classic", "timeless"))
    if _has_any(described, MODERN_KEYWORDS):
        tags.update(("modern", "contemporary"))
    if _has_any(described, EXPERIMENTAL_KEYWORDS):
        tags.update(("experimental", "bold"))
    return tags


def _mood_tags(raw: RawCocktail, flavor: set[str], style: set[str]) -> set[str]:
    tags = {t.strip().lower() for t in raw.mood_tags if t.strip()}
    spirit = raw.base_spirit_category.lower()

    if {"sweet", "luxurious"} <= flavor:
        tags.update(("elegant", "refined"))
    if {"bitter", "sophisticated"} <= flavor:
        tags.update(("sophisticated", "contemplative"))
    if "bubbly" in flavor or ("citrus" in flavor and "refreshing" in style):
        tags.update(("celebratory", "playful"))
    if "tropical" in flavor:
        tags.update(("celebratory", "fun"))
    if "boozy" in style and (any(s in spirit for s in WARMING_SPIRITS) or "warming" in flavor):
        tags.update(("cozy", "intimate"))
    if "experimental" in style or any(s in spirit for s in ADVENTUROUS_SPIRITS):
        tags.update(("adventurous", "bold"))
    if "classic" in style and "spirit-forward" in style:
        tags.add("elegant")

    return tags or set(DEFAULT_MOOD_TAGS)


def _occasion_tags(style: set[str], mood: set[str]) -> set[str]:
    tags: set[str] = set()
    if "celebratory" in mood:
        tags.update(("celebration", "party"))
    if "cozy" in mood:
        tags.update(("nightcap", "winter"))
    if "refreshing" in style or "light" in style:
        tags.update(("daytime", "brunch"))
    if mood & {"elegant", "sophisticated"}:
        tags.update(("dinner", "date-night"))
    if "adventurous" in mood:
        tags.add("tasting")
    if "boozy" in style:
        tags.add("nightcap")
    return tags or set(DEFAULT_OCCASION_TAGS)


def derive_tags(raw: RawCocktail) -> DerivedTags:
    ingredients = [ing.lower() for ing in raw.ingredients]
    flavor = _flavor_tags(raw, ingredients)
    style = _style_tags(raw, flavor)
    mood = _mood_tags(raw, flavor, style)
    occasion = _occasion_tags(style, mood)
    return DerivedTags(
        flavor_tags=frozenset(flavor),
        style_tags=frozenset(style),
        mood_tags=frozenset(mood),
        occasion_tags=frozenset(occasion),
    )


def build_entity(raw: RawCocktail) -> CatalogEntity:
    """Derive tags once and freeze the row into a ``CatalogEntity``."""
    tags = derive_tags(raw)
    return CatalogEntity(
        id=raw.id,
        name=raw.name,
        style=raw.style,
        build_method=raw.build_method,
        base_spirit_category=raw.base_spirit_category.strip().lower(),
        flavor_tags=tags.flavor_tags,
        style_tags=tags.style_tags,
        mood_tags=tags.mood_tags,
        occasion_tags=tags.occasion_tags,
        ingredients=tuple(raw.ingredients),
        balance_profile=raw.balance_profile,
        garnish=raw.garnish,
        glassware=raw.glassware,
        notes=raw.notes,
    )
