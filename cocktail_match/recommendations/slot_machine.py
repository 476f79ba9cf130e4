"""
Slot-machine entry point.

Three reels (flavor, mood, style) each stop on one attribute. A spin is
translated into a ``PreferenceVector`` so the regular engine can rank it.
Attributes with no quiz counterpart (e.g. mood "mysterious") simply leave that
dimension unanswered.
"""
from __future__ import annotations

import random

from pydantic import BaseModel, ConfigDict

from ..errors import InvalidPreferenceValue
from .models import PreferenceVector

FLAVOR_ATTRIBUTES = (
    "sweet", "bitter", "citrus", "herbal", "spicy",
    "fruity", "floral", "smoky", "creamy", "tart",
)
MOOD_ATTRIBUTES = (
    "adventurous", "elegant", "playful", "cozy", "celebratory",
    "sophisticated", "bold", "refreshing", "mysterious", "classic",
)
STYLE_ATTRIBUTES = (
    "classic", "experimental", "light", "boozy", "shaken",
    "stirred", "built", "tropical", "seasonal", "premium",
)

# (dimension, reel, {option: reel values})
_MAPPINGS: tuple[tuple[str, str, dict[str, tuple[str, ...]]], ...] = (
    ("sweet_vs_bitter", "flavor", {
        "sweet": ("sweet", "fruity", "creamy"),
        "bitter": ("bitter", "herbal", "smoky"),
    }),
    ("citrus_vs_stone", "flavor", {
        "citrus": ("citrus", "tart"),
        "stone": ("fruity", "sweet", "creamy"),
    }),
    ("light_vs_boozy", "style", {
        "light": ("light", "built", "tropical"),
        "boozy": ("boozy", "stirred", "premium"),
    }),
    ("classic_vs_experimental", "style", {
        "classic": ("classic", "stirred", "premium"),
        "experimental": ("experimental", "tropical", "seasonal"),
    }),
    ("mood_preference", "mood", {
        "celebratory": ("celebratory", "party", "festive"),
        "elegant": ("elegant", "sophisticated", "refined"),
        "cozy": ("cozy", "intimate", "warm"),
        "adventurous": ("adventurous", "bold", "exciting"),
    }),
)


class SlotSpin(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    flavor: str
    mood: str
    style: str


def _check(spin: SlotSpin) -> None:
    reels = {
        "flavor": (spin.flavor.lower(), FLAVOR_ATTRIBUTES),
        "mood": (spin.mood.lower(), MOOD_ATTRIBUTES),
        "style": (spin.style.lower(), STYLE_ATTRIBUTES),
    }
    bad = [name for name, (value, allowed) in reels.items() if value not in allowed]
    if bad:
        raise InvalidPreferenceValue(f"Unknown reel value(s): {', '.join(bad)}", fields=bad)


def slot_to_preferences(spin: SlotSpin) -> PreferenceVector:
    _check(spin)
    values = {"flavor": spin.flavor.lower(), "mood": spin.mood.lower(), "style": spin.style.lower()}

    answers: dict[str, str] = {}
    for dimension, reel, options in _MAPPINGS:
        for option, triggers in options.items():
            if values[reel] in triggers:
                answers[dimension] = option
                break
    return PreferenceVector.model_validate(answers)


def spin_reels(rng: random.Random | None = None) -> SlotSpin:
    rng = rng or random.Random()
    return SlotSpin(
        flavor=rng.choice(FLAVOR_ATTRIBUTES),
        mood=rng.choice(MOOD_ATTRIBUTES),
        style=rng.choice(STYLE_ATTRIBUTES),
    )
