from __future__ import annotations

import pytest

from cocktail_match.catalog.models import BuildMethod, CatalogEntity


def _make_entity(
    entity_id: str,
    spirit: str = "gin",
    style: str = "Sour",
    build: BuildMethod = BuildMethod.shaken,
    flavor: tuple[str, ...] = (),
    style_tags: tuple[str, ...] = (),
    mood: tuple[str, ...] = (),
    occasion: tuple[str, ...] = (),
    ingredients: tuple[str, ...] = (),
) -> CatalogEntity:
    """Entity with exactly the given tags; nothing is derived."""
    return CatalogEntity(
        id=entity_id,
        name=entity_id.title(),
        style=style,
        build_method=build,
        base_spirit_category=spirit,
        flavor_tags=flavor,
        style_tags=style_tags,
        mood_tags=mood,
        occasion_tags=occasion,
        ingredients=ingredients,
    )


@pytest.fixture
def make_entity():
    return _make_entity


@pytest.fixture
def scenario_catalog():
    """Martini, Daiquiri and Gimlet from the worked ranking example."""
    return [
        _make_entity("a", "gin", "Martini", BuildMethod.stirred, flavor=("bitter",), style_tags=("classic",)),
        _make_entity("b", "rum", "Daiquiri", BuildMethod.shaken, flavor=("citrus",), style_tags=("light",)),
        _make_entity("c", "gin", "Gimlet", BuildMethod.shaken, flavor=("citrus",), style_tags=("classic",)),
    ]
