from __future__ import annotations

import itertools
import random

import pytest

from cocktail_match.catalog.loader import load_catalog
from cocktail_match.errors import CatalogUnavailable, InvalidPreferenceValue
from cocktail_match.recommendations.config import EngineConfig
from cocktail_match.recommendations.coverage import DIMENSIONS
from cocktail_match.recommendations.engine import HOUSE_MENU, RecommendationEngine, display_score
from cocktail_match.recommendations.models import PreferenceVector

BITTER_CLASSIC = PreferenceVector(sweet_vs_bitter="bitter", classic_vs_experimental="classic")
BUNDLED = load_catalog()


def _engine(catalog, **config) -> RecommendationEngine:
    return RecommendationEngine(catalog_provider=lambda: catalog, config=EngineConfig(**config))


def _all_vectors():
    names = [name for name, _ in DIMENSIONS]
    domains = [[m.value for m in enum] for _, enum in DIMENSIONS]
    for combo in itertools.product(*domains):
        yield PreferenceVector(**dict(zip(names, combo)))


class TestWorkedExamples:
    def test_bitter_classic(self, scenario_catalog):
        result = _engine(scenario_catalog).recommend(BITTER_CLASSIC, max_adjacent=2)
        assert result.primary.id == "a"
        assert [e.id for e in result.adjacent] == ["b", "c"]
        assert result.match_score == 98
        assert result.source == "catalog"
        assert not result.used_fallback

    def test_empty_preferences(self, scenario_catalog):
        result = _engine(scenario_catalog).recommend(PreferenceVector())
        assert result.primary.id == "a"
        assert {e.id for e in result.adjacent} == {"b", "c"}
        assert result.match_score == 85

    def test_fuzzy_labels_reported(self, make_entity):
        catalog = [make_entity("only", ingredients=("1 oz Honey",))]
        result = _engine(catalog).recommend(PreferenceVector(sweet_vs_bitter="sweet"))
        assert result.used_fallback
        assert result.fuzzy_match_labels == ["sweet-ingredients"]


class TestDisplayScore:
    def test_band(self):
        assert display_score(10) == 85
        assert display_score(90.4) == 90
        assert display_score(100) == 98

    def test_custom_band(self):
        assert display_score(70, EngineConfig(display_floor=60, display_ceiling=80)) == 70


class TestCatalogUnavailable:
    def test_empty_catalog(self):
        with pytest.raises(CatalogUnavailable):
            _engine([]).recommend(PreferenceVector())

    def test_provider_failure(self):
        def broken():
            raise OSError("disk gone")

        engine = RecommendationEngine(catalog_provider=broken)
        with pytest.raises(CatalogUnavailable):
            engine.recommend(PreferenceVector())
        with pytest.raises(CatalogUnavailable):
            engine.recommend_random()

    def test_fallback_menu_is_labelled(self):
        result = _engine([], fallback_menu=True).recommend(PreferenceVector())
        assert result.source == "fallback"
        assert result.primary.id == HOUSE_MENU[0].id
        assert [e.id for e in result.adjacent] == [HOUSE_MENU[1].id]
        assert result.total_candidates == 0

    def test_fallback_menu_respects_max_adjacent(self):
        result = _engine([], fallback_menu=True).recommend(PreferenceVector(), max_adjacent=0)
        assert result.adjacent == []

    def test_random_fallback_menu(self):
        pick = _engine([], fallback_menu=True).recommend_random()
        assert pick in HOUSE_MENU


class TestRecency:
    def test_recent_picks_are_skipped(self, make_entity):
        catalog = [make_entity(f"e{i:02d}") for i in range(25)]
        engine = _engine(catalog)
        first = engine.recommend(PreferenceVector(), max_adjacent=2, session_id="s")
        shown = {first.primary.id, *(e.id for e in first.adjacent)}
        second = engine.recommend(PreferenceVector(), max_adjacent=2, session_id="s")
        assert second.total_candidates == 22
        assert second.primary.id not in shown
        assert not shown & {e.id for e in second.adjacent}

    def test_starvation_falls_back_to_full_catalog(self, make_entity):
        catalog = [make_entity(f"e{i:02d}") for i in range(12)]
        engine = _engine(catalog)
        engine.recommend(PreferenceVector(), max_adjacent=8, session_id="s")
        again = engine.recommend(PreferenceVector(), max_adjacent=8, session_id="s")
        assert again.total_candidates == 12

    def test_sessions_do_not_interfere(self, make_entity):
        catalog = [make_entity(f"e{i:02d}") for i in range(25)]
        engine = _engine(catalog)
        alice = engine.recommend(PreferenceVector(), session_id="alice")
        bob = engine.recommend(PreferenceVector(), session_id="bob")
        assert alice.primary.id == bob.primary.id

    def test_reset_recency(self, make_entity):
        catalog = [make_entity(f"e{i:02d}") for i in range(25)]
        engine = _engine(catalog)
        first = engine.recommend(PreferenceVector(), session_id="s")
        engine.reset_recency("s")
        assert engine.recommend(PreferenceVector(), session_id="s").primary.id == first.primary.id

    def test_primary_and_adjacent_recorded(self, scenario_catalog):
        engine = _engine(scenario_catalog)
        engine.recommend(BITTER_CLASSIC, max_adjacent=1, session_id="s")
        assert engine.registry.tracker("s").recent_ids() == ["a", "b"]

    def test_session_count_is_bounded(self, scenario_catalog):
        engine = _engine(scenario_catalog, max_sessions=10)
        for i in range(50):
            engine.recommend(PreferenceVector(), session_id=f"visitor-{i}")
        assert len(engine.registry) == 10
        assert engine.registry.tracker("visitor-49").recent_ids()


class TestRandom:
    def test_random_pick_from_catalog(self, scenario_catalog):
        engine = RecommendationEngine(catalog_provider=lambda: scenario_catalog, rng=random.Random(3))
        pick = engine.recommend_random(session_id="s")
        assert pick in scenario_catalog
        assert engine.registry.tracker("s").recent_ids() == [pick.id]

    def test_random_skips_recent_picks(self, make_entity):
        catalog = [make_entity(f"e{i:02d}") for i in range(25)]
        engine = RecommendationEngine(catalog_provider=lambda: catalog, rng=random.Random(7))
        picks = [engine.recommend_random(session_id="s").id for _ in range(15)]
        assert len(set(picks)) == 15

    def test_seeded_random_is_reproducible(self):
        picks = [
            RecommendationEngine(catalog_provider=lambda: BUNDLED, rng=random.Random(11)).recommend_random().id
            for _ in range(2)
        ]
        assert picks[0] == picks[1]


def test_top_k_primary_from_window(make_entity):
    catalog = [make_entity(f"e{i:02d}") for i in range(5)]
    engine = RecommendationEngine(
        catalog_provider=lambda: catalog,
        config=EngineConfig(primary_top_k=3),
        rng=random.Random(5),
    )
    for _ in range(10):
        engine.reset_recency()
        assert engine.recommend(PreferenceVector()).primary.id in {"e00", "e01", "e02"}


def test_default_max_adjacent_from_config():
    result = _engine(BUNDLED, max_adjacent=3).recommend(PreferenceVector())
    assert len(result.adjacent) <= 3


def test_invariants_over_bundled_catalog():
    engine = _engine(BUNDLED)
    for prefs in _all_vectors():
        result = engine.recommend(prefs, session_id="sweep")
        adjacent_ids = [e.id for e in result.adjacent]
        assert 0 <= result.match_score <= 100
        assert 85 <= result.match_score <= 98
        assert result.primary.id not in adjacent_ids
        assert len(adjacent_ids) == len(set(adjacent_ids))
        assert len(adjacent_ids) <= 8


@pytest.mark.parametrize("prefs", [PreferenceVector(), BITTER_CLASSIC, PreferenceVector(mood_preference="cozy")])
def test_alternates_include_another_spirit(prefs):
    result = _engine(BUNDLED).recommend(prefs, max_adjacent=1)
    assert result.adjacent[0].base_spirit_category != result.primary.base_spirit_category


class TestFlavorJourney:
    def test_matches_spirit_and_family(self, make_entity):
        catalog = [
            make_entity("gin-citrus", "gin", flavor=("citrus",)),
            make_entity("gin-herbal", "gin", style_tags=("herbal",)),
            make_entity("rum-citrus", "rum", flavor=("citrus",)),
        ]
        picks = _engine(catalog).flavor_journey(" Gin ", flavor_family="Citrus")
        assert [e.id for e in picks] == ["gin-citrus"]

    def test_specific_flavor_matches_ingredient(self, make_entity):
        catalog = [
            make_entity("buck", "gin", ingredients=("2 oz Gin", "0.5 oz Ginger Syrup")),
            make_entity("plain", "gin", ingredients=("2 oz Gin",)),
        ]
        picks = _engine(catalog).flavor_journey("gin", specific_flavor="ginger")
        assert [e.id for e in picks] == ["buck"]

    def test_no_match_is_empty(self, make_entity):
        catalog = [make_entity("e1", "gin", flavor=("citrus",))]
        assert _engine(catalog).flavor_journey("rum", flavor_family="citrus") == []

    def test_requires_spirit_and_flavor(self, scenario_catalog):
        engine = _engine(scenario_catalog)
        with pytest.raises(InvalidPreferenceValue) as exc:
            engine.flavor_journey("  ", flavor_family="citrus")
        assert exc.value.fields == ["spirit"]
        with pytest.raises(InvalidPreferenceValue) as exc:
            engine.flavor_journey("gin")
        assert exc.value.fields == ["flavor_family", "specific_flavor"]

    def test_limit_and_recent_skipped(self, make_entity):
        catalog = [make_entity(f"g{i:02d}", "gin", flavor=("citrus",)) for i in range(30)]
        engine = _engine(catalog)
        first = engine.flavor_journey("gin", flavor_family="citrus", session_id="s")
        second = engine.flavor_journey("gin", flavor_family="citrus", session_id="s")
        assert len(first) == len(second) == 12
        assert not {e.id for e in first} & {e.id for e in second}

    def test_few_fresh_matches_reuse_all(self, make_entity):
        catalog = [make_entity(f"g{i:02d}", "gin", flavor=("citrus",)) for i in range(10)]
        engine = _engine(catalog)
        engine.flavor_journey("gin", flavor_family="citrus", session_id="s")
        again = engine.flavor_journey("gin", flavor_family="citrus", session_id="s")
        assert {e.id for e in again} == {e.id for e in catalog}

    def test_own_memory_and_reset(self, make_entity):
        catalog = [make_entity(f"g{i:02d}", "gin", flavor=("citrus",)) for i in range(30)]
        engine = _engine(catalog)
        engine.flavor_journey("gin", flavor_family="citrus", session_id="s")
        assert len(engine.registry) == 0
        assert len(engine.journey_registry.tracker("s")) == 12
        engine.reset_flavor_journey("s")
        assert len(engine.journey_registry.tracker("s")) == 0

    def test_catalog_unavailable(self):
        with pytest.raises(CatalogUnavailable):
            _engine([]).flavor_journey("gin", specific_flavor="lemon")

    def test_fallback_menu(self):
        picks = _engine([], fallback_menu=True).flavor_journey("gin", specific_flavor="lemon")
        assert [e.id for e in picks] == ["house-gin-fizz"]
