from __future__ import annotations

import logging
import random
from typing import Callable, Sequence

from ..catalog.data_store import get_catalog
from ..catalog.models import BalanceProfile, BuildMethod, CatalogEntity, RawCocktail
from ..catalog.tags import build_entity
from ..errors import CatalogUnavailable
from .config import DEFAULT_ENGINE_CONFIG, EngineConfig
from .diversity import select_adjacent
from .flavor_journey import JourneyQuery
from .models import PreferenceVector, RecommendationResult
from .ranking import pick_primary, rank
from .recency import RecencyRegistry

logger = logging.getLogger(__name__)

CatalogProvider = Callable[[], Sequence[CatalogEntity]]

# Served only when ``EngineConfig.fallback_menu`` is on and the catalog is down.
HOUSE_MENU: tuple[CatalogEntity, ...] = tuple(
    build_entity(raw)
    for raw in (
        RawCocktail(
            id="house-old-fashioned",
            name="House Old Fashioned",
            base_spirit_category="whiskey",
            style="Old Fashioned",
            build_method=BuildMethod.stirred,
            balance_profile=BalanceProfile(sweet=4, sour=1, bitter=5, spicy=3, aromatic=6, alcoholic=8),
            ingredients=["2 oz Bourbon", "0.25 oz Demerara Syrup", "2 dashes Angostura Bitters"],
            garnish="Orange peel",
            glassware="Rocks",
            notes="Classic house standard.",
        ),
        RawCocktail(
            id="house-gin-fizz",
            name="House Gin Fizz",
            base_spirit_category="gin",
            style="Fizz",
            build_method=BuildMethod.shaken,
            balance_profile=BalanceProfile(sweet=5, sour=6, bitter=2, spicy=1, aromatic=6, alcoholic=4),
            ingredients=["2 oz Gin", "0.75 oz Lemon Juice", "0.75 oz Simple Syrup", "Top Soda Water"],
            garnish="Lemon wheel",
            glassware="Highball",
            notes="Light, bright and bubbly.",
        ),
    )
)


def display_score(score: float, config: EngineConfig = DEFAULT_ENGINE_CONFIG) -> int:
    """Round a raw score into the consumer-facing confidence band."""
    return min(config.display_ceiling, max(config.display_floor, round(score)))


class RecommendationEngine:
    """
    Recommendation pipeline over a catalog snapshot.

    Responsibilities:
    - Apply per-session recency filtering without ever starving the ranking.
    - Rank, pick the primary and select diverse alternates.
    - Record what was shown and derive the displayed match score.
    - Serve the flavor-journey browse path with its own recency memory.
    - Surface ``CatalogUnavailable`` (or the labelled house menu when enabled).
    """

    def __init__(
        self,
        catalog_provider: CatalogProvider = get_catalog,
        config: EngineConfig = DEFAULT_ENGINE_CONFIG,
        registry: RecencyRegistry | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.catalog_provider = catalog_provider
        self.config = config
        if registry is None:
            registry = RecencyRegistry(config.max_recent, config.max_sessions)
        self.registry = registry
        self.journey_registry = RecencyRegistry(config.journey_max_recent, config.max_sessions)
        self.rng = rng or random.Random(config.random_seed)

    # ── Catalog access ─────────────────────────────────────────────────────

    def _load(self) -> list[CatalogEntity]:
        try:
            catalog = list(self.catalog_provider())
        except CatalogUnavailable:
            raise
        except Exception as exc:
            raise CatalogUnavailable(f"Catalog provider failed: {exc}") from exc
        if not catalog:
            raise CatalogUnavailable("Catalog is empty")
        return catalog

    def _fallback_result(self, max_adjacent: int, reason: Exception) -> RecommendationResult:
        logger.warning("Serving house menu, catalog unavailable: %s", reason)
        primary, *rest = HOUSE_MENU
        return RecommendationResult(
            primary=primary,
            adjacent=rest[:max_adjacent],
            match_score=self.config.display_floor,
            source="fallback",
            total_candidates=0,
        )

    def _candidates(self, catalog: list[CatalogEntity], session_id: str | None) -> list[CatalogEntity]:
        tracker = self.registry.tracker(session_id)
        fresh = tracker.filter_out(catalog)
        if len(fresh) < self.config.min_candidates:
            if len(tracker):
                logger.warning(
                    "Only %d fresh cocktails for session %s, ranking full catalog",
                    len(fresh), session_id,
                )
            return catalog
        return fresh

    # ── Public operations ──────────────────────────────────────────────────

    def recommend(
        self,
        prefs: PreferenceVector | None = None,
        max_adjacent: int | None = None,
        session_id: str | None = None,
    ) -> RecommendationResult:
        prefs = prefs or PreferenceVector()
        if max_adjacent is None:
            max_adjacent = self.config.max_adjacent
        max_adjacent = max(0, max_adjacent)

        try:
            catalog = self._load()
        except CatalogUnavailable as exc:
            if self.config.fallback_menu:
                return self._fallback_result(max_adjacent, exc)
            raise

        candidates = self._candidates(catalog, session_id)
        ranked = rank(candidates, prefs, self.config)
        best, remainder = pick_primary(ranked, self.config.primary_top_k, self.rng)
        adjacent = select_adjacent(remainder, best.entity, max_adjacent, self.config)

        tracker = self.registry.tracker(session_id)
        tracker.record(best.entity)
        tracker.record_all(adjacent)

        logger.info(
            "Recommended %s (score %.1f, %d adjacent, %d candidates)",
            best.entity.id, best.score, len(adjacent), len(candidates),
        )
        return RecommendationResult(
            primary=best.entity,
            adjacent=adjacent,
            match_score=display_score(best.score, self.config),
            fuzzy_match_labels=list(best.fuzzy_match_labels),
            used_fallback=best.used_fallback,
            total_candidates=len(candidates),
        )

    def recommend_random(self, session_id: str | None = None) -> CatalogEntity:
        """
        Uniform pick ignoring preferences.

        The draw is over the catalog minus the session's recent ids, so up to
        ``max_recent`` cocktails can be excluded. When that would leave fewer
        than ``min_candidates`` the whole catalog is used.
        """
        try:
            catalog = self._load()
        except CatalogUnavailable:
            if self.config.fallback_menu:
                logger.warning("Serving house menu for random pick")
                return self.rng.choice(HOUSE_MENU)
            raise

        pick = self.rng.choice(self._candidates(catalog, session_id))
        self.registry.tracker(session_id).record(pick)
        return pick

    def reset_recency(self, session_id: str | None = None) -> None:
        self.registry.reset(session_id)

    def flavor_journey(
        self,
        spirit: str,
        flavor_family: str | None = None,
        specific_flavor: str | None = None,
        session_id: str | None = None,
    ) -> list[CatalogEntity]:
        """
        Browse cocktails by spirit plus flavor, in shuffled order.

        Recently browsed ids are skipped unless no more than
        ``journey_min_fresh`` fresh matches remain, in which case every match
        is eligible again. At most ``journey_limit`` cocktails are returned;
        no match yields an empty list.
        """
        query = JourneyQuery.build(spirit, flavor_family, specific_flavor)
        try:
            catalog = self._load()
        except CatalogUnavailable as exc:
            if not self.config.fallback_menu:
                raise
            logger.warning("Flavor journey over house menu, catalog unavailable: %s", exc)
            catalog = list(HOUSE_MENU)

        matches = [e for e in catalog if query.matches(e)]
        tracker = self.journey_registry.tracker(session_id)
        fresh = tracker.filter_out(matches)
        pool = fresh if len(fresh) > self.config.journey_min_fresh else matches

        pool = list(pool)
        self.rng.shuffle(pool)
        picked = pool[: self.config.journey_limit]
        tracker.record_all(picked)

        logger.info(
            "Flavor journey %s/%s/%s: %d matches, returned %d",
            query.spirit, query.flavor_family, query.specific_flavor, len(matches), len(picked),
        )
        return picked

    def reset_flavor_journey(self, session_id: str | None = None) -> None:
        self.journey_registry.reset(session_id)


# ---------------------------------------------------------------------------
# Module-level engine used by the HTTP layer
# ---------------------------------------------------------------------------

_engine: RecommendationEngine | None = None


def get_engine() -> RecommendationEngine:
    global _engine
    if _engine is None:
        _engine = RecommendationEngine()
    return _engine


def set_engine(engine: RecommendationEngine | None) -> None:
    """Replace (or with ``None`` drop) the shared engine."""
    global _engine
    _engine = engine
