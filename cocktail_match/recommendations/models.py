from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..catalog.models import BuildMethod, CatalogEntity
from ..errors import InvalidPreferenceValue


class SweetVsBitter(str, Enum):
    sweet = "sweet"
    bitter = "bitter"
    balanced = "balanced"


class CitrusVsStone(str, Enum):
    citrus = "citrus"
    stone = "stone"
    tropical = "tropical"


class LightVsBoozy(str, Enum):
    light = "light"
    boozy = "boozy"
    medium = "medium"


class ClassicVsExperimental(str, Enum):
    classic = "classic"
    modern = "modern"
    experimental = "experimental"


class MoodPreference(str, Enum):
    celebratory = "celebratory"
    elegant = "elegant"
    cozy = "cozy"
    adventurous = "adventurous"


class PreferenceVector(BaseModel):
    """Quiz answers. Every dimension is optional; an empty vector is valid."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    sweet_vs_bitter: SweetVsBitter | None = Field(default=None, alias="sweetVsBitter")
    citrus_vs_stone: CitrusVsStone | None = Field(default=None, alias="citrusVsStone")
    light_vs_boozy: LightVsBoozy | None = Field(default=None, alias="lightVsBoozy")
    classic_vs_experimental: ClassicVsExperimental | None = Field(
        default=None, alias="classicVsExperimental"
    )
    mood_preference: MoodPreference | None = Field(default=None, alias="moodPreference")

    def answered(self) -> dict[str, str]:
        """Present dimensions only, keyed by field name."""
        values = {k: getattr(self, k) for k in PreferenceVector.model_fields}
        return {k: v.value for k, v in values.items() if v is not None}


def parse_preferences(data: dict[str, Any] | None) -> PreferenceVector:
    """Validate raw quiz answers at the boundary."""
    try:
        return PreferenceVector.model_validate(data or {})
    except ValidationError as exc:
        fields = [".".join(str(p) for p in err["loc"]) for err in exc.errors()]
        raise InvalidPreferenceValue(
            f"Invalid preference value(s): {', '.join(fields)}", fields=fields
        ) from exc


@dataclass
class ScoredCandidate:
    entity: CatalogEntity
    score: float
    matching_factor_count: int = 0
    fuzzy_match_labels: list[str] = field(default_factory=list)
    used_fallback: bool = False


class RecommendationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    primary: CatalogEntity
    adjacent: list[CatalogEntity] = Field(default_factory=list)
    match_score: int = Field(..., ge=0, le=100)
    fuzzy_match_labels: list[str] = Field(default_factory=list)
    used_fallback: bool = False
    source: Literal["catalog", "fallback"] = "catalog"
    total_candidates: int = 0


# ── HTTP payloads ────────────────────────────────────────────────────────


class CocktailOut(BaseModel):
    id: str
    name: str
    style: str
    build_method: BuildMethod
    base_spirit_category: str
    ingredients: list[str]
    garnish: str
    glassware: str
    flavor_tags: list[str]
    style_tags: list[str]
    mood_tags: list[str]
    occasion_tags: list[str]

    @classmethod
    def from_entity(cls, entity: CatalogEntity) -> CocktailOut:
        return cls(
            id=entity.id,
            name=entity.name,
            style=entity.style,
            build_method=entity.build_method,
            base_spirit_category=entity.base_spirit_category,
            ingredients=list(entity.ingredients),
            garnish=entity.garnish,
            glassware=entity.glassware,
            flavor_tags=sorted(entity.flavor_tags),
            style_tags=sorted(entity.style_tags),
            mood_tags=sorted(entity.mood_tags),
            occasion_tags=sorted(entity.occasion_tags),
        )


class RecommendationResponse(BaseModel):
    primary: CocktailOut
    adjacent: list[CocktailOut]
    match_score: int
    fuzzy_match_labels: list[str]
    used_fallback: bool
    source: Literal["catalog", "fallback"]
    total_candidates: int

    @classmethod
    def from_result(cls, result: RecommendationResult) -> RecommendationResponse:
        return cls(
            primary=CocktailOut.from_entity(result.primary),
            adjacent=[CocktailOut.from_entity(c) for c in result.adjacent],
            match_score=result.match_score,
            fuzzy_match_labels=list(result.fuzzy_match_labels),
            used_fallback=result.used_fallback,
            source=result.source,
            total_candidates=result.total_candidates,
        )


class ResetResponse(BaseModel):
    status: str
    session_id: str


class FlavorJourneyRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    spirit: str
    flavor_family: str | None = None
    specific_flavor: str | None = None


class FlavorJourneyResponse(BaseModel):
    cocktails: list[CocktailOut]
    total: int
