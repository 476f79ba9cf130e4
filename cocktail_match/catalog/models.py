from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BuildMethod(str, Enum):
    built = "built"
    shaken = "shaken"
    stirred = "stirred"
    blended = "blended"


class BalanceProfile(BaseModel):
    """Six flavor intensities, conventionally 0-10 but not bounded."""

    model_config = ConfigDict(frozen=True)

    sweet: int = 5
    sour: int = 5
    bitter: int = 3
    spicy: int = 4
    aromatic: int = 6
    alcoholic: int = 7


class RawCocktail(BaseModel):
    """A catalog row as supplied upstream, before tags are derived."""

    id: str = Field(..., min_length=1)
    name: str
    base_spirit_category: str = ""
    style: str = ""
    build_method: BuildMethod = BuildMethod.shaken
    balance_profile: BalanceProfile = Field(default_factory=BalanceProfile)
    ingredients: list[str] = Field(default_factory=list)
    garnish: str = ""
    glassware: str = ""
    notes: str = ""
    flavor_tags: list[str] = Field(default_factory=list)
    mood_tags: list[str] = Field(default_factory=list)


class CatalogEntity(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    style: str
    build_method: BuildMethod
    base_spirit_category: str
    flavor_tags: frozenset[str] = frozenset()
    style_tags: frozenset[str] = frozenset()
    mood_tags: frozenset[str] = frozenset()
    occasion_tags: frozenset[str] = frozenset()
    ingredients: tuple[str, ...] = ()
    balance_profile: BalanceProfile = Field(default_factory=BalanceProfile)
    garnish: str = ""
    glassware: str = ""
    notes: str = ""

    @field_validator("flavor_tags", "style_tags", "mood_tags", "occasion_tags", mode="before")
    @classmethod
    def _normalise_tags(cls, value):
        return frozenset(str(t).strip().lower() for t in value or () if str(t).strip())

    @property
    def descriptive_tags(self) -> frozenset[str]:
        """Flavor and style tags together, the sets most dimensions match on."""
        return self.flavor_tags | self.style_tags

    def has_ingredient(self, keywords: tuple[str, ...] | list[str]) -> bool:
        """Case-insensitive substring search over the ingredient list."""
        lowered = [ing.lower() for ing in self.ingredients]
        return any(k in ing for ing in lowered for k in keywords)

    def spirit_is(self, *spirits: str) -> bool:
        category = self.base_spirit_category.lower()
        return any(s in category for s in spirits)

    def style_has(self, *labels: str) -> bool:
        style = self.style.lower()
        return any(label in style for label in labels)
