"""
Flavor-journey browsing.

The user picks a base spirit and then a flavor family (a tag such as
"citrus" or "herbal") and/or a specific flavor ("lemon", "ginger"). A
cocktail matches when its spirit is the chosen one and either flavor choice
hits one of its tags; the specific flavor may also hit an ingredient name.
"""
from __future__ import annotations

from dataclasses import dataclass

from ..catalog.models import CatalogEntity
from ..errors import InvalidPreferenceValue


@dataclass(frozen=True)
class JourneyQuery:
    spirit: str
    flavor_family: str | None = None
    specific_flavor: str | None = None

    @classmethod
    def build(
        cls,
        spirit: str | None,
        flavor_family: str | None = None,
        specific_flavor: str | None = None,
    ) -> JourneyQuery:
        """Normalise the three choices; a spirit and at least one flavor are required."""
        spirit = (spirit or "").strip().lower()
        flavor_family = (flavor_family or "").strip().lower() or None
        specific_flavor = (specific_flavor or "").strip().lower() or None

        missing = []
        if not spirit:
            missing.append("spirit")
        if flavor_family is None and specific_flavor is None:
            missing.extend(["flavor_family", "specific_flavor"])
        if missing:
            raise InvalidPreferenceValue(
                f"Flavor journey needs: {', '.join(missing)}", fields=missing
            )
        return cls(spirit=spirit, flavor_family=flavor_family, specific_flavor=specific_flavor)

    def matches(self, entity: CatalogEntity) -> bool:
        if entity.base_spirit_category != self.spirit:
            return False
        tags = entity.flavor_tags | entity.style_tags | entity.mood_tags
        if self.flavor_family and self.flavor_family in tags:
            return True
        if self.specific_flavor:
            return self.specific_flavor in tags or entity.has_ingredient((self.specific_flavor,))
        return False

