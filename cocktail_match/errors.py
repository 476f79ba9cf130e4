from __future__ import annotations


class RecommendationError(Exception):
    """Base class for errors surfaced by the recommendation core."""


class CatalogUnavailable(RecommendationError):
    """The catalog could not be loaded or contains no usable entries."""


class InvalidPreferenceValue(RecommendationError, ValueError):
    """A preference field holds a value outside its enumerated domain."""

    def __init__(self, message: str, fields: list[str] | None = None) -> None:
        super().__init__(message)
        self.fields = fields or []
