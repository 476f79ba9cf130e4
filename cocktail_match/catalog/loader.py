from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List

import pandas as pd
from pydantic import ValidationError

from ..errors import CatalogUnavailable
from .config import DEFAULT_CATALOG_CONFIG, CatalogConfig
from .models import BalanceProfile, BuildMethod, CatalogEntity, RawCocktail
from .tags import build_entity

logger = logging.getLogger(__name__)

_BUILD_LABELS: dict[str, BuildMethod] = {
    "build": BuildMethod.built,
    "build/top": BuildMethod.built,
    "built": BuildMethod.built,
    "shaken": BuildMethod.shaken,
    "shake": BuildMethod.shaken,
    "stirred": BuildMethod.stirred,
    "stir": BuildMethod.stirred,
    "equal parts": BuildMethod.stirred,
    "blended": BuildMethod.blended,
    "frozen": BuildMethod.blended,
    "swizzle": BuildMethod.blended,
}

# Raw column aliases, in priority order, for each balance-profile field.
_INTENSITY_COLUMNS: dict[str, List[str]] = {
    "sweet": ["flavor_profile.sweet", "balance_profile.sweet", "sweetness"],
    "sour": ["flavor_profile.sour", "flavor_profile.citrus", "balance_profile.sour", "acidity"],
    "bitter": ["flavor_profile.bitter", "balance_profile.bitter", "bitterness"],
    "spicy": ["flavor_profile.spicy", "balance_profile.spicy"],
    "aromatic": ["flavor_profile.aromatic", "flavor_profile.floral", "balance_profile.aromatic"],
    "alcoholic": [
        "flavor_profile.alcoholic",
        "flavor_profile.complex",
        "balance_profile.alcoholic",
        "intensity",
    ],
}


def normalize_build_method(label: Any) -> BuildMethod:
    """Map a free-form build label onto ``BuildMethod``; unknown labels are shaken."""
    if label is None or (not isinstance(label, str) and pd.isna(label)):
        return BuildMethod.shaken
    return _BUILD_LABELS.get(str(label).strip().lower(), BuildMethod.shaken)


def _coerce_intensity(value: Any, default: int) -> int:
    if value is None:
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if pd.isna(number):
        return default
    return int(round(number))


def _ingredient_strings(value: Any) -> list[str]:
    """Accept plain strings or ``{"amount", "name"}`` dicts."""
    if not isinstance(value, list):
        return []
    out: list[str] = []
    for item in value:
        if isinstance(item, dict):
            text = f"{item.get('amount') or ''} {item.get('name') or ''}".strip()
        else:
            text = str(item).strip()
        if text:
            out.append(text)
    return out


def _tag_list(value: Any) -> list[str]:
    if isinstance(value, list):
        return [str(v) for v in value]
    return []


def _text(value: Any) -> str:
    if value is None or (not isinstance(value, (list, dict)) and pd.isna(value)):
        return ""
    return str(value)


def _read_records(path: Path) -> list[dict[str, Any]]:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise CatalogUnavailable(f"Could not read catalog at {path}: {exc}") from exc

    if isinstance(payload, dict):
        payload = payload.get("cocktails", [])
    if not isinstance(payload, list):
        raise CatalogUnavailable(f"Catalog at {path} is not a list of cocktails")
    return [r for r in payload if isinstance(r, dict)]


def to_raw_frame(records: list[dict[str, Any]]) -> pd.DataFrame:
    """
    Flatten raw records into the canonical raw-cocktail columns.

    Column naming differs between library exports, so every field is looked
    up through a short alias list.
    """
    df = pd.json_normalize(records)

    def _first_present(columns: List[str]) -> str | None:
        for col in columns:
            if col in df.columns:
                return col
        return None

    col_id = _first_present(["id", "cocktail_id", "slug"])
    col_name = _first_present(["name", "title"])
    col_spirit = _first_present(["base_spirit_category", "base_spirit", "spirit"])
    col_style = _first_present(["style", "family"])
    col_build = _first_present(["build_type", "build_method", "method"])

    canonical = pd.DataFrame(index=df.index)
    canonical["id"] = df[col_id].astype(str) if col_id else df.index.astype(str)
    canonical["name"] = df[col_name] if col_name else ""
    canonical["base_spirit_category"] = df[col_spirit] if col_spirit else ""
    canonical["style"] = df[col_style] if col_style else ""
    canonical["build_method"] = (
        df[col_build].apply(normalize_build_method) if col_build else BuildMethod.shaken
    )

    defaults = BalanceProfile()
    for field, aliases in _INTENSITY_COLUMNS.items():
        col = _first_present(aliases)
        default = getattr(defaults, field)
        if col:
            canonical[field] = df[col].apply(lambda v, d=default: _coerce_intensity(v, d))
        else:
            canonical[field] = default

    for field in ("garnish", "glassware", "notes"):
        canonical[field] = df[field].apply(_text) if field in df.columns else ""

    canonical["ingredients"] = (
        df["ingredients"].apply(_ingredient_strings) if "ingredients" in df.columns else [[]] * len(df)
    )
    for field in ("flavor_tags", "mood_tags"):
        canonical[field] = df[field].apply(_tag_list) if field in df.columns else [[]] * len(df)

    return canonical


def _row_to_raw(row: pd.Series) -> RawCocktail:
    return RawCocktail(
        id=str(row["id"]),
        name=_text(row["name"]),
        base_spirit_category=_text(row["base_spirit_category"]),
        style=_text(row["style"]),
        build_method=row["build_method"],
        balance_profile=BalanceProfile(
            sweet=row["sweet"],
            sour=row["sour"],
            bitter=row["bitter"],
            spicy=row["spicy"],
            aromatic=row["aromatic"],
            alcoholic=row["alcoholic"],
        ),
        ingredients=row["ingredients"],
        garnish=row["garnish"],
        glassware=row["glassware"],
        notes=row["notes"],
        flavor_tags=row["flavor_tags"],
        mood_tags=row["mood_tags"],
    )


def build_catalog(records: list[dict[str, Any]]) -> tuple[CatalogEntity, ...]:
    """Validate raw records, derive their tags and drop duplicate ids."""
    if not records:
        return ()

    frame = to_raw_frame(records)
    entities: list[CatalogEntity] = []
    seen: set[str] = set()
    for idx, row in frame.iterrows():
        try:
            raw = _row_to_raw(row)
        except ValidationError:
            logger.warning("Skipping malformed catalog row %s", idx, exc_info=True)
            continue
        if raw.id in seen:
            logger.warning("Skipping duplicate catalog id %s", raw.id)
            continue
        seen.add(raw.id)
        entities.append(build_entity(raw))
    return tuple(entities)


def load_catalog(config: CatalogConfig = DEFAULT_CATALOG_CONFIG) -> tuple[CatalogEntity, ...]:
    """
    Load the cocktail library from ``config.catalog_path``.

    Steps:
    - Read the JSON file (a list, or an object with a ``cocktails`` list).
    - Map raw fields into the canonical raw schema.
    - Derive tags and freeze each row into a ``CatalogEntity``.

    Raises ``CatalogUnavailable`` when nothing usable comes out.
    """
    path = Path(config.catalog_path)
    if not path.is_file():
        raise CatalogUnavailable(f"Catalog file not found: {path}")

    catalog = build_catalog(_read_records(path))
    if not catalog:
        raise CatalogUnavailable(f"Catalog at {path} has no usable cocktails")

    logger.info("Loaded %d cocktails from %s", len(catalog), path)
    return catalog
