from __future__ import annotations

import json
from unittest.mock import patch

import pytest

from cocktail_match.catalog.config import CatalogConfig
from cocktail_match.catalog.data_store import clear_catalog_cache, get_catalog
from cocktail_match.catalog.loader import build_catalog, load_catalog, normalize_build_method
from cocktail_match.catalog.models import BalanceProfile, BuildMethod, CatalogEntity
from cocktail_match.errors import CatalogUnavailable

SAMPLE_RECORDS = [
    {
        "id": "s1",
        "name": "Test Sour",
        "base_spirit": "Whiskey",
        "style": "Sour",
        "build_type": "Shake",
        "ingredients": [
            {"amount": "2 oz", "name": "Bourbon"},
            {"amount": "0.75 oz", "name": "Lemon Juice"},
        ],
        "garnish": "Cherry",
    },
    {
        "id": "s2",
        "name": "Test Highball",
        "base_spirit": "Vodka",
        "style": "Highball",
        "build_type": "Build/Top",
        "flavor_profile": {"sweet": 3, "sour": 4, "bitter": 1, "spicy": 0, "aromatic": 2, "alcoholic": 3},
        "ingredients": ["2 oz Vodka", "Top Soda Water"],
    },
]


def _write(tmp_path, payload) -> CatalogConfig:
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return CatalogConfig(catalog_path=path)


class TestBundledCatalog:
    def test_loads(self):
        catalog = load_catalog()
        assert len(catalog) == 24
        assert all(isinstance(c, CatalogEntity) for c in catalog)
        assert len({c.id for c in catalog}) == len(catalog)

    def test_tags_derived(self):
        for entity in load_catalog():
            assert entity.flavor_tags
            assert entity.style_tags
            assert entity.mood_tags
            assert entity.occasion_tags

    def test_spirits_lowercased(self):
        spirits = {c.base_spirit_category for c in load_catalog()}
        assert "gin" in spirits
        assert all(s == s.lower() for s in spirits)


@pytest.mark.parametrize(
    "label,expected",
    [
        ("Build", BuildMethod.built),
        ("Build/Top", BuildMethod.built),
        ("Shaken", BuildMethod.shaken),
        ("Stirred", BuildMethod.stirred),
        ("Equal Parts", BuildMethod.stirred),
        ("Frozen", BuildMethod.blended),
        ("Swizzle", BuildMethod.blended),
        ("Thrown", BuildMethod.shaken),
        (None, BuildMethod.shaken),
    ],
)
def test_normalize_build_method(label, expected):
    assert normalize_build_method(label) is expected


class TestLoadFromFile:
    def test_aliases_and_defaults(self, tmp_path):
        catalog = load_catalog(_write(tmp_path, SAMPLE_RECORDS))
        by_id = {c.id: c for c in catalog}
        sour, highball = by_id["s1"], by_id["s2"]

        assert sour.base_spirit_category == "whiskey"
        assert sour.build_method is BuildMethod.shaken
        assert sour.balance_profile == BalanceProfile()
        assert sour.ingredients == ("2 oz Bourbon", "0.75 oz Lemon Juice")
        assert sour.garnish == "Cherry"
        assert sour.glassware == ""

        assert highball.build_method is BuildMethod.built
        assert highball.balance_profile.alcoholic == 3
        assert "bubbly" in highball.flavor_tags

    def test_wrapped_payload(self, tmp_path):
        catalog = load_catalog(_write(tmp_path, {"cocktails": SAMPLE_RECORDS}))
        assert [c.id for c in catalog] == ["s1", "s2"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogUnavailable):
            load_catalog(CatalogConfig(catalog_path=tmp_path / "nope.json"))

    def test_empty_file(self, tmp_path):
        with pytest.raises(CatalogUnavailable):
            load_catalog(_write(tmp_path, []))

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(CatalogUnavailable):
            load_catalog(CatalogConfig(catalog_path=path))


class TestBuildCatalog:
    def test_duplicate_ids_skipped(self):
        records = SAMPLE_RECORDS + [dict(SAMPLE_RECORDS[0], name="Impostor")]
        catalog = build_catalog(records)
        assert [c.name for c in catalog] == ["Test Sour", "Test Highball"]

    def test_malformed_rows_skipped(self):
        records = SAMPLE_RECORDS + [dict(SAMPLE_RECORDS[1], id="")]
        assert [c.id for c in build_catalog(records)] == ["s1", "s2"]

    def test_no_records(self):
        assert build_catalog([]) == ()

    def test_null_ingredient_parts_dropped(self):
        record = dict(
            SAMPLE_RECORDS[0],
            ingredients=[{"amount": None, "name": "Gin"}, {"amount": "1 oz", "name": None}, {"amount": None}],
        )
        assert build_catalog([record])[0].ingredients == ("Gin", "1 oz")


class TestDataStore:
    def test_caches_until_cleared(self):
        clear_catalog_cache()
        with patch("cocktail_match.catalog.data_store.load_catalog", return_value=("x",)) as mock_load:
            assert get_catalog() == ("x",)
            assert get_catalog() == ("x",)
            assert mock_load.call_count == 1
            clear_catalog_cache()
            get_catalog()
            assert mock_load.call_count == 2
        clear_catalog_cache()
