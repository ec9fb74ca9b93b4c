import json

import pytest

from burgerlab.ingest import nutrition_tables
from burgerlab.ingest.nutrition_tables import NutritionTableError, load_nutrition_table
from burgerlab.ingest.profiles import default_profiles


@pytest.fixture(autouse=True)
def _fresh_cache():
    load_nutrition_table.cache_clear()
    yield
    load_nutrition_table.cache_clear()


@pytest.mark.parametrize("slug", ["momstouch", "nobrand", "frank", "kfc"])
def test_packaged_tables_load(slug):
    table = load_nutrition_table(slug)
    assert table.slug == slug
    assert table.version
    assert table.items


def test_momstouch_values():
    table = dict(load_nutrition_table("momstouch").items)
    facts = table["싸이버거"]
    assert facts.kcal == 594
    assert facts.protein == 28
    assert facts.sodium == 1009
    assert facts.sugar == 14
    assert facts.saturated_fat == 8.6


def test_table_rows_become_candidates_with_nutrition():
    candidates = load_nutrition_table("kfc").as_candidates()
    names = {c.name for c in candidates}
    assert {"징거", "징거타워", "트위스터"} <= names
    assert all(c.nutrition is not None and c.image_url is None for c in candidates)


def test_static_tables_cover_profile_targets():
    profiles = default_profiles()
    for slug in ("momstouch", "nobrand", "frank", "kfc"):
        names = {name for name, _ in load_nutrition_table(slug).items}
        assert names <= set(profiles[slug].targets), slug


def test_override_directory_takes_precedence(tmp_path, monkeypatch):
    (tmp_path / "kfc.json").write_text(
        json.dumps({"brand": "KFC", "version": "test", "items": [{"name": "징거", "kcal": 1, "protein": None}]}),
        encoding="utf-8",
    )
    monkeypatch.setenv("NUTRITION_DATA_DIR", str(tmp_path))
    table = load_nutrition_table("kfc")
    assert table.version == "test"
    (name, facts), = table.items
    assert name == "징거" and facts.kcal == 1 and facts.protein is None


def test_missing_table_raises(monkeypatch):
    monkeypatch.setattr(nutrition_tables, "PACKAGE_DATA_DIR", nutrition_tables.PACKAGE_DATA_DIR / "nope")
    with pytest.raises(NutritionTableError):
        load_nutrition_table("mcdonalds")


def test_dash_cells_are_null_and_malformed_rows_are_skipped(tmp_path, monkeypatch):
    rows = [
        {"name": "징거버거", "kcal": 500, "sodium": "1,020mg"},
        {"name": "타워버거", "kcal": "-", "protein": "", "sugar": "9(10%)"},
        "not a row",
        {"name": 42, "kcal": 1},
        {"kcal": 300},
    ]
    (tmp_path / "kfc.json").write_text(
        json.dumps({"brand": "KFC", "version": "test", "items": rows}, ensure_ascii=False),
        encoding="utf-8",
    )
    monkeypatch.setenv("NUTRITION_DATA_DIR", str(tmp_path))
    table = dict(load_nutrition_table("kfc").items)

    assert set(table) == {"징거버거", "타워버거"}
    assert table["징거버거"].kcal == 500
    assert table["징거버거"].sodium == 1020
    tower = table["타워버거"]
    assert tower.kcal is None and tower.protein is None
    assert tower.sugar == 9
