import pytest

from burgerlab.ingest.parsing import (
    absolutize_url,
    background_image_url,
    first_line,
    parse_kcal,
    parse_nutrition_value,
)

BASE = "https://www.mcdonalds.co.kr"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("//cdn.example.com/a.png", "https://cdn.example.com/a.png"),
        ("/upload/a.png", "https://www.mcdonalds.co.kr/upload/a.png"),
        ("upload/a.png", "https://www.mcdonalds.co.kr/upload/a.png"),
        ("https://x/a.png", "https://x/a.png"),
        ("  /a.png  ", "https://www.mcdonalds.co.kr/a.png"),
    ],
)
def test_absolutize_url(raw, expected):
    assert absolutize_url(raw, BASE) == expected


def test_absolutize_url_resolves_parent_paths_against_page():
    assert absolutize_url("../img/menu/01.png", "https://frankburger.co.kr/html/menu_1.html") == (
        "https://frankburger.co.kr/img/menu/01.png"
    )


def test_absolutize_url_rejects_empty_and_data_uris():
    assert absolutize_url(None, BASE) is None
    assert absolutize_url("   ", BASE) is None
    assert absolutize_url("data:image/png;base64,AAAA", BASE) is None


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("43(78%)", 43.0),
        ("1,009mg", 1009.0),
        ("8.6 g", 8.6),
        ("594kcal", 594.0),
        ("-", None),
        ("", None),
        (None, None),
        ("  ", None),
        ("정보없음", None),
    ],
)
def test_parse_nutrition_value(raw, expected):
    assert parse_nutrition_value(raw) == expected


def test_parse_kcal_rounds_to_int():
    assert parse_kcal("582.6") == 583
    assert parse_kcal("-") is None


def test_background_image_url_handles_quotes():
    assert background_image_url("background-image: url('/img/a.png');") == "/img/a.png"
    assert background_image_url('background-image:url("https://x/b.jpg")') == "https://x/b.jpg"
    assert background_image_url("background: url(../c.png) no-repeat") == "../c.png"
    assert background_image_url("color: red") is None
    assert background_image_url(None) is None


def test_first_line_skips_blank_lines():
    assert first_line("\n  오리지널 \nORIGINAL") == "오리지널"
    assert first_line("") == ""
