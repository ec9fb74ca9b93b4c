import pytest

from burgerlab.ingest.profiles.burgerking import POLICY as BURGERKING_POLICY
from burgerlab.ingest.profiles.lotteria import POLICY as LOTTERIA_POLICY
from burgerlab.ingest.profiles.momstouch import POLICY as MOMSTOUCH_POLICY
from burgerlab.ingest.profiles.nobrand import TABLE_BRAND_POLICY
from burgerlab.ingest.scorer import (
    KEYWORD_HANGUL,
    ScoringPolicy,
    common_prefix_length,
    containment_score,
    keyword_score,
    keywords,
    prefix_score,
    qualifier_mismatch,
    score,
)

POLICY = ScoringPolicy(threshold=70, containment_weight=90, min_containment_length=3, keyword_weight=85)


def test_exact_match_scores_100():
    assert score("빅맥", "빅맥", POLICY) == 100


def test_whitespace_insensitive_exact_scores_90():
    assert score("쿼터파운더 치즈", "쿼터 파운더 치즈", POLICY) == 90


def test_empty_names_score_zero():
    assert score("", "빅맥", POLICY) == 0
    assert score("빅맥", "", POLICY) == 0


def test_junior_qualifier_mismatch_forces_zero():
    assert score("와퍼주니어", "와퍼", BURGERKING_POLICY) == 0
    assert score("와퍼", "와퍼주니어", BURGERKING_POLICY) == 0


def test_qualifier_spellings_are_interchangeable():
    assert not qualifier_mismatch("와퍼주니어", "와퍼 junior", ("주니어|junior",))
    assert qualifier_mismatch("치즈와퍼", "치즈와퍼 junior", ("주니어|junior",))


def test_qualifier_present_on_both_sides_does_not_block():
    assert score("치즈와퍼주니어", "치즈 와퍼주니어", BURGERKING_POLICY) == 90


def test_containment_scaled_by_length_ratio():
    # "갈릭불고기" (5) inside "갈릭불고기와퍼" (7)
    assert containment_score("갈릭불고기", "갈릭불고기와퍼", POLICY) == pytest.approx(5 / 7 * 90)


def test_containment_requires_minimum_length():
    assert containment_score("와퍼", "치즈와퍼", POLICY) == 0
    strict = ScoringPolicy(min_containment_length=5)
    assert containment_score("싸이버거", "불싸이버거", strict) == 0


def test_whitespace_keywords_ignore_single_characters():
    assert keywords("nbb 어메이징 더블 업", "whitespace") == frozenset({"nbb", "어메이징", "더블"})


def test_keyword_overlap_uses_larger_token_set():
    value = keyword_score("크리스퍼 클래식", "크리스퍼 클래식 blt", POLICY)
    assert value == pytest.approx(2 / 3 * 85)


def test_hangul_keywords_all_match_get_flat_score():
    assert keywords("에드워드 리 k싸이버거", KEYWORD_HANGUL) == frozenset({"에드워드", "싸이버거"})
    assert keyword_score("에드워드 리 싸이버거", "에드워드 리 k싸이버거", MOMSTOUCH_POLICY) == 95


def test_prefix_run_needs_five_characters():
    assert common_prefix_length("맥크리스피마라", "맥크리스피클래식") == 5
    assert prefix_score("맥크리스피 디럭스", "맥크리스피 클래식", POLICY) == pytest.approx(5 / 8 * 70)
    assert prefix_score("맥치킨", "맥치킨 모짜렐라", POLICY) == 0


def test_final_score_is_max_of_tiers_not_sum():
    target, candidate = "크리스퍼 클래식", "크리스퍼 클래식 blt"
    expected = max(
        containment_score(target, candidate, POLICY),
        keyword_score(target, candidate, POLICY),
        prefix_score(target, candidate, POLICY),
    )
    assert score(target, candidate, POLICY) == round(expected, 2)
    assert score(target, candidate, POLICY) <= 100


def test_bracketed_names_only_match_exactly_for_lotteria():
    assert score("치킨버거(n)", "치킨버거(n)", LOTTERIA_POLICY) == 100
    assert score("치킨버거", "치킨버거(n)", LOTTERIA_POLICY) == 0
    assert score("통다리 크리스피치킨버거(파이어핫)", "통다리 크리스피치킨버거(그릭랜치)", LOTTERIA_POLICY) == 0


def test_lotteria_double_variant_does_not_steal_single():
    assert score("더블 한우불고기버거", "한우불고기버거", LOTTERIA_POLICY) == 0


def test_similar_table_brand_names_stay_below_threshold():
    value = score("그릴드 불고기", "더블 그릴드 불고기", TABLE_BRAND_POLICY)
    assert value < TABLE_BRAND_POLICY.threshold
