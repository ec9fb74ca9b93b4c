from burgerlab.ingest.profiles.momstouch import (
    DETAIL_URL,
    LIST_URL,
    MomsTouchProfile,
    parse_detail_page,
    parse_list_page,
)

from fakes import offline_context

LIST_HTML = """
<ul class="menu-list">
  <li>
    <a href="javascript:go_view(123);">
      <figure><span style="background-image:url('/uploads/menu/thigh.png')"></span></figure>
      <h3><span>Thigh Burger</span>싸이버거</h3>
    </a>
  </li>
  <li>
    <a href="#" onclick="go_view('456')">
      <figure><span></span></figure>
      <h3>Bulgogi 불고기버거</h3>
    </a>
  </li>
  <li><p>준비중</p></li>
</ul>
"""

DETAIL_HTML = """
<figure><img src="/uploads/menu/thigh_big.png"></figure>
<p class="description">바삭한 통다리살 <br> 싸이패티</p>
"""


def test_parse_list_page_strips_english_title():
    records = parse_list_page(LIST_HTML, page=2)
    assert [r.name for r in records] == ["싸이버거", "불고기버거"]
    thigh, bulgogi = records
    assert thigh.image_url == "https://momstouch.co.kr/uploads/menu/thigh.png"
    assert thigh.source_id == "123"
    assert thigh.detail_url == DETAIL_URL.format(menu_id="123", page=2)
    assert bulgogi.image_url is None
    assert bulgogi.source_id == "456"


def test_parse_detail_page():
    image_url, description = parse_detail_page(DETAIL_HTML)
    assert image_url == "https://momstouch.co.kr/uploads/menu/thigh_big.png"
    assert description == "바삭한 통다리살 싸이패티"
    assert parse_detail_page("<div></div>") == (None, None)


def test_extract_walks_list_pages_and_reports_missing_ones():
    routes = {
        LIST_URL.format(page=1): LIST_HTML,
        LIST_URL.format(page=2): "<ul class='menu-list'></ul>",
    }
    with offline_context(routes) as ctx:
        result = MomsTouchProfile().extract(ctx)
        calls = list(ctx.http.session.calls)
    assert [r.name for r in result.candidates] == ["싸이버거", "불고기버거"]
    (error,) = result.errors
    assert error.startswith("list page 3:") and error.endswith("HTTP 404")
    assert len(calls) == 3


def test_nutrition_comes_from_packaged_table():
    with offline_context({}) as ctx:
        result = MomsTouchProfile().extract_nutrition(ctx)
        assert ctx.http.session.calls == []
    assert len(result.candidates) == 31
    assert all(c.nutrition is not None for c in result.candidates)


def test_enrich_fetches_detail_page():
    candidate = parse_list_page(LIST_HTML)[0]
    with offline_context({candidate.detail_url: DETAIL_HTML}) as ctx:
        enriched = MomsTouchProfile().enrich(ctx, "싸이버거", candidate)
    assert enriched.image_url.endswith("thigh_big.png")
    assert enriched.description == "바삭한 통다리살 싸이패티"
    assert enriched.detail_url == candidate.detail_url


def test_policy_matches_scraped_names_to_targets():
    profile = MomsTouchProfile()
    assert profile.policy.threshold == 70
    assert "싸이버거" in profile.targets
