from burgerlab.ingest.profiles import frank, kfc, nobrand
from burgerlab.ingest.profiles.frank import FrankProfile
from burgerlab.ingest.profiles.kfc import KfcProfile
from burgerlab.ingest.profiles.nobrand import NoBrandProfile

from fakes import FakeBrowser, FakePage, offline_context

NOBRAND_HTML = """
<div id="cate_218"><ul>
  <li class="menu_item">
    <div class="menu_img"><img src="/upload/nbb/grilled.png"></div>
    <em class="menu_name">그릴드 불고기<br>Grilled Bulgogi</em>
  </li>
  <li class="menu_item"><em class="menu_name"> </em></li>
</ul></div>
<div id="cate_246"><ul>
  <li class="menu_item">
    <div class="menu_img"><img src="https://cdn.example.com/nbb/mega.png"></div>
    <em class="menu_name">메가바이트</em>
  </li>
</ul></div>
<div id="cate_300"><ul>
  <li class="menu_item"><em class="menu_name">감자튀김</em></li>
</ul></div>
"""

FRANK_HTML = """
<div class="single-wrapper">
  <div class="swiper-slide">
    <div class="img_area" data-bg='url("../images/menu/frank.png")'></div>
    <p class="menu_ko">프랭크버거</p>
    <p class="stext">두툼한 패티<br>그리고 치즈</p>
  </div>
  <div class="swiper-slide">
    <div class="img_area" style="background-image: url(https://img.example.com/cheese.png)"></div>
    <p class="menu_ko">치즈버거</p>
  </div>
  <div class="swiper-slide"><p class="menu_ko">프랭크버거</p></div>
</div>
"""

KFC_HTML = """
<ul class="menu_list">
  <li>
    <img src="/nas/product/zinger.png">
    <div class="contents"><a href="/menu/detail/100"><h3>징거버거</h3></a></div>
  </li>
  <li><img src="/nas/product/none.png"></li>
</ul>
"""


def test_nobrand_reads_only_burger_categories():
    records = nobrand.parse_menu(NOBRAND_HTML)
    assert [r.name for r in records] == ["그릴드 불고기", "메가바이트"]
    assert records[0].image_url == "https://www.shinsegaefood.com/upload/nbb/grilled.png"
    assert records[1].image_url == "https://cdn.example.com/nbb/mega.png"


def test_frank_resolves_backgrounds_and_descriptions():
    records = frank.parse_menu(FRANK_HTML)
    assert [r.name for r in records] == ["프랭크버거", "치즈버거"]
    burger, cheese = records
    assert burger.image_url == "https://frankburger.co.kr/images/menu/frank.png"
    assert burger.description == "두툼한 패티 그리고 치즈"
    assert cheese.image_url == "https://img.example.com/cheese.png"
    assert cheese.description is None


def test_kfc_falls_back_to_secondary_selectors():
    records = kfc.parse_menu(KFC_HTML)
    assert len(records) == 1
    (zinger,) = records
    assert zinger.name == "징거버거"
    assert zinger.image_url == "https://www.kfckorea.com/nas/product/zinger.png"
    assert zinger.detail_url == "https://www.kfckorea.com/menu/detail/100"


def test_browser_extraction_uses_rendered_html():
    cases = (
        (NoBrandProfile(), NOBRAND_HTML, 2),
        (FrankProfile(), FRANK_HTML, 2),
        (KfcProfile(), KFC_HTML, 1),
    )
    for profile, html, expected in cases:
        page = FakePage(html=html)
        with offline_context({}, browser_factory=lambda: FakeBrowser([page])) as ctx:
            result = profile.extract(ctx)
        assert len(result.candidates) == expected, profile.slug
        assert result.errors == []
        assert page.closed


def test_browser_failure_becomes_page_error():
    page = FakePage(goto_failures=1)
    with offline_context({}, browser_factory=lambda: FakeBrowser([page])) as ctx:
        result = KfcProfile().extract(ctx)
    assert result.candidates == []
    assert result.errors == ["menu page: navigation timeout"]


def test_table_brands_share_policy_and_static_nutrition():
    for profile in (NoBrandProfile(), FrankProfile(), KfcProfile()):
        assert profile.policy is nobrand.TABLE_BRAND_POLICY
        assert profile.static_nutrition
        assert profile.policy.threshold == 75
