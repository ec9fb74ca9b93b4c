from __future__ import annotations

from typing import List

from bs4 import BeautifulSoup

from ..browser import BrowserError
from ..fetch import ExtractionContext
from ..normalizer import NormalizationRules
from ..parsing import absolutize_url, background_image_url, collapse_whitespace
from ..records import CandidateRecord, ExtractionResult
from .base import SourceProfile
from .nobrand import TABLE_BRAND_POLICY

BASE_URL = "https://frankburger.co.kr"
MENU_URL = BASE_URL + "/html/menu_1.html"

# the slide images are set from a stylesheet; copy the computed value into the DOM
_INLINE_BACKGROUNDS = """
() => {
  document.querySelectorAll('.single-wrapper .swiper-slide .img_area').forEach((el) => {
    el.setAttribute('data-bg', window.getComputedStyle(el).backgroundImage || '');
  });
}
"""


def parse_menu(html: str) -> List[CandidateRecord]:
    soup = BeautifulSoup(html, "html.parser")
    records = []
    seen = set()
    for slide in soup.select(".single-wrapper .swiper-slide"):
        title = slide.select_one("p.menu_ko")
        name = collapse_whitespace(title.get_text(" ")) if title is not None else ""
        if not name or name in seen:
            continue
        seen.add(name)

        image_url = None
        area = slide.select_one(".img_area")
        if area is not None:
            raw = background_image_url(area.get("data-bg")) or background_image_url(area.get("style"))
            image_url = absolutize_url(raw, MENU_URL)

        text = slide.select_one("p.stext")
        if text is not None:
            for br in text.find_all("br"):
                br.replace_with(" ")
            description = collapse_whitespace(text.get_text()) or None
        else:
            description = None
        records.append(CandidateRecord(name=name, image_url=image_url, description=description))
    return records


class FrankProfile(SourceProfile):
    slug = "frank"
    brand_name = "프랭크버거"
    targets = (
        "피넛 버터 더블 버거",
        "피넛 버터 더블 치즈 버거",
        "100% 한우 갈릭 버거",
        "100% 한우 버거",
        "프랭크 버거",
        "K 불고기 버거",
        "K 핫불고기 버거",
        "쉬림프 버거",
        "청양마요 쉬림프 버거",
        "치즈버거",
        "크리스피 카츠 버거",
        "크리스피 치킨 버거",
        "해쉬 비프 버거",
        "베이컨 치즈버거",
        "비프 앤 쉬림프 버거",
        "더블 비프 치즈 버거",
        "치즈 도넛 비프 버거",
        "JG버거",
    )
    rules = NormalizationRules.build()
    policy = TABLE_BRAND_POLICY
    static_nutrition = True

    def extract(self, ctx: ExtractionContext) -> ExtractionResult:
        page = ctx.browser.new_page()
        try:
            page.goto(MENU_URL)
            page.wait_for(".single-wrapper .swiper-slide", 10000)
            page.evaluate(_INLINE_BACKGROUNDS)
            html = page.html()
        except BrowserError as exc:
            return ExtractionResult(errors=[f"menu page: {exc}"])
        finally:
            page.close()
        return ExtractionResult(candidates=[r for r in parse_menu(html) if self.accepts(r.name)])
