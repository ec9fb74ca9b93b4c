from __future__ import annotations

import logging
from typing import List

from bs4 import BeautifulSoup

from ..browser import BrowserError
from ..fetch import ExtractionContext
from ..normalizer import NormalizationRules
from ..parsing import absolutize_url, collapse_whitespace, first_line
from ..records import CandidateRecord, ExtractionResult
from ..scorer import ScoringPolicy
from .base import SourceProfile

logger = logging.getLogger(__name__)

BASE_URL = "https://www.shinsegaefood.com"
HOME_URL = BASE_URL + "/nobrandburger/index.sf#none"
BURGER_CATEGORIES = ("cate_218", "cate_246")

# exact, containment (>= 5 chars) and whitespace tokens; shared by the static-table brands
TABLE_BRAND_POLICY = ScoringPolicy(
    threshold=75,
    containment_weight=95,
    min_containment_length=5,
    keyword_weight=85,
    prefix_min_run=None,
    qualifiers=("더블",),
)


def parse_menu(html: str) -> List[CandidateRecord]:
    soup = BeautifulSoup(html, "html.parser")
    records = []
    for category in BURGER_CATEGORIES:
        block = soup.find(id=category)
        if block is None:
            continue
        for item in block.select("li.menu_item"):
            label = item.select_one("em.menu_name")
            # the label holds the Korean name on its first line, English below
            name = collapse_whitespace(first_line(label.get_text("\n") if label else ""))
            if not name:
                continue
            img = item.select_one("div.menu_img img")
            image_url = absolutize_url(img.get("src"), BASE_URL + "/") if img is not None else None
            records.append(CandidateRecord(name=name, image_url=image_url))
    return records


class NoBrandProfile(SourceProfile):
    slug = "nobrand"
    brand_name = "노브랜드버거"
    targets = (
        "NBB 어메이징 감바스 새우",
        "NBB 어메이징 더블",
        "NBB 어메이징 더블 업",
        "고스트페퍼 살사 더블",
        "고스트페퍼 살사 치킨",
        "골든 카츠",
        "골든 모짜카츠",
        "클럽 샌드위치 버거",
        "통마늘 베이컨",
        "치즈",
        "시그니처",
        "더블치즈 베이컨 시그니처",
        "메가바이트",
        "그릴드 불고기",
        "더블 그릴드 불고기",
        "트리플 베이컨",
        "미트 마니아",
        "오리지널",
        "갈릭앤갈릭",
        "오리지널 새우",
        "비스크 치즈 새우",
        "코울슬로 치킨",
        "치폴레 핫 치킨",
    )
    rules = NormalizationRules.build()
    policy = TABLE_BRAND_POLICY
    static_nutrition = True

    def extract(self, ctx: ExtractionContext) -> ExtractionResult:
        page = ctx.browser.new_page()
        try:
            page.goto(HOME_URL)
            page.wait(3000)
            if page.wait_for("button.togArea_btn", 10000):
                page.click("button.togArea_btn")
                page.wait(2000)
            else:
                logger.warning("nobrand: 'View All' toggle not found")
            html = page.html()
        except BrowserError as exc:
            return ExtractionResult(errors=[f"home page: {exc}"])
        finally:
            page.close()
        return ExtractionResult(candidates=[r for r in parse_menu(html) if self.accepts(r.name)])
