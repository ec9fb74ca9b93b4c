from __future__ import annotations

import logging
import re
from typing import List, Optional, Tuple

from bs4 import BeautifulSoup

from ..browser import BrowserError
from ..fetch import ExtractionContext, FetchError
from ..normalizer import NormalizationRules
from ..parsing import (
    absolutize_url,
    background_image_url,
    collapse_whitespace,
    parse_kcal,
    parse_nutrition_value,
)
from ..records import CandidateRecord, ExtractionResult, NutritionFacts
from ..scorer import KEYWORD_HANGUL_LATIN, ScoringPolicy
from .base import SourceProfile

logger = logging.getLogger(__name__)

BASE_URL = "https://www.lotteeatz.com"
BRAND_URL = BASE_URL + "/brand/ria"
DETAIL_URL = BASE_URL + "/products/introductions/{product_id}?rccode=brnd_main"
NUTRITION_URL = BASE_URL + "/upload/etc/ria/items.html"
NUTRITION_ATTEMPTS = 3
NUTRITION_RETRY_WAIT = 3.0
BURGER_SECTION = "버거메뉴"

_DETAIL_CALL = re.compile(r"goBrandDetail\(\s*['\"]([^'\"]+)['\"]\s*\)")
_GA_EVENT_NAME = re.compile(r"GA_Event\([^,]+,[^,]+,[^,]+,\s*['\"]([^'\"]+)['\"]\)")

# clicks the tab whose label is exactly "버거"; returns whether it was found
_CLICK_BURGER_TAB = """
() => {
  for (const link of document.querySelectorAll('a.tab-link')) {
    const label = link.querySelector('span.tab-text');
    if (label && label.textContent.trim() === '버거') { link.click(); return true; }
  }
  return false;
}
"""

POLICY = ScoringPolicy(
    threshold=60,
    containment_weight=90,
    min_containment_length=3,
    keyword_mode=KEYWORD_HANGUL_LATIN,
    keyword_weight=80,
    prefix_min_run=5,
    prefix_weight=70,
    qualifiers=("더블",),
    exact_only_when_bracketed=True,
)


def parse_menu_list(html: str) -> List[CandidateRecord]:
    soup = BeautifulSoup(html, "html.parser")
    records = []
    seen = set()
    for link in soup.select("a.btn-link"):
        onclick = link.get("onclick") or ""
        match = _DETAIL_CALL.search(onclick)
        if not match:
            continue
        product_id = match.group(1)
        ga_name = _GA_EVENT_NAME.search(onclick)
        name = ga_name.group(1).strip() if ga_name else collapse_whitespace(link.get_text(" "))
        if not name or product_id in seen:
            continue
        seen.add(product_id)
        records.append(
            CandidateRecord(
                name=name,
                detail_url=DETAIL_URL.format(product_id=product_id),
                source_id=product_id,
            )
        )
    return records


def parse_detail_page(html: str) -> Tuple[Optional[str], Optional[str]]:
    """(image_url, description) from a product introduction page."""
    soup = BeautifulSoup(html, "html.parser")
    image_url = None
    thumb = soup.select_one("div.thumb-img")
    if thumb is not None:
        image_url = absolutize_url(background_image_url(thumb.get("style")), BASE_URL)
        if not image_url:
            img = thumb.find("img")
            image_url = absolutize_url(img.get("src"), BASE_URL) if img else None
    text = soup.select_one("p.btext")
    description = collapse_whitespace(text.get_text(" ")) if text else None
    return image_url, description or None


def parse_nutrition_table(html: str) -> List[CandidateRecord]:
    """Burger rows of the nutrition page.

    The first row of the section carries a rowspan "버거메뉴" cell, so the name
    sits at index 1 there and at index 0 on the following rows. After the name
    come allergy, weight, kcal, protein, sodium, sugar and saturated fat.
    """
    soup = BeautifulSoup(html, "html.parser")
    section = None
    for tbody in soup.find_all("tbody"):
        first = tbody.find("td")
        if first is not None and first.get_text().strip() == BURGER_SECTION:
            section = tbody
            break
    if section is None:
        return []

    records = []
    for row in section.find_all("tr"):
        cells = row.find_all("td")
        if not cells:
            continue
        first = cells[0]
        name_index = 1 if (first.get_text().strip() == BURGER_SECTION or first.get("rowspan")) else 0
        if len(cells) <= name_index:
            continue
        name = collapse_whitespace(cells[name_index].get_text(" "))
        if not name or name == BURGER_SECTION:
            continue

        def cell(offset: int) -> Optional[str]:
            index = name_index + offset
            return cells[index].get_text() if index < len(cells) else None

        facts = NutritionFacts(
            kcal=parse_kcal(cell(3)),
            protein=parse_nutrition_value(cell(4)),
            sodium=parse_nutrition_value(cell(5)),
            sugar=parse_nutrition_value(cell(6)),
            saturated_fat=parse_nutrition_value(cell(7)),
        )
        records.append(CandidateRecord(name=name, nutrition=facts))
    return records


class LotteriaProfile(SourceProfile):
    slug = "lotteria"
    brand_name = "롯데리아"
    targets = (
        "통다리 크리스피치킨버거(파이어핫)",
        "통다리 크리스피치킨버거(그릭랜치)",
        "모짜렐라버거 발사믹바질",
        "모짜렐라버거 토마토바질",
        "전주 비빔라이스 버거",
        "리아 새우 베이컨",
        "리아 불고기 베이컨",
        "더블 한우불고기버거",
        "한우불고기버거",
        "더블 클래식치즈버거",
        "더블 치킨버거(N)",
        "더블 치킨버거",
        "더블 데리버거",
        "더블엑스투버거",
        "리아 불고기 더블(빅불)",
        "NEW 미라클버거",
        "NEW 더블 미라클버거",
        "미라클버거",
        "더블 미라클버거",
        "모짜렐라 인 더 버거 베이컨",
        "핫크리스피치킨버거",
        "리아 사각새우 더블",
        "클래식치즈버거",
        "리아 불고기",
        "리아 새우",
        "티렉스버거",
        "치킨버거(N)",
        "치킨버거",
        "데리버거",
    )
    rules = NormalizationRules.build()
    policy = POLICY
    request_delay = 1.0
    page_settle_ms = 2000

    def extract(self, ctx: ExtractionContext) -> ExtractionResult:
        page = ctx.browser.new_page()
        try:
            page.goto(BRAND_URL)
            page.wait(self.page_settle_ms)
            if page.wait_for("a.tab-link", 10000) and page.evaluate(_CLICK_BURGER_TAB):
                page.wait(self.page_settle_ms)
            else:
                logger.warning("lotteria: burger tab not found, parsing the default listing")
            html = page.html()
        except BrowserError as exc:
            return ExtractionResult(errors=[f"brand page: {exc}"])
        finally:
            page.close()
        return ExtractionResult(candidates=parse_menu_list(html))

    def enrich(self, ctx: ExtractionContext, target: str, candidate: CandidateRecord) -> CandidateRecord:
        if not candidate.detail_url:
            return candidate
        page = ctx.browser.new_page()
        try:
            page.goto(candidate.detail_url)
            page.wait(self.page_settle_ms)
            image_url, description = parse_detail_page(page.html())
        finally:
            page.close()
        return candidate.merged(
            CandidateRecord(name=candidate.name, image_url=image_url, description=description)
        )

    def extract_nutrition(self, ctx: ExtractionContext) -> ExtractionResult:
        try:
            html = self.fetch(
                ctx,
                NUTRITION_URL,
                attempts=NUTRITION_ATTEMPTS,
                retry_wait=NUTRITION_RETRY_WAIT,
            )
        except FetchError as exc:
            return ExtractionResult(errors=[f"nutrition page: {exc}"])
        return ExtractionResult(candidates=parse_nutrition_table(html))
