from __future__ import annotations

import logging
from typing import List

from bs4 import BeautifulSoup

from ..browser import BrowserError
from ..fetch import ExtractionContext
from ..normalizer import NormalizationRules
from ..parsing import absolutize_url, collapse_whitespace
from ..records import CandidateRecord, ExtractionResult
from .base import SourceProfile
from .nobrand import TABLE_BRAND_POLICY

logger = logging.getLogger(__name__)

BASE_URL = "https://www.kfckorea.com"
MENU_URL = BASE_URL + "/delivery/burger"
ITEM_SELECTORS = ("li.col.col_gutter", "ul.menu_list li", "li.menu_item")
ITEM_WAIT_MS = 15000


def parse_menu(html: str) -> List[CandidateRecord]:
    soup = BeautifulSoup(html, "html.parser")
    items = []
    for selector in ITEM_SELECTORS:
        items = soup.select(selector)
        if items:
            break

    records = []
    for item in items:
        heading = item.find("h3")
        name = collapse_whitespace(heading.get_text(" ")) if heading is not None else ""
        if not name:
            continue
        img = item.find("img")
        link = item.select_one("div.contents > a") or item.find("a")
        records.append(
            CandidateRecord(
                name=name,
                image_url=absolutize_url(img.get("src"), BASE_URL) if img is not None else None,
                detail_url=absolutize_url(link.get("href"), BASE_URL) if link is not None else None,
            )
        )
    return records


class KfcProfile(SourceProfile):
    slug = "kfc"
    brand_name = "KFC"
    targets = (
        "징거더블다운통다리",
        "치즈징거통다리",
        "징거BLT",
        "징거타워",
        "칠리징거통다리",
        "클래식징거통다리",
        "징거",
        "트위스터",
        "더블커넬오리지널",
    )
    rules = NormalizationRules.build()
    policy = TABLE_BRAND_POLICY
    static_nutrition = True

    def extract(self, ctx: ExtractionContext) -> ExtractionResult:
        page = ctx.browser.new_page()
        try:
            page.goto(MENU_URL)
            page.scroll_to_bottom()
            if not page.wait_for(ITEM_SELECTORS[0], ITEM_WAIT_MS):
                logger.warning("kfc: %s did not appear, trying fallback selectors", ITEM_SELECTORS[0])
            html = page.html()
        except BrowserError as exc:
            return ExtractionResult(errors=[f"menu page: {exc}"])
        finally:
            page.close()
        return ExtractionResult(candidates=[r for r in parse_menu(html) if self.accepts(r.name)])
