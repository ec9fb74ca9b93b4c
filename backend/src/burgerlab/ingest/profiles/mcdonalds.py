from __future__ import annotations

import logging
from typing import Dict, List

from bs4 import BeautifulSoup

from ..fetch import ExtractionContext, FetchError
from ..normalizer import NormalizationRules, normalize
from ..parsing import absolutize_url, collapse_whitespace, parse_kcal, parse_nutrition_value
from ..records import CandidateRecord, ExtractionResult, NutritionFacts
from ..scorer import ScoringPolicy
from .base import SourceProfile

logger = logging.getLogger(__name__)

BASE_URL = "https://www.mcdonalds.co.kr"
MENU_PAGE_URL = BASE_URL + "/kor/menu/burger?ca=16&page={page}"
MENU_PAGES = (1, 2, 3, 4)
NUTRITION_URL = BASE_URL + "/kor/menu/information/nutrition"

IMAGE_BLOCKLIST = ("logo", "icon", "sprite", "placeholder")

RULES = NormalizationRules.build(
    noise=(
        "맥런치", "세트", "단품", "신제품",
        r"\d+\s*~\s*\d+", r"\d+\s*kcal", "kcal", "meal", "~", "®", "™",
        "버거",
    ),
    rewrites=(
        ("해쉬", "해시"),
        (r"\b(\d+)\s+\1\b", r"\1"),  # "1955 버거 1955"
    ),
    strip_latin=True,
)

POLICY = ScoringPolicy(
    threshold=70,
    containment_weight=90,
    min_containment_length=3,
    keyword_weight=85,
    qualifiers=("해시", "클래식", "마라", "더블", "트리플"),
)


def _image_src(img) -> str:
    for attr in ("src", "data-src", "data-lazy-src"):
        value = (img.get(attr) or "").strip()
        if value:
            return value
    return ""


def parse_menu_page(html: str) -> List[CandidateRecord]:
    soup = BeautifulSoup(html, "html.parser")
    records: List[CandidateRecord] = []
    seen = set()
    for link in soup.select("a[href*='/menu/']"):
        img = link.find("img")
        if img is None:
            continue
        image_url = absolutize_url(_image_src(img), BASE_URL)
        if not image_url:
            continue
        lowered = image_url.lower()
        if lowered.endswith(".svg") or any(word in lowered for word in IMAGE_BLOCKLIST):
            continue

        name = collapse_whitespace(link.get_text(" "))
        if len(name) < 2:
            name = collapse_whitespace(img.get("alt") or img.get("title"))
        if len(name) < 2 or name in seen:
            continue
        seen.add(name)
        records.append(
            CandidateRecord(
                name=name,
                image_url=image_url,
                detail_url=absolutize_url(link.get("href"), BASE_URL),
            )
        )
    return records


def _is_burger_table(table) -> bool:
    caption = table.find("caption")
    if caption and "버거" in caption.get_text():
        return True
    heading = table.find_previous(["h1", "h2", "h3", "h4"])
    return bool(heading and "버거" in heading.get_text())


def parse_nutrition_page(html: str) -> List[CandidateRecord]:
    """Rows of the burger tables: weight, kcal, sat. fat, sugar, protein, sodium."""
    soup = BeautifulSoup(html, "html.parser")
    by_key: Dict[str, CandidateRecord] = {}
    for table in soup.find_all("table"):
        if not _is_burger_table(table):
            continue
        for row in table.select("tbody tr"):
            header = row.select_one("th[scope=row]") or row.find("th")
            cells = row.find_all("td")
            if header is None or len(cells) < 6:
                continue
            name = collapse_whitespace(header.get_text(" "))
            if not name:
                continue
            facts = NutritionFacts(
                kcal=parse_kcal(cells[1].get_text()),
                saturated_fat=parse_nutrition_value(cells[2].get_text()),
                sugar=parse_nutrition_value(cells[3].get_text()),
                protein=parse_nutrition_value(cells[4].get_text()),
                sodium=parse_nutrition_value(cells[5].get_text()),
            )
            key = normalize(name, RULES)
            current = by_key.get(key)
            # the same burger can appear twice; keep the more descriptive label
            if current is None or len(name) > len(current.name):
                by_key[key] = CandidateRecord(name=name, nutrition=facts)
    return list(by_key.values())


class McDonaldsProfile(SourceProfile):
    slug = "mcdonalds"
    brand_name = "맥도날드"
    targets = (
        "맥크리스피 마라 해쉬",
        "맥크리스피 마라 클래식",
        "빅맥",
        "맥스파이시 상하이 버거",
        "1955 버거",
        "더블 쿼터 파운더 치즈",
        "쿼터파운더 치즈",
        "맥크리스피 디럭스 버거",
        "맥크리스피 클래식 버거",
        "베이컨 토마토 디럭스",
        "맥치킨 모짜렐라",
        "맥치킨",
        "더블 불고기 버거",
        "불고기 버거",
        "슈비 버거",
        "슈슈 버거",
        "토마토 치즈 비프 버거",
        "트리플 치즈버거",
        "더블 치즈버거",
        "치즈버거",
        "햄버거",
    )
    rules = RULES
    policy = POLICY
    request_delay = 0.5

    def extract(self, ctx: ExtractionContext) -> ExtractionResult:
        result = ExtractionResult()
        for page in MENU_PAGES:
            url = MENU_PAGE_URL.format(page=page)
            try:
                html = self.fetch(ctx, url)
            except FetchError as exc:
                result.errors.append(f"menu page {page}: {exc}")
                continue
            found = [r for r in parse_menu_page(html) if self.accepts(r.name)]
            logger.debug("mcdonalds page %d: %d candidates", page, len(found))
            result.candidates.extend(found)
        return result

    def extract_nutrition(self, ctx: ExtractionContext) -> ExtractionResult:
        try:
            html = self.fetch(ctx, NUTRITION_URL)
        except FetchError as exc:
            return ExtractionResult(errors=[f"nutrition page: {exc}"])
        return ExtractionResult(candidates=parse_nutrition_page(html))
