from __future__ import annotations

import logging
from typing import Dict, List, Optional

from bs4 import BeautifulSoup

from ..browser import BrowserError, ModalFlow
from ..fetch import ExtractionContext, FetchError
from ..normalizer import NormalizationRules, compact
from ..parsing import absolutize_url, collapse_whitespace, parse_kcal, parse_nutrition_value
from ..records import CandidateRecord, ExtractionResult, NutritionFacts
from ..scorer import ScoringPolicy
from .base import SourceProfile

logger = logging.getLogger(__name__)

BASE_URL = "https://www.burgerking.co.kr"
MAIN_URL = BASE_URL + "/menu/main"
DETAIL_URL = BASE_URL + "/menu/detail/{menu_id}"

SET_MARKERS = ("세트", "라지", "콤보", "+", "팩", "x2")
MODAL_TRIGGER_TEXTS = ("영양성분", "원산지", "알레르기")

# td indices when the table header cannot be read
DEFAULT_COLUMNS = {"kcal": 1, "protein": 2, "sodium": 3, "sugar": 4, "saturated_fat": 5}
HEADER_LABELS = (
    ("열량", "kcal"),
    ("kcal", "kcal"),
    ("단백질", "protein"),
    ("나트륨", "sodium"),
    ("당류", "sugar"),
    ("포화지방", "saturated_fat"),
)

RULES = NormalizationRules.build(
    noise=(
        r"행\)", "세트", "라지", r"\(R\)", r"\(L\)", r"\+", "X2",
        "콜라R", "콜라L", "프라이R", "프라이L",
    ),
)

POLICY = ScoringPolicy(
    threshold=75,
    containment_weight=90,
    min_containment_length=3,
    keyword_weight=85,
    qualifiers=("주니어|junior", "더블"),
)


def is_set_or_combo(name: str) -> bool:
    lowered = name.lower()
    return lowered.startswith("행)") or any(marker in lowered for marker in SET_MARKERS)


def _menu_id(card) -> Optional[str]:
    button = card.select_one(".btn_detail")
    for node in (card, button, card.parent):
        if node is None:
            continue
        for attr in ("data-menu-id", "data-id"):
            value = node.get(attr)
            if value:
                return str(value).strip()
    return None


def parse_main_page(html: str) -> List[CandidateRecord]:
    soup = BeautifulSoup(html, "html.parser")
    records = []
    for card in soup.select(".menu_card"):
        img = card.select_one(".prd_image img")
        title = card.select_one(".cont .tit span")
        if img is None or title is None:
            continue
        name = collapse_whitespace(title.get_text())
        image_url = absolutize_url(img.get("src"), BASE_URL)
        if not name or not image_url or is_set_or_combo(name):
            continue
        menu_id = _menu_id(card)
        records.append(
            CandidateRecord(
                name=name,
                image_url=image_url,
                detail_url=DETAIL_URL.format(menu_id=menu_id) if menu_id else None,
                source_id=menu_id,
            )
        )
    return records


def _nutrition_table(soup: BeautifulSoup):
    for box in soup.select(".modalWrap .cont_box02"):
        heading = box.select_one("h2.tit01")
        if heading and "영양성분" in heading.get_text():
            table = box.select_one("table.info_table")
            if table is not None:
                return table
    return None


def _column_map(table, cell_count: int) -> Dict[str, int]:
    headers = table.select("thead tr th")
    if not headers:
        return dict(DEFAULT_COLUMNS)
    # header row also has the name column that rows keep in a <th>
    offset = max(len(headers) - cell_count, 0)
    columns: Dict[str, int] = {}
    for index, th in enumerate(headers):
        label = th.get_text().strip().lower()
        for needle, key in HEADER_LABELS:
            if needle in label and key not in columns:
                columns[key] = index - offset
                break
    return {key: columns.get(key, default) for key, default in DEFAULT_COLUMNS.items()}


def parse_nutrition_modal(html: str, target: str) -> Optional[NutritionFacts]:
    """Nutrition row for ``target`` from an opened detail modal."""
    soup = BeautifulSoup(html, "html.parser")
    table = _nutrition_table(soup)
    if table is None:
        return None
    wanted = compact(target).lower()
    for row in table.select("tbody tr"):
        header = row.select_one("th[scope=row]") or row.find("th")
        cells = row.find_all("td")
        if header is None or not cells:
            continue
        product = compact(header.get_text()).lower()
        if not product or (wanted not in product and product not in wanted):
            continue
        columns = _column_map(table, len(cells))

        def cell(key: str) -> Optional[str]:
            index = columns[key]
            return cells[index].get_text() if 0 <= index < len(cells) else None

        facts = NutritionFacts(
            kcal=parse_kcal(cell("kcal")),
            protein=parse_nutrition_value(cell("protein")),
            sodium=parse_nutrition_value(cell("sodium")),
            sugar=parse_nutrition_value(cell("sugar")),
            saturated_fat=parse_nutrition_value(cell("saturated_fat")),
        )
        return None if facts.is_empty() else facts
    return None


class BurgerKingProfile(SourceProfile):
    slug = "burgerking"
    brand_name = "버거킹"
    targets = (
        "오리지널스 뉴욕 스테이크",
        "오리지널스 이탈리안 살사베르데",
        "더오치 맥시멈2",
        "더오치 맥시멈3",
        "더오치 맥시멈 원파운더",
        "와퍼",
        "치즈와퍼",
        "갈릭불고기와퍼",
        "불고기와퍼",
        "베이컨치즈와퍼",
        "콰트로치즈와퍼",
        "통새우와퍼",
        "몬스터와퍼",
        "콰트로페퍼 큐브스테이크 와퍼",
        "터프페퍼 큐브스테이크",
        "와퍼주니어",
        "콰트로치즈 와퍼주니어",
        "통새우와퍼주니어",
        "불고기와퍼주니어",
        "치즈와퍼주니어",
        "크리스퍼 클래식",
        "크리스퍼 양념 치킨",
        "크리스퍼 불닭 치킨",
        "크리스퍼 클래식 BLT",
        "치킨킹",
        "치킨킹BLT",
        "비프불고기버거",
        "치즈버거",
        "비프&슈림프버거",
        "통새우슈림프버거",
        "슈림프버거",
        "치킨버거",
        "치킨 치즈 마요 버거",
        "더블비프불고기버거",
    )
    rules = RULES
    policy = POLICY
    request_delay = 0.5
    modal_attempts = 3
    modal_wait_ms = 1000

    def accepts(self, raw_name: str) -> bool:
        return super().accepts(raw_name) and not is_set_or_combo(raw_name)

    def extract(self, ctx: ExtractionContext) -> ExtractionResult:
        try:
            html = self.fetch(ctx, MAIN_URL)
        except FetchError as exc:
            return ExtractionResult(errors=[f"main page: {exc}"])
        return ExtractionResult(candidates=parse_main_page(html))

    def discover_detail_url(self, ctx: ExtractionContext, candidate: CandidateRecord) -> Optional[str]:
        """Click the card's detail button and read the URL the SPA navigates to."""
        page = ctx.browser.new_page()
        try:
            page.goto(MAIN_URL)
            soup = BeautifulSoup(page.html(), "html.parser")
            wanted = self.normalize(candidate.name)
            for index, card in enumerate(soup.select(".menu_card")):
                title = card.select_one(".cont .tit span")
                if title is None or self.normalize(title.get_text()) != wanted:
                    continue
                if not page.click(".menu_card .btn_detail", index=index):
                    return None
                page.wait(self.modal_wait_ms)
                return page.url if "/menu/detail/" in page.url else None
            return None
        finally:
            page.close()

    def enrich(self, ctx: ExtractionContext, target: str, candidate: CandidateRecord) -> CandidateRecord:
        detail_url = candidate.detail_url
        if not detail_url:
            try:
                detail_url = self.discover_detail_url(ctx, candidate)
            except BrowserError as exc:
                logger.warning("burgerking: detail url lookup for %s failed: %s", target, exc)
        if not detail_url:
            return candidate

        page = ctx.browser.new_page()
        try:
            flow = ModalFlow(
                page,
                trigger_selectors=(".btn_info_link", "button"),
                trigger_texts=MODAL_TRIGGER_TEXTS,
                modal_selector=".modalWrap",
                extract=lambda html: parse_nutrition_modal(html, target),
                attempts=self.modal_attempts,
                wait_ms=self.modal_wait_ms,
            )
            facts = flow.run(detail_url)
            if facts is None:
                logger.info("burgerking: no nutrition for %s (%s)", target, flow.failure)
        finally:
            page.close()
        return candidate.merged(CandidateRecord(name=candidate.name, detail_url=detail_url, nutrition=facts))
