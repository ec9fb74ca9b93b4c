from __future__ import annotations

import logging
import re
from typing import List, Optional, Tuple

from bs4 import BeautifulSoup

from ..fetch import ExtractionContext, FetchError
from ..normalizer import NormalizationRules
from ..parsing import absolutize_url, background_image_url, collapse_whitespace
from ..records import CandidateRecord, ExtractionResult
from ..scorer import KEYWORD_HANGUL, ScoringPolicy
from .base import SourceProfile

logger = logging.getLogger(__name__)

BASE_URL = "https://momstouch.co.kr"
_QUERY = "field=&keyword=&v_sect=&s_gubun=&s_level=&s_gender=&s_sect1=CG0005&s_sect2=&s_order="
LIST_URL = BASE_URL + "/menu/new.php?pageNo={page}&" + _QUERY
DETAIL_URL = BASE_URL + "/menu/view.php?idx={menu_id}&pageNo={page}&" + _QUERY
LIST_PAGES = (1, 2, 3)

_GO_VIEW = re.compile(r"go_view\(\s*['\"]?(\d+)['\"]?\s*\)")
_LATIN_WORDS = re.compile(r"[A-Za-z][A-Za-z\s&'.-]*")

POLICY = ScoringPolicy(
    threshold=70,
    containment_weight=90,
    min_containment_length=5,
    keyword_mode=KEYWORD_HANGUL,
    keyword_weight=75,
    keyword_all_match_score=95,
    prefix_min_run=None,
)


def _korean_name(h3) -> str:
    # <h3><span>English</span>한글</h3>
    span = h3.find("span")
    if span is not None:
        english = span.get_text()
        return collapse_whitespace(h3.get_text().replace(english, "", 1))
    return collapse_whitespace(_LATIN_WORDS.sub(" ", h3.get_text()))


def parse_list_page(html: str, page: int = 1) -> List[CandidateRecord]:
    soup = BeautifulSoup(html, "html.parser")
    records = []
    for item in soup.select(".menu-list li"):
        h3 = item.find("h3")
        if h3 is None:
            continue
        name = _korean_name(h3)
        if not name:
            continue
        figure = item.select_one("figure span")
        image_url = absolutize_url(
            background_image_url(figure.get("style") if figure is not None else None),
            BASE_URL + "/",
        )

        menu_id = None
        for link in item.find_all("a"):
            for attr in ("href", "onclick"):
                match = _GO_VIEW.search(link.get(attr) or "")
                if match:
                    menu_id = match.group(1)
                    break
            if menu_id:
                break

        records.append(
            CandidateRecord(
                name=name,
                image_url=image_url,
                detail_url=DETAIL_URL.format(menu_id=menu_id, page=page) if menu_id else None,
                source_id=menu_id,
            )
        )
    return records


def parse_detail_page(html: str) -> Tuple[Optional[str], Optional[str]]:
    soup = BeautifulSoup(html, "html.parser")
    img = soup.select_one("figure img")
    image_url = absolutize_url(img.get("src"), BASE_URL) if img is not None else None
    text = soup.select_one("p.description")
    description = collapse_whitespace(text.get_text(" ")) if text is not None else ""
    return image_url, description or None


class MomsTouchProfile(SourceProfile):
    slug = "momstouch"
    brand_name = "맘스터치"
    targets = (
        "불대박직화불고기버거",
        "대박직화불고기버거",
        "슈퍼싸이더블Kick",
        "에드워드 리 K싸이버거",
        "에드워드 리 K비프버거",
        "와우스모크디럭스버거",
        "에드워드 리 싸이버거",
        "에드워드 리 비프버거",
        "시그니처불고기버거",
        "불불불불싸이버거",
        "텍사스바베큐치킨버거",
        "아라비아따치즈버거",
        "비프스테이크버거",
        "그릴드더블비프버거",
        "그릴드비프버거",
        "트리플딥치즈싸이버거",
        "쉬림프싸이플렉스버거",
        "딥치즈싸이버거",
        "화이트갈릭싸이버거",
        "싸이플렉스버거",
        "새우불고기버거",
        "싸이버거",
        "불싸이버거",
        "딥치즈버거",
        "인크레더블버거",
        "언빌리버블버거",
        "불고기버거",
        "통새우버거",
        "화이트갈릭버거",
        "디럭스불고기버거",
        "휠렛버거",
    )
    rules = NormalizationRules.build()
    policy = POLICY
    request_delay = 1.0
    static_nutrition = True

    def extract(self, ctx: ExtractionContext) -> ExtractionResult:
        result = ExtractionResult()
        for page in LIST_PAGES:
            try:
                html = self.fetch(ctx, LIST_URL.format(page=page))
            except FetchError as exc:
                result.errors.append(f"list page {page}: {exc}")
                continue
            result.candidates.extend(r for r in parse_list_page(html, page) if self.accepts(r.name))
        return result

    def enrich(self, ctx: ExtractionContext, target: str, candidate: CandidateRecord) -> CandidateRecord:
        if not candidate.detail_url:
            return candidate
        image_url, description = parse_detail_page(self.fetch(ctx, candidate.detail_url))
        return candidate.merged(
            CandidateRecord(name=candidate.name, image_url=image_url, description=description)
        )
