"""Headless browser access for pages that only render client side.

``BrowserSession`` owns the Playwright process and is always used as a scoped
resource. Profiles talk to pages through the small ``PageDriver`` surface so
the modal state machine can be exercised with a fake page in tests.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Generic, List, Optional, Sequence, TypeVar

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from burgerlab.core.config import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BrowserError(Exception):
    """Navigation, selector or script failure inside the headless browser."""


class PageDriver:
    """Operations the extractors need from a rendered page."""

    url: str = ""

    def goto(self, url: str) -> None:
        raise NotImplementedError

    def html(self) -> str:
        raise NotImplementedError

    def count(self, selector: str) -> int:
        raise NotImplementedError

    def click(self, selector: str, texts: Sequence[str] = (), index: int = 0) -> bool:
        """Click the ``index``-th match whose text contains one of ``texts``."""
        raise NotImplementedError

    def is_visible(self, selector: str) -> bool:
        raise NotImplementedError

    def wait_for(self, selector: str, timeout_ms: int) -> bool:
        raise NotImplementedError

    def wait(self, ms: int) -> None:
        raise NotImplementedError

    def scroll_to_bottom(self, steps: int = 5, pause_ms: int = 500) -> None:
        raise NotImplementedError

    def evaluate(self, script: str, arg: Any = None) -> Any:
        raise NotImplementedError

    def close(self) -> None:
        pass


class PlaywrightPage(PageDriver):
    def __init__(self, page, navigation_timeout_ms: int) -> None:
        self._page = page
        self._page.set_default_navigation_timeout(navigation_timeout_ms)
        self._page.set_default_timeout(navigation_timeout_ms)

    @property
    def url(self) -> str:  # type: ignore[override]
        return self._page.url

    def goto(self, url: str) -> None:
        try:
            self._page.goto(url, wait_until="networkidle")
        except PlaywrightError as exc:
            raise BrowserError(f"goto {url}: {exc}") from exc

    def html(self) -> str:
        return self._page.content()

    def count(self, selector: str) -> int:
        return self._page.locator(selector).count()

    def click(self, selector: str, texts: Sequence[str] = (), index: int = 0) -> bool:
        locator = self._page.locator(selector)
        hits = []
        for i in range(locator.count()):
            element = locator.nth(i)
            if texts:
                label = (element.inner_text() or "").strip()
                if not any(text in label for text in texts):
                    continue
            hits.append(element)
        if len(hits) <= index:
            return False
        try:
            hits[index].click()
        except PlaywrightError as exc:
            raise BrowserError(f"click {selector}: {exc}") from exc
        return True

    def is_visible(self, selector: str) -> bool:
        locator = self._page.locator(selector)
        return any(locator.nth(i).is_visible() for i in range(locator.count()))

    def wait_for(self, selector: str, timeout_ms: int) -> bool:
        try:
            self._page.wait_for_selector(selector, timeout=timeout_ms)
        except PlaywrightError:
            return False
        return True

    def wait(self, ms: int) -> None:
        self._page.wait_for_timeout(ms)

    def scroll_to_bottom(self, steps: int = 5, pause_ms: int = 500) -> None:
        for _ in range(steps):
            self._page.evaluate("window.scrollTo(0, document.body.scrollHeight)")
            self._page.wait_for_timeout(pause_ms)

    def evaluate(self, script: str, arg: Any = None) -> Any:
        try:
            return self._page.evaluate(script, arg)
        except PlaywrightError as exc:
            raise BrowserError(f"evaluate: {exc}") from exc

    def close(self) -> None:
        self._page.close()


class BrowserSession:
    def __init__(self, *, headless: bool = True, navigation_timeout_ms: int = 30000,
                 user_agent: Optional[str] = None) -> None:
        self.headless = headless
        self.navigation_timeout_ms = navigation_timeout_ms
        self.user_agent = user_agent
        self._playwright = None
        self._browser = None
        self._context = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "BrowserSession":
        return cls(
            headless=settings.scraper_headless,
            navigation_timeout_ms=settings.scraper_navigation_timeout_ms,
            user_agent=settings.scraper_user_agent,
        )

    def start(self) -> "BrowserSession":
        if self._context is not None:
            return self
        logger.info("Starting headless chromium (headless=%s)", self.headless)
        self._playwright = sync_playwright().start()
        try:
            self._browser = self._playwright.chromium.launch(headless=self.headless)
            self._context = self._browser.new_context(
                user_agent=self.user_agent,
                locale="ko-KR",
                viewport={"width": 1920, "height": 1080},
            )
        except Exception:
            self.close()
            raise
        return self

    def new_page(self) -> PageDriver:
        if self._context is None:
            self.start()
        return PlaywrightPage(self._context.new_page(), self.navigation_timeout_ms)

    def close(self) -> None:
        try:
            if self._browser is not None:
                self._browser.close()
        finally:
            if self._playwright is not None:
                self._playwright.stop()
            self._playwright = self._browser = self._context = None
            logger.info("Headless chromium closed")

    def __enter__(self) -> "BrowserSession":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class ModalState(str, Enum):
    START = "start"
    PAGE_LOADED = "page_loaded"
    TRIGGER_FOUND = "trigger_found"
    MODAL_OPEN = "modal_open"
    DATA_EXTRACTED = "data_extracted"


class ModalFlow(Generic[T]):
    """Open a detail page, pop its info modal and extract data from it.

    States advance PAGE_LOADED -> TRIGGER_FOUND -> MODAL_OPEN ->
    DATA_EXTRACTED. Each transition gets ``attempts`` tries with ``wait_ms``
    between them. When a transition runs out of tries the flow stops in the
    last state it reached and ``run`` returns None.
    """

    def __init__(
        self,
        page: PageDriver,
        *,
        trigger_selectors: Sequence[str],
        trigger_texts: Sequence[str],
        modal_selector: str,
        extract: Callable[[str], Optional[T]],
        attempts: int = 3,
        wait_ms: int = 1000,
    ) -> None:
        self.page = page
        self.trigger_selectors = tuple(trigger_selectors)
        self.trigger_texts = tuple(trigger_texts)
        self.modal_selector = modal_selector
        self.extract = extract
        self.attempts = max(1, attempts)
        self.wait_ms = wait_ms
        self.state = ModalState.START
        self.history: List[ModalState] = []
        self.failure: Optional[str] = None
        self._trigger: Optional[str] = None
        self._data: Optional[T] = None

    def _advance(self, state: ModalState) -> None:
        self.state = state
        self.history.append(state)

    def _retry(self, step: Callable[[], bool], label: str) -> bool:
        last_error = None
        for attempt in range(self.attempts):
            if attempt:
                self.page.wait(self.wait_ms)
            try:
                if step():
                    return True
            except BrowserError as exc:
                last_error = str(exc)
        self.failure = f"{label} failed after {self.attempts} attempts" + (
            f": {last_error}" if last_error else ""
        )
        logger.debug("ModalFlow stopped in %s: %s", self.state.value, self.failure)
        return False

    def _load(self, url: str) -> bool:
        self.page.goto(url)
        return True

    def _find_trigger(self) -> bool:
        for selector in self.trigger_selectors:
            if self.page.count(selector):
                self._trigger = selector
                return True
        return False

    def _open_modal(self) -> bool:
        if self._trigger is None:
            return False
        clicked = self.page.click(self._trigger, self.trigger_texts)
        if not clicked:
            # fall back to any matching trigger when none carries the expected label
            clicked = self.page.click(self._trigger)
        if not clicked:
            return False
        self.page.wait(self.wait_ms)
        return self.page.is_visible(self.modal_selector)

    def _extract(self) -> bool:
        self._data = self.extract(self.page.html())
        return self._data is not None

    def run(self, url: str) -> Optional[T]:
        if not self._retry(lambda: self._load(url), "page load"):
            return None
        self._advance(ModalState.PAGE_LOADED)
        if not self._retry(self._find_trigger, "modal trigger lookup"):
            return None
        self._advance(ModalState.TRIGGER_FOUND)
        if not self._retry(self._open_modal, "modal open"):
            return None
        self._advance(ModalState.MODAL_OPEN)
        if not self._retry(self._extract, "data extraction"):
            return None
        self._advance(ModalState.DATA_EXTRACTED)
        return self._data
