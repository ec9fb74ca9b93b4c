from __future__ import annotations

import logging
import time
from typing import Callable, Optional

import requests

from burgerlab.core.config import Settings, get_settings

from .browser import BrowserSession

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """A page could not be fetched (network error, timeout or bad status)."""


def _http_session(settings: Settings) -> requests.Session:
    s = requests.Session()
    s.trust_env = False  # ignore proxy env variables
    s.headers.update({
        "User-Agent": settings.scraper_user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
        "Accept-Language": settings.scraper_accept_language,
    })
    return s


class HttpFetcher:
    """Throttled HTML fetcher.

    Sleeps a fixed delay before every request; there is no adaptive backoff.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.settings = settings or get_settings()
        self.session = session or _http_session(self.settings)
        self._sleep = sleep

    def get_text(
        self,
        url: str,
        *,
        delay: Optional[float] = None,
        attempts: Optional[int] = None,
        retry_wait: float = 0.0,
    ) -> str:
        attempts = max(1, attempts or self.settings.scraper_request_retries)
        wait = self.settings.scraper_request_delay if delay is None else delay
        last_error: Optional[str] = None
        for attempt in range(1, attempts + 1):
            if attempt > 1 and retry_wait:
                self._sleep(retry_wait)
            elif wait:
                self._sleep(wait)
            try:
                resp = self.session.get(url, timeout=self.settings.scraper_request_timeout)
            except requests.RequestException as exc:
                last_error = f"{type(exc).__name__}: {exc}"
                logger.warning("GET %s failed (attempt %d/%d): %s", url, attempt, attempts, last_error)
                continue
            if resp.status_code != 200:
                last_error = f"HTTP {resp.status_code}"
                logger.warning("GET %s returned %s (attempt %d/%d)", url, resp.status_code, attempt, attempts)
                continue
            if not resp.encoding or resp.encoding.lower() == "iso-8859-1":
                resp.encoding = resp.apparent_encoding
            return resp.text
        raise FetchError(f"{url}: {last_error}")

    def close(self) -> None:
        self.session.close()


class ExtractionContext:
    """Resources for one ingest run.

    The HTTP session is created up front; the headless browser is only started
    when a profile asks for it. Both are closed on exit, also on errors.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        http: Optional[HttpFetcher] = None,
        browser_factory: Optional[Callable[[], BrowserSession]] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.http = http or HttpFetcher(self.settings)
        self._browser_factory = browser_factory or (lambda: BrowserSession.from_settings(self.settings))
        self._browser: Optional[BrowserSession] = None

    @property
    def browser(self) -> BrowserSession:
        if self._browser is None:
            self._browser = self._browser_factory()
            self._browser.start()
        return self._browser

    @property
    def browser_started(self) -> bool:
        return self._browser is not None

    def close(self) -> None:
        try:
            if self._browser is not None:
                self._browser.close()
        finally:
            self._browser = None
            self.http.close()

    def __enter__(self) -> "ExtractionContext":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
