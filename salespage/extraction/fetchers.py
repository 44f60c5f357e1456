"""
Document Fetchers

Turn a URL into page HTML. The extractor depends only on the
`fetch(url, timeout, render_js)` capability, so any object with that
method can be plugged in (tests use in-memory fakes).

- StaticFetcher: plain HTTP GET with requests
- BrowserFetcher: headless Chromium via Playwright, for pages that
  build their content with JavaScript
- PageFetcher: picks one of the two per call based on `render_js`
"""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

import requests
from bs4.dammit import EncodingDetector, UnicodeDammit
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from ..common.constants import FETCH_TIMEOUT_SECONDS
from .errors import FetchError, ParseError

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
DEFAULT_ACCEPT_LANGUAGE = "pt-BR,pt;q=0.9,en;q=0.8"

# Content types that can be parsed as a document tree
_HTML_CONTENT_TYPES = ("text/html", "application/xhtml+xml", "application/xml", "text/xml")

_CHARSET_RE = re.compile(r"charset=[\"']?([\w.:-]+)", re.IGNORECASE)

_CHUNK_SIZE = 16 * 1024

_BROWSER_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
]


@dataclass(frozen=True)
class FetchedDocument:
    """Raw page as returned by a fetcher."""
    html: str
    final_url: str
    status_code: int = 200
    content_type: str = "text/html"


class DocumentFetcher(Protocol):
    def fetch(
        self, url: str, timeout: float = FETCH_TIMEOUT_SECONDS, render_js: bool = False
    ) -> FetchedDocument:
        ...


def _check_content_type(content_type: str, url: str) -> None:
    """Raise ParseError for payloads that are clearly not HTML."""
    mime = content_type.split(";")[0].strip().lower()
    if mime and mime not in _HTML_CONTENT_TYPES:
        raise ParseError(f"Unsupported content type: {mime}", url=url)


def decode_body(body: bytes, content_type: str = "") -> str:
    """
    Decode a response body to text.

    A charset in the Content-Type header is trusted first. Without one,
    the document's own <meta charset> is used, else UTF-8. If that
    encoding cannot decode the body, UnicodeDammit falls back to
    detection. requests' ISO-8859-1 default for charset-less text/*
    responses is never applied.
    """
    match = _CHARSET_RE.search(content_type or "")
    if match:
        encoding = match.group(1)
    else:
        encoding = EncodingDetector.find_declared_encoding(body, is_html=True) or "utf-8"
    dammit = UnicodeDammit(body, known_definite_encodings=[encoding], is_html=True)
    if dammit.unicode_markup is None:
        return body.decode("utf-8", errors="replace")
    return dammit.unicode_markup


class StaticFetcher:
    """
    Fetches page HTML with a single HTTP GET.

    The timeout bounds the whole fetch, not just each socket read: the
    body is streamed and the fetch is aborted once the deadline passes.
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        user_agent: str = DEFAULT_USER_AGENT,
        accept_language: str = DEFAULT_ACCEPT_LANGUAGE,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._session = session
        self._clock = clock
        self.headers = {
            "User-Agent": user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": accept_language,
        }

    def fetch(
        self, url: str, timeout: float = FETCH_TIMEOUT_SECONDS, render_js: bool = False
    ) -> FetchedDocument:
        """
        Fetch the page.

        Raises:
            FetchError: On connection failure, timeout or non-2xx status
            ParseError: If the response is not an HTML/XML document
        """
        requester = self._session or requests
        deadline = self._clock() + timeout
        try:
            response = requester.get(url, headers=self.headers, timeout=timeout, stream=True)
            try:
                response.raise_for_status()
                content_type = response.headers.get("Content-Type", "")
                _check_content_type(content_type, url)
                body = self._read_body(response, url, timeout, deadline)
            finally:
                response.close()
        except requests.Timeout:
            raise FetchError(f"Timed out after {timeout:g}s", url=url) from None
        except requests.RequestException as e:
            raise FetchError(f"{type(e).__name__}: {e}", url=url) from e

        return FetchedDocument(
            html=decode_body(body, content_type),
            final_url=response.url or url,
            status_code=response.status_code,
            content_type=content_type,
        )

    def _read_body(self, response, url: str, timeout: float, deadline: float) -> bytes:
        chunks = []
        for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
            chunks.append(chunk)
            if self._clock() > deadline:
                raise FetchError(f"Timed out after {timeout:g}s", url=url)
        return b"".join(chunks)


class BrowserFetcher:
    """
    Renders the page in headless Chromium and returns the resulting DOM.

    A fresh browser is launched per fetch and always closed afterwards,
    whether navigation succeeded, failed or timed out.
    """

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        wait_until: str = "networkidle",
        launch_args: Optional[list] = None,
    ):
        self.user_agent = user_agent
        self.wait_until = wait_until
        self.launch_args = launch_args if launch_args is not None else list(_BROWSER_ARGS)

    def fetch(
        self, url: str, timeout: float = FETCH_TIMEOUT_SECONDS, render_js: bool = True
    ) -> FetchedDocument:
        """
        Render the page.

        Raises:
            FetchError: On navigation failure, timeout or non-2xx status
            ParseError: If the main response is not an HTML document
        """
        timeout_ms = timeout * 1000
        try:
            with sync_playwright() as p:
                browser = p.chromium.launch(headless=True, args=self.launch_args)
                try:
                    page = browser.new_page(
                        viewport={"width": 1280, "height": 720},
                        user_agent=self.user_agent,
                    )
                    page.set_default_timeout(timeout_ms)
                    logger.debug("Navigating to %s", url)
                    response = page.goto(url, wait_until=self.wait_until, timeout=timeout_ms)

                    if response is not None:
                        if not response.ok:
                            raise FetchError(f"HTTP {response.status} for {url}", url=url)
                        content_type = response.headers.get("content-type", "text/html")
                        _check_content_type(content_type, url)
                        status_code = response.status
                    else:
                        content_type = "text/html"
                        status_code = 200

                    return FetchedDocument(
                        html=page.content(),
                        final_url=page.url or url,
                        status_code=status_code,
                        content_type=content_type,
                    )
                finally:
                    browser.close()
        except PlaywrightError as e:
            # TimeoutError is a subclass of playwright's Error
            raise FetchError(f"{type(e).__name__}: {e.message}", url=url) from e


class PageFetcher:
    """Default fetcher: static GET, or browser rendering when render_js is set."""

    def __init__(
        self,
        static: StaticFetcher | None = None,
        browser: BrowserFetcher | None = None,
    ):
        self.static = static or StaticFetcher()
        self.browser = browser or BrowserFetcher()

    def fetch(
        self, url: str, timeout: float = FETCH_TIMEOUT_SECONDS, render_js: bool = False
    ) -> FetchedDocument:
        fetcher = self.browser if render_js else self.static
        return fetcher.fetch(url, timeout=timeout, render_js=render_js)
