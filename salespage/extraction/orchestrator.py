"""
Sales Page Extractor

Sequences cache lookup → fetch → parse → field extraction → cache store
for one URL, and guarantees a well-formed ExtractionResult on every path.

Fetch and parse failures are caught here and turned into an
error-flagged result filled with fallback literals. Whether such
results are cached is controlled by the `cache_failures` setting
(off by default, so transient failures are retried).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from ..common.config_loader import load_settings
from ..common.constants import CACHE_TTL_MINUTES, FAILURE_DESCRIPTION, FETCH_TIMEOUT_SECONDS
from ..models import ErrorInfo, ExtractionResult
from .cache import ExtractionCache
from .errors import ExtractionError, FetchError
from .fetchers import (
    DEFAULT_ACCEPT_LANGUAGE,
    DEFAULT_USER_AGENT,
    BrowserFetcher,
    DocumentFetcher,
    PageFetcher,
    StaticFetcher,
)
from .field_extractor import FieldExtractorChain, parse_document

logger = logging.getLogger(__name__)


class SalesPageExtractor:
    """
    Extracts product data from sales pages, caching results per URL.

    Usage:
        extractor = SalesPageExtractor()
        result = extractor.extract("https://example.com/oferta")
        if result.error:
            ...  # fields still hold fallback literals
        extractor.lookup_cached("https://example.com/oferta")  # no fetch
    """

    def __init__(
        self,
        fetcher: Optional[DocumentFetcher] = None,
        cache: Optional[ExtractionCache] = None,
        chain: Optional[FieldExtractorChain] = None,
        settings: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize the extractor.

        Args:
            fetcher: Anything with fetch(url, timeout, render_js) (default: PageFetcher)
            cache: Result cache (default: fresh ExtractionCache with the configured TTL)
            chain: Field extractor chain (default: strategies from config/extraction.yaml)
            settings: Runtime settings (default: config/settings.yaml + environment)
        """
        if settings is None:
            settings = load_settings()
        self.settings = settings

        self.timeout = float(settings.get("fetch_timeout_seconds", FETCH_TIMEOUT_SECONDS))
        self.render_js = bool(settings.get("render_js", False))
        self.cache_failures = bool(settings.get("cache_failures", False))

        if fetcher is None:
            user_agent = settings.get("user_agent") or DEFAULT_USER_AGENT
            fetcher = PageFetcher(
                static=StaticFetcher(
                    user_agent=user_agent,
                    accept_language=settings.get("accept_language") or DEFAULT_ACCEPT_LANGUAGE,
                ),
                browser=BrowserFetcher(user_agent=user_agent),
            )
        self.fetcher = fetcher

        if cache is None:
            ttl_minutes = float(settings.get("cache_ttl_minutes", CACHE_TTL_MINUTES))
            cache = ExtractionCache(ttl_seconds=ttl_minutes * 60)
        self.cache = cache

        self.chain = chain if chain is not None else FieldExtractorChain()

    def extract(self, url: str, render_js: Optional[bool] = None) -> ExtractionResult:
        """
        Extract product data for url.

        Served from cache when a fresh entry exists; otherwise the page
        is fetched and extracted. Never raises for fetch, parse or
        extraction-quality problems; those surface via result.error.

        Args:
            url: Sales page URL
            render_js: Override the configured render_js setting for this call

        Returns:
            ExtractionResult (error-flagged with fallback fields on failure)
        """
        url = (url or "").strip()

        if url:
            cached = self.cache.get(url)
            if cached is not None:
                logger.info("Cache hit: %s", url)
                return cached

        if render_js is None:
            render_js = self.render_js

        try:
            if not url:
                raise FetchError("URL is required")
            logger.info("Fetching %s (render_js=%s)", url, render_js)
            document = self.fetcher.fetch(url, timeout=self.timeout, render_js=render_js)
            soup = parse_document(document.html, url=url)
        except ExtractionError as e:
            logger.error("Extraction failed for %s [%s]: %s", url or "<empty>", e.kind, e.message)
            return self._fail(url, e)
        except Exception as e:
            # Pluggable fetchers may raise anything; the result must still be well-formed
            logger.exception("Unexpected error fetching %s", url)
            return self._fail(url, FetchError(f"{type(e).__name__}: {e}", url=url))

        fields = self.chain.extract(soup)
        result = ExtractionResult(
            **fields,
            source_url=url,
            final_url=document.final_url,
        )
        self.cache.put(url, result)

        logger.info("Extracted %s: title=%r, price=%r, %d benefits, %d testimonials",
                    url, result.title, result.price,
                    len(result.benefits), len(result.testimonials))
        return result

    def lookup_cached(self, url: str) -> Optional[ExtractionResult]:
        """Return the cached result for url without fetching, or None."""
        url = (url or "").strip()
        if not url:
            return None
        return self.cache.get(url)

    def _fail(self, url: str, error: ExtractionError) -> ExtractionResult:
        result = self._failure_result(url, error)
        if self.cache_failures and url:
            self.cache.put(url, result)
        return result

    def _failure_result(self, url: str, error: ExtractionError) -> ExtractionResult:
        """Build an error-flagged result with every field at its fallback literal."""
        fields = self.chain.fallbacks()
        fields["description"] = FAILURE_DESCRIPTION
        return ExtractionResult(
            **fields,
            source_url=url,
            final_url=url,
            error=ErrorInfo(kind=error.kind, message=error.message),
        )
