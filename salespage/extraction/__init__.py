"""
Sales page extraction modules.

Modules:
    strategies - Declarative per-field strategy lists and validators
    field_extractor - FieldExtractorChain and parse_document
    fetchers - Static (requests) and rendered (Playwright) page fetchers
    cache - ExtractionCache, TTL cache keyed by URL
    orchestrator - SalesPageExtractor, the extract/lookup entry point
    errors - FetchError / ParseError
"""

from .cache import CacheEntry, ExtractionCache
from .errors import ExtractionError, FetchError, ParseError
from .fetchers import BrowserFetcher, FetchedDocument, PageFetcher, StaticFetcher
from .field_extractor import FieldExtractorChain, parse_document
from .orchestrator import SalesPageExtractor
from .strategies import FieldPolicy, SelectorStrategy, build_field_policies, validate_price

__all__ = [
    # Entry point
    'SalesPageExtractor',
    # Cache
    'ExtractionCache',
    'CacheEntry',
    # Extraction
    'FieldExtractorChain',
    'parse_document',
    'FieldPolicy',
    'SelectorStrategy',
    'build_field_policies',
    'validate_price',
    # Fetchers
    'FetchedDocument',
    'StaticFetcher',
    'BrowserFetcher',
    'PageFetcher',
    # Errors
    'ExtractionError',
    'FetchError',
    'ParseError',
]
