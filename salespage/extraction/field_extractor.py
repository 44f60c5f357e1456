"""
Field Extractor Chain

Extracts the six semantic sales-page fields from a parsed document:
- Title from headings, title-bearing classes or document metadata
- Price from price-like classes, validated for a currency/number
- Description from content blocks (joined, truncated)
- Benefits and testimonials from list-like blocks (capped)
- Call-to-action from purchase buttons and checkout links

Each field is driven by a FieldPolicy (see strategies.py). Strategies are
tried in order and the first one producing a valid value is committed to;
results from different strategies are never blended. When nothing
matches, the field's fallback literal is used, so extraction itself
never fails.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterator, Optional, Tuple, Union

from bs4 import BeautifulSoup
from soupsieve import SelectorSyntaxError

from ..common.text_utils import normalize, truncate
from .errors import ParseError
from .strategies import FieldPolicy, SelectorStrategy, Validator, build_field_policies

logger = logging.getLogger(__name__)

# Tags whose text is never page content
_NON_CONTENT_TAGS = ["script", "style", "noscript", "template"]

FieldValue = Union[str, Tuple[str, ...]]


def parse_document(html: str, url: str = "") -> BeautifulSoup:
    """
    Parse fetched HTML into a document tree ready for extraction.

    Args:
        html: Page HTML
        url: Page URL (for error reporting only)

    Returns:
        BeautifulSoup tree with script/style/noscript/template removed

    Raises:
        ParseError: If the payload is empty or contains no markup at all
    """
    if not html or not html.strip():
        raise ParseError("Empty document", url=url)
    if "<" not in html:
        raise ParseError("Payload is not HTML (no markup found)", url=url)

    try:
        soup = BeautifulSoup(html, "lxml")
    except (ValueError, UnicodeError) as e:
        # e.g. lone surrogates that lxml cannot encode
        raise ParseError(f"Could not parse document: {type(e).__name__}", url=url) from e
    if soup.find() is None:
        raise ParseError("Could not build a document tree", url=url)

    for tag in soup(_NON_CONTENT_TAGS):
        tag.decompose()

    return soup


class FieldExtractorChain:
    """
    Runs the per-field strategy chains over a document.

    Usage:
        chain = FieldExtractorChain()
        fields = chain.extract(parse_document(html))
        fields["title"], fields["benefits"], ...
    """

    def __init__(self, policies: Optional[Dict[str, FieldPolicy]] = None):
        """
        Initialize the chain.

        Args:
            policies: Field policies (if None, built from config/extraction.yaml)
        """
        self.policies = policies if policies is not None else build_field_policies()

    def extract(self, soup: BeautifulSoup) -> Dict[str, FieldValue]:
        """
        Extract every field.

        Returns:
            Dictionary mapping field name to value (str, or tuple of str
            for list fields). Every value is non-empty.
        """
        return {name: self.extract_field(soup, policy) for name, policy in self.policies.items()}

    def fallbacks(self) -> Dict[str, FieldValue]:
        """Return the fallback literal of every field."""
        return {name: policy.fallback for name, policy in self.policies.items()}

    def extract_field(self, soup: BeautifulSoup, policy: FieldPolicy) -> FieldValue:
        """Try the policy's strategies in order; fall back to its literal."""
        for position, strategy in enumerate(policy.strategies, 1):
            value = self._apply(soup, policy, strategy)
            if value:
                logger.debug("%s: strategy #%d %r matched", policy.name, position, strategy.selector)
                return value

        logger.debug("%s: no strategy matched, using fallback", policy.name)
        return policy.fallback

    def _apply(
        self, soup: BeautifulSoup, policy: FieldPolicy, strategy: SelectorStrategy
    ) -> Optional[FieldValue]:
        texts = self._texts(soup, strategy)
        validator = policy.validator_for(strategy)

        if policy.mode == "single":
            for text in texts:
                value = self._accept(text, policy, validator)
                if value:
                    return value
            return None

        if policy.mode == "joined":
            parts = list(dict.fromkeys(text for text in texts if text))
            return self._accept(" ".join(parts), policy, validator)

        items = []
        for text in texts:
            item = self._accept(text, policy, validator)
            if item and item not in items:
                items.append(item)
                if policy.max_items and len(items) >= policy.max_items:
                    break
        return tuple(items) or None

    @staticmethod
    def _texts(soup: BeautifulSoup, strategy: SelectorStrategy) -> Iterator[str]:
        """Yield normalized text (or attribute value) of each matched node."""
        try:
            elements = soup.select(strategy.selector)
        except SelectorSyntaxError as e:
            logger.warning("Skipping invalid selector %r: %s", strategy.selector, e)
            return

        for element in elements:
            if strategy.attribute:
                raw = element.get(strategy.attribute)
                if isinstance(raw, list):
                    raw = " ".join(raw)
            else:
                raw = element.get_text(" ")
            yield normalize(raw)

    @staticmethod
    def _accept(text: str, policy: FieldPolicy, validator: Optional[Validator]) -> Optional[str]:
        """Apply length bounds and the validator; None means 'try the next candidate'."""
        if len(text) < policy.min_length:
            return None
        if validator is not None:
            text = validator(text)
            if not text:
                return None
        if policy.max_length and len(text) > policy.max_length:
            return None
        if policy.truncate_to:
            text = truncate(text, policy.truncate_to)
        return text
