"""
Extraction Strategies

Declarative per-field strategy lists and the validators they reference.

Each semantic field (title, price, ...) gets a FieldPolicy: an ordered
tuple of selector strategies plus bounds and a fallback literal. The
policies are built from config/extraction.yaml so strategies can be
added or reordered without touching the traversal code in
field_extractor.py.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple, Union

from ..common.config_loader import load_extraction_config
from ..common.constants import (
    DEFAULT_BENEFITS,
    DEFAULT_CALL_TO_ACTION,
    DEFAULT_DESCRIPTION,
    DEFAULT_PRICE,
    DEFAULT_TESTIMONIALS,
    DEFAULT_TITLE,
    MAX_BENEFITS,
    MAX_DESCRIPTION_LENGTH,
    MAX_TESTIMONIALS,
)
from ..common.text_utils import normalize, truncate

Validator = Callable[[str], Optional[str]]

FIELD_NAMES = ("title", "price", "description", "benefits", "testimonials", "call_to_action")

FALLBACKS: Dict[str, Union[str, Tuple[str, ...]]] = {
    "title": DEFAULT_TITLE,
    "price": DEFAULT_PRICE,
    "description": DEFAULT_DESCRIPTION,
    "benefits": DEFAULT_BENEFITS,
    "testimonials": DEFAULT_TESTIMONIALS,
    "call_to_action": DEFAULT_CALL_TO_ACTION,
}

MODES = frozenset({"single", "joined", "list"})

# Caps that hold no matter what the YAML says
_MAX_ITEMS = {"benefits": MAX_BENEFITS, "testimonials": MAX_TESTIMONIALS}
_MAX_TRUNCATE = {"description": MAX_DESCRIPTION_LENGTH}


# ── Price validation ─────────────────────────────────────────────────────────

_CURRENCY_MARKERS = ("R$", "US$", "$", "€", "£", "¥", "₹")

# 1.299,90 | 1,299.90 | 49,90 | 49
_NUMBER = r"\d{1,3}(?:\.\d{3})+(?:,\d{2})?|\d{1,3}(?:,\d{3})+(?:\.\d{2})?|\d+(?:[.,]\d+)?"
_NUMBER_RE = re.compile(_NUMBER)
_CURRENCY_AMOUNT_RE = re.compile(
    rf"(?:R\$|US\$|\$|€|£|¥|₹)\s?(?:{_NUMBER})"
    rf"|(?:{_NUMBER})\s?(?:R\$|€|reais\b)",
    re.IGNORECASE,
)
# Skips installment counts ("12x de 49,90")
_NUMERIC_RE = re.compile(r"(?<![\d,.])\d+[,.]?\d+(?!\d|\s*[xX]\b)")

_MAX_PRICE_TEXT = 60


def validate_price(text: str) -> Optional[str]:
    """
    Accept a price candidate and reduce it to the price itself.

    A candidate qualifies if it holds a currency marker or a number
    like `49,90` / `49.90` / `49`. Surrounding words ("hoje",
    "à vista", "12x de") are dropped.

    Returns:
        Currency amount (e.g. "R$ 49,90"), else the bare number,
        else the marker-bearing text capped at 60 chars; None if the
        candidate has neither marker nor number.
    """
    match = _CURRENCY_AMOUNT_RE.search(text)
    if match:
        return normalize(match.group(0))

    numeric = _NUMERIC_RE.search(text)
    if numeric:
        return _NUMBER_RE.match(text, numeric.start()).group(0)

    if any(marker in text for marker in _CURRENCY_MARKERS):
        return truncate(text, _MAX_PRICE_TEXT)

    return None


VALIDATORS: Dict[str, Validator] = {
    "price": validate_price,
}


# ── Policy data ──────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SelectorStrategy:
    """One CSS selector to try, optionally reading an attribute instead of text."""
    selector: str
    attribute: str = ""
    validator: str = ""


@dataclass(frozen=True)
class FieldPolicy:
    """How one semantic field is extracted."""
    name: str
    mode: str
    strategies: Tuple[SelectorStrategy, ...]
    fallback: Union[str, Tuple[str, ...]]
    validator: str = ""
    min_length: int = 1
    max_length: int = 0     # reject longer candidates (0 = unbounded)
    max_items: int = 0      # list mode cap (0 = unbounded)
    truncate_to: int = 0    # cut accepted value to this length (0 = no cut)

    def validator_for(self, strategy: SelectorStrategy) -> Optional[Validator]:
        """Strategy-level validator wins over the field-level one."""
        name = strategy.validator or self.validator
        return VALIDATORS[name] if name else None


def _build_strategy(field_name: str, entry: Union[str, Dict[str, Any]]) -> SelectorStrategy:
    if isinstance(entry, str):
        entry = {"selector": entry}

    selector = (entry.get("selector") or "").strip()
    if not selector:
        raise ValueError(f"{field_name}: strategy without selector: {entry!r}")

    validator = entry.get("validator") or ""
    if validator and validator not in VALIDATORS:
        raise ValueError(f"{field_name}: unknown validator {validator!r}")

    return SelectorStrategy(
        selector=selector,
        attribute=entry.get("attribute") or "",
        validator=validator,
    )


def _clamp(value: int, cap: Optional[int]) -> int:
    if cap is None:
        return value
    return min(value, cap) if value > 0 else cap


def build_field_policies(config: Optional[Dict[str, Any]] = None) -> Dict[str, FieldPolicy]:
    """
    Build the FieldPolicy for every semantic field.

    Args:
        config: Field config dict (if None, loads config/extraction.yaml)

    Returns:
        Dictionary mapping field name to FieldPolicy, in FIELD_NAMES order

    Raises:
        ValueError: On an unknown mode/validator, or a mode that does not
            fit the field (list fields must use 'list')
    """
    if config is None:
        config = load_extraction_config()

    policies = {}
    for name in FIELD_NAMES:
        field_config = config.get(name) or {}
        fallback = FALLBACKS[name]
        is_list_field = isinstance(fallback, tuple)

        mode = field_config.get("mode") or ("list" if is_list_field else "single")
        if mode not in MODES:
            raise ValueError(f"{name}: unknown mode {mode!r}")
        if (mode == "list") != is_list_field:
            raise ValueError(f"{name}: mode {mode!r} does not fit this field")

        validator = field_config.get("validator") or ""
        if validator and validator not in VALIDATORS:
            raise ValueError(f"{name}: unknown validator {validator!r}")

        policies[name] = FieldPolicy(
            name=name,
            mode=mode,
            strategies=tuple(_build_strategy(name, entry) for entry in field_config.get("strategies", [])),
            fallback=fallback,
            validator=validator,
            min_length=max(1, int(field_config.get("min_length", 1))),
            max_length=int(field_config.get("max_length", 0)),
            max_items=_clamp(int(field_config.get("max_items", 0)), _MAX_ITEMS.get(name)),
            truncate_to=_clamp(int(field_config.get("truncate_to", 0)), _MAX_TRUNCATE.get(name)),
        )

    return policies
