"""
Extraction result models.

Pure data classes for representing what was extracted from a sales page.
No business logic - only data structure definitions and invariant checks.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from ..common.constants import (
    MAX_BENEFITS,
    MAX_DESCRIPTION_LENGTH,
    MAX_TESTIMONIALS,
)


@dataclass(frozen=True)
class ErrorInfo:
    """Why an extraction failed."""
    kind: str           # "fetch" or "parse"
    message: str


@dataclass(frozen=True)
class ExtractionResult:
    """
    Structured product data extracted from one sales page.

    Immutable once constructed. A result is either fully populated
    (error is None) or error-flagged; in both cases every field holds
    a display-ready value, so consumers never need to null-check.

    Field Groups:
    - Product fields: title, price, description, benefits, testimonials, call_to_action
    - Provenance: source_url (as requested), final_url (after redirects/rendering)
    - Metadata: extracted_at (UTC), error (failure details)
    """

    # Product fields
    title: str
    price: str
    description: str
    benefits: Tuple[str, ...]
    testimonials: Tuple[str, ...]
    call_to_action: str

    # Provenance
    source_url: str
    final_url: str = ""

    # Metadata
    extracted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    error: Optional[ErrorInfo] = None

    def __post_init__(self):
        """Validate invariants after initialization."""
        # Lists passed by callers are frozen so the result stays immutable
        object.__setattr__(self, "benefits", tuple(self.benefits))
        object.__setattr__(self, "testimonials", tuple(self.testimonials))

        for name in ("title", "price", "description", "call_to_action"):
            if not getattr(self, name):
                raise ValueError(f"{name} is required")
        if len(self.description) > MAX_DESCRIPTION_LENGTH:
            raise ValueError(
                f"description too long ({len(self.description)} chars, max {MAX_DESCRIPTION_LENGTH})"
            )
        if len(self.benefits) > MAX_BENEFITS:
            raise ValueError(f"too many benefits ({len(self.benefits)}, max {MAX_BENEFITS})")
        if len(self.testimonials) > MAX_TESTIMONIALS:
            raise ValueError(
                f"too many testimonials ({len(self.testimonials)}, max {MAX_TESTIMONIALS})"
            )
        if any(not item for item in self.benefits + self.testimonials):
            raise ValueError("benefits and testimonials must not contain empty items")

        if not self.final_url:
            object.__setattr__(self, "final_url", self.source_url)

    @property
    def succeeded(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize to a JSON-ready dict.

        Keys follow the public API naming (camelCase, `cta`, `url`).
        """
        data = {
            "title": self.title,
            "price": self.price,
            "description": self.description,
            "benefits": list(self.benefits),
            "testimonials": list(self.testimonials),
            "cta": self.call_to_action,
            "url": self.source_url,
            "finalUrl": self.final_url,
            "extractedAt": self.extracted_at.isoformat(),
        }
        if self.error is not None:
            data["error"] = self.error.message
            data["errorKind"] = self.error.kind
        return data
